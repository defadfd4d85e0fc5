import asyncio
import threading
from datetime import datetime
from typing import Any, Awaitable, Callable, List

# Pinned reference clock for every test
NOW = datetime(2024, 6, 1, 10, 30, 0)
TODAY = "2024-06-01"


def run_in_threads(count: int, make_call: Callable[[int], Awaitable[Any]]) -> List[Any]:
    """
    Run ``make_call(i)`` on ``count`` OS threads, each with its own event
    loop, released together by a barrier. Exceptions are returned in place
    of results.
    """
    barrier = threading.Barrier(count)
    results: List[Any] = [None] * count

    def worker(index: int):
        barrier.wait()
        try:
            results[index] = asyncio.run(make_call(index))
        except Exception as e:
            results[index] = e

    threads = [threading.Thread(target=worker, args=(i,)) for i in range(count)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join(timeout=30)
    return results
