"""slotbook - provider schedules, slot claims and the appointment ledger"""

__version__ = "0.1.0"
