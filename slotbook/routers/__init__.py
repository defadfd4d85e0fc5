from . import appointments, doctors, patients

__all__ = ["appointments", "doctors", "patients"]
