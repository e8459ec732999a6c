"""Eye drops reminder: interval reminders inside a daily time window."""

__version__ = "1.0.0"
