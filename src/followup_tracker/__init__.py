"""Customer follow-up tracker: promised-payment reminders and data interchange."""

__version__ = "0.1.0"
