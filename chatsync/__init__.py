"""chatsync: keeps booking-provider records and chat conversations in sync."""

__version__ = "0.1.0"
