"""authforge: Flutter + Firebase authentication project bootstrapper."""

__version__ = "0.1.0"
