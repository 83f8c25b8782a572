"""Event registration server with Discord webhook notifications"""

__version__ = "1.0.0"
