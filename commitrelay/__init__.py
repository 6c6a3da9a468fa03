"""commitrelay: forward recent GitHub commits to a downstream update service."""

__version__ = "0.1.0"
