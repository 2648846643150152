"""Job sources, event envelopes, description parsing, matching, profile checks, resume drafting and notifications."""

__version__ = "0.1.0"

__all__ = [
    "events",
    "matcher",
    "notification",
    "parser",
    "profile",
    "scheduler",
    "sources",
    "tuner",
    "views",
]