"""Inbox Responder - answer unread Gmail messages with quick templates.

This package lists the unread Gmail inbox, drafts replies from canned
templates or the sender's snippet, and sends them threaded to the original.
"""

__version__ = "0.1.0"

from inbox_responder.config import Settings, get_settings

__all__ = ["Settings", "get_settings", "__version__"]
