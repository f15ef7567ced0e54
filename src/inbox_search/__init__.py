"""Inbox Search - Gmail-style search for the CRM mail inbox.

This package provides the query language (tokenizer, parser, evaluator),
folder bucketing, autocomplete suggestions and the session state that ties
an asynchronously refreshed thread list to a local read/unread overlay.
"""

__version__ = "0.1.0"
__author__ = "Trickl"

from inbox_search.config import Settings, get_settings

__all__ = ["Settings", "get_settings", "__version__", "__author__"]
