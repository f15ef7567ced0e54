"""Session state: read overlay, pagination and the inbox session."""

from .inbox import InboxSession
from .overlay import ReadStateOverlay
from .pagination import page_count, paginate

__all__ = ["InboxSession", "ReadStateOverlay", "page_count", "paginate"]
