"""Gmail API access: client, thread parsing and a thread store."""

from .client import GmailClient
from .parsing import message_to_model, thread_to_model
from .store import GmailThreadStore

__all__ = ["GmailClient", "GmailThreadStore", "message_to_model", "thread_to_model"]
