"""Custom exceptions for Inbox Search."""


class InboxSearchError(Exception):
    """Base exception for all Inbox Search errors."""


class ThreadStoreError(InboxSearchError):
    """Exception raised when a thread store cannot serve a request."""


class GmailAPIError(ThreadStoreError):
    """Exception raised for Gmail API related errors."""


class ConfigurationError(InboxSearchError):
    """Exception raised for configuration related errors."""


class AuthenticationError(InboxSearchError):
    """Exception raised for authentication failures."""
