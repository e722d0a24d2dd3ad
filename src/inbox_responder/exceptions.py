"""Custom exceptions for Inbox Responder."""


class InboxResponderError(Exception):
    """Base exception for all Inbox Responder errors."""


class ConfigurationError(InboxResponderError):
    """Exception raised for configuration related errors."""


class AuthenticationError(InboxResponderError):
    """Exception raised when no usable mailbox credential is available.

    Kept distinct from data errors so callers can prompt for sign-in
    instead of showing a generic failure.
    """


class GmailAPIError(InboxResponderError):
    """Exception raised for Gmail API related errors."""


class InboxSyncError(InboxResponderError):
    """Exception raised when the unread inbox cannot be loaded."""


class ValidationError(InboxResponderError):
    """Exception raised when a reply is missing a required field."""


class ReplyDispatchError(InboxResponderError):
    """Exception raised when the provider rejects or fails a reply send."""


class UnknownTemplateError(InboxResponderError, KeyError):
    """Exception raised for a quick reply template id that does not exist."""
