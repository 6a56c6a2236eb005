"""
Error taxonomy for storage actions.

Validation and local file failures get their own exception types so the
HTTP layer can map them to status codes. Backend failures are botocore's
own exceptions and pass through untouched; ``BackendError`` only names
them for ``except`` clauses.
"""

from botocore.exceptions import BotoCoreError, ClientError


class ActionError(Exception):
    """Base class for failures raised by the action layer itself."""
    pass


class ValidationError(ActionError, ValueError):
    """A required option is missing or has the wrong type."""

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.field = field


class FileAccessError(ActionError, FileNotFoundError):
    """The local file for an upload could not be located."""

    def __init__(self, message: str, identifier: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.identifier = identifier


class UnknownActionError(ActionError, LookupError):
    """No action is registered under the requested name."""
    pass


# Raised by boto3 when the backend rejects a request or the transport fails.
BackendError = (ClientError, BotoCoreError)
