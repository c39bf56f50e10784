"""Custom exceptions for the synchronize module."""


class UserCancelledError(Exception):
    """Raised when the user cancels at a prompt.

    This is not a failure: the sync stops quietly, and files already written
    stay written.
    """

    def __init__(self, message: str = "Cancelled by user") -> None:
        super().__init__(message)
