from __future__ import annotations


class LibraryError(Exception):
    """Base for failures a manager reports back to its caller."""

    status_code = 400

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class NotFoundError(LibraryError):
    status_code = 404


class ConfirmationRequiredError(LibraryError):
    status_code = 400


class ConflictError(LibraryError):
    status_code = 409


class NoCopiesAvailableError(ConflictError):
    pass


class MemberInactiveError(ConflictError):
    pass


class StoreError(LibraryError):
    """The store failed a read or write; the session was rolled back."""

    status_code = 503
