"""Exception taxonomy for the contact form pipeline.

Only :class:`DecodeError` and :class:`ValidationError` reach the caller with
specific detail.  :class:`SendError` is genericized into a 500 response, and
:class:`ClassificationError` / :class:`RecorderError` never leave their
component.
"""

from __future__ import annotations


class ContactFormError(Exception):
    """Base class for all contact form errors."""


class DecodeError(ContactFormError):
    """The request body could not be decoded into a key/value mapping."""


class ValidationError(ContactFormError):
    """A submitted field failed validation.

    Carries the name of the single offending field so the response can
    point the user at it.
    """

    def __init__(self, field: str, message: str) -> None:
        super().__init__(message)
        self.field = field
        self.message = message


class ClassificationError(ContactFormError):
    """The classification model could not produce a usable result."""


class RecorderError(ContactFormError):
    """A blocked submission could not be written to the store."""


class SendError(ContactFormError):
    """The notification email could not be dispatched."""
