# errors.py


class DigestError(Exception):
    """Base class for failures while digesting a message."""


class MalformedMessageError(DigestError):
    """The raw message has no parseable header block."""


class BadMultipartError(DigestError):
    """A multipart content type without a usable boundary."""

    def __init__(self, content_type: str):
        super().__init__(f"bad content type: {content_type}")
        self.content_type = content_type


class TransferDecodeError(DigestError):
    """A declared quoted-printable body failed to decode."""


class MultipartReadError(DigestError):
    """A part inside a multipart body could not be read; ends the sibling scan."""
