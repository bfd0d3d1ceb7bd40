# transfer.py
import base64
import binascii
import logging
import quopri
import re
from typing import Optional

from errors import TransferDecodeError

logger = logging.getLogger(__name__)

# a stray "=" is kept as a literal; only an escape cut off by the end of the
# data or a raw control character is an error
_TRUNCATED_QP_ESCAPE = re.compile(r"=[^ \t\r\n][ \t\r]*\Z")
_QP_CONTROL_CHAR = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]")


def probe_base64(text: str) -> Optional[str]:
    """Return the decoded text if `text` is valid base64 (url-safe or standard), else None."""
    compact = text.replace("\r", "").replace("\n", "")
    for altchars in (b"-_", None):
        try:
            decoded = base64.b64decode(compact, altchars=altchars, validate=True)
        except (binascii.Error, ValueError):
            continue
        return decoded.decode("utf-8", errors="replace")
    return None


def decode_quoted_printable(text: str) -> str:
    truncated = _TRUNCATED_QP_ESCAPE.search(text)
    if truncated:
        raise TransferDecodeError(f"truncated quoted-printable escape {truncated.group().rstrip()!r} "
                                  f"at offset {truncated.start()}")
    control = _QP_CONTROL_CHAR.search(text)
    if control:
        raise TransferDecodeError(f"invalid unescaped byte 0x{ord(control.group()):02x} "
                                  f"in quoted-printable body at offset {control.start()}")
    return quopri.decodestring(text.encode("utf-8")).decode("utf-8", errors="replace")


def decode(body: str, transfer_encoding: Optional[str]) -> str:
    """
    Undo the transfer encoding of a body.

    Senders are sloppy about declaring base64, so every body gets a base64
    probe first; a body that doesn't parse is kept as is. A declared
    quoted-printable encoding is then applied and its failures raise
    TransferDecodeError. Anything else is left alone.
    """
    decoded = probe_base64(body)
    if decoded is not None:
        logger.debug("body decoded as base64 (%d -> %d chars)", len(body), len(decoded))
        body = decoded

    if (transfer_encoding or "").strip().lower() == "quoted-printable":
        body = decode_quoted_printable(body)
    return body
