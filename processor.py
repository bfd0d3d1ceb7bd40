# processor.py
import logging
import re
from email.errors import FirstHeaderLineIsContinuationDefect, MissingHeaderBodySeparatorDefect
from email.message import Message
from email.parser import HeaderParser
from typing import Iterator, List, Optional, Tuple

import quotes
import transfer
from errors import BadMultipartError, DigestError, MalformedMessageError, MultipartReadError
from html_text import html_to_text
from models import MimePart
from options import DigestOptions

logger = logging.getLogger(__name__)

_LINE_BREAK = re.compile(r"\r?\n")
_FOLD = re.compile(r"\r?\n[ \t]+")
_MALFORMED_HEADER_DEFECTS = (MissingHeaderBodySeparatorDefect, FirstHeaderLineIsContinuationDefect)


def unfold(value: Optional[str]) -> str:
    return _FOLD.sub(" ", value or "").strip()


def limit_lines(text: str, line_limit: int = 0, col_limit: int = 0) -> str:
    """Keep at most line_limit lines of at most col_limit characters (0 = no limit)."""
    lines = text.split("\n")
    if line_limit > 0:
        lines = lines[:line_limit]
    if col_limit > 0:
        lines = [line[:col_limit] for line in lines]
    return "\n".join(lines)


def parse_content_type(content_type: str) -> Tuple[str, Optional[str]]:
    """Return the lowercased media type and the boundary parameter of a Content-Type value."""
    msg = Message()
    msg["Content-Type"] = unfold(content_type)
    return msg.get_content_type(), msg.get_boundary()


def _read_headers(text: str) -> Message:
    headers = HeaderParser().parsestr(text)
    if any(isinstance(d, _MALFORMED_HEADER_DEFECTS) for d in headers.defects):
        raise MultipartReadError("unreadable part header block")
    return headers


def iter_parts(body: str, boundary: str) -> Iterator[MimePart]:
    """
    Split a multipart body on its boundary.

    The preamble and epilogue are ignored. A part that isn't followed by a
    delimiter, or whose header block can't be read, raises MultipartReadError
    after the parts before it have been yielded.
    """
    delimiter = "--" + boundary
    close = delimiter + "--"
    current: Optional[List[str]] = None

    for line in _LINE_BREAK.split(body):
        marker = line.rstrip(" \t")
        if marker == delimiter or marker == close:
            if current is not None:
                headers = _read_headers("\n".join(current))
                yield MimePart(
                    content_type=unfold(headers.get("content-type")),
                    transfer_encoding=unfold(headers.get("content-transfer-encoding")),
                    body=headers.get_payload() or "",
                )
            if marker == close:
                return
            current = []
        elif current is not None:
            current.append(line)

    if current is not None:
        raise MultipartReadError(f"missing closing boundary {boundary!r}")


def _walk_multipart(body: str, content_type: str, options: DigestOptions) -> str:
    media_type, boundary = parse_content_type(content_type)
    maintype, _, subtype = media_type.partition("/")
    if maintype != "multipart" or not subtype or not boundary:
        raise BadMultipartError(content_type)

    results = []
    try:
        for part in iter_parts(body, boundary):
            try:
                text = _walk(part, options)
            except DigestError as e:
                logger.debug("Skipping %s part: %s", part.media_type or "untyped", e)
                continue
            if text:
                results.append(text)
    except MultipartReadError as e:
        logger.warning("Stopped reading %s after %d part(s): %s", media_type, len(results), e)

    # alternatives carry the same content, the first rendering is enough
    if subtype == "alternative" and results:
        return results[0]
    return "\n\n".join(results)


def _walk(part: MimePart, options: DigestOptions) -> str:
    body = transfer.decode(part.body, part.transfer_encoding)

    if "multipart/" in part.content_type.lower():
        return _walk_multipart(body, part.content_type, options)

    if not part.is_text:
        logger.debug("Skipping non-text %s part", part.media_type)
        return ""

    if not options.skip_html and part.media_type == "text/html":
        body = html_to_text(body, omit_links=options.omit_links, pretty_tables=options.pretty_tables)

    return quotes.strip(body, options.allow_non_letter_lines)


def digest_body(body: str, content_type: str = "", transfer_encoding: str = "",
                options: Optional[DigestOptions] = None) -> str:
    """
    Simplify a raw SMTP body.

    The body may itself be base64 encoded. Content types can be text/plain,
    text/html or an RFC 1341 style multipart; for multipart/alternative the
    first part with any text wins, other multiparts keep every text part.
    Raises BadMultipartError or TransferDecodeError when the body can't be read.
    """
    options = options or DigestOptions()
    text = _walk(MimePart(content_type or "", transfer_encoding or "", body), options)
    if options.line_limit > 0 or options.col_limit > 0:
        text = limit_lines(text, options.line_limit, options.col_limit)
    return text


def digest_message(raw_message: str, options: Optional[DigestOptions] = None) -> str:
    """
    Turn a raw SMTP message into a short digest.

    Only From and Subject survive from the headers, verbatim. The body goes
    through digest_body with the message's own Content-Type and
    Content-Transfer-Encoding.
    """
    if not raw_message:
        raise MalformedMessageError("empty message")
    msg = HeaderParser().parsestr(raw_message)
    if any(isinstance(d, _MALFORMED_HEADER_DEFECTS) for d in msg.defects):
        raise MalformedMessageError("message has no parseable header block")

    digest = ""
    sender = unfold(msg.get("From"))
    if sender:
        digest += "From: " + sender + "\n"
    subject = unfold(msg.get("Subject"))
    if subject:
        digest += "Subject: " + subject + "\n"

    body = digest_body(
        msg.get_payload() or "",
        unfold(msg.get("Content-Type")),
        unfold(msg.get("Content-Transfer-Encoding")),
        options,
    )
    return digest + body
