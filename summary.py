# summary.py
"""
Summaries of Gmail API messages fetched in "full" format.

Gmail hands the MIME tree over already split into parts, each body
base64url-encoded. This renders that tree strictly: anything that isn't
text shows up as a "( type)" placeholder.
"""
import logging
import re
from typing import Any, Dict, List, Optional

import quotes
import transfer
from errors import TransferDecodeError
from models import MimePart
from options import DigestOptions

logger = logging.getLogger(__name__)

SUMMARY_OPTIONS = DigestOptions(line_limit=10, col_limit=80)

_PASSTHROUGH_ENCODINGS = {"", "7bit", "8bit", "binary", "base64"}
_LINE_SPLIT = re.compile(r"\r\n|\r|\n")


def get_headers(headers: Optional[List[Dict[str, str]]]) -> Dict[str, str]:
    """Gmail header list -> dict keyed by lowercase name."""
    return {h.get("name", "").lower(): h.get("value", "") for h in headers or []}


def part_from_payload(payload: Dict[str, Any]) -> MimePart:
    headers = get_headers(payload.get("headers"))
    return MimePart(
        content_type=payload.get("mimeType") or "",
        transfer_encoding=headers.get("content-transfer-encoding", ""),
        body=(payload.get("body") or {}).get("data") or "",
        children=[part_from_payload(p) for p in payload.get("parts") or []],
    )


def pad(s: str, padding: str) -> str:
    if not s:
        return s
    return "\n".join(padding + line for line in s.split("\n"))


def clip(text: str, options: DigestOptions = SUMMARY_OPTIONS) -> str:
    """Strip quoted content, then keep the first non-empty printable lines."""
    inner = quotes.strip_quoted(text)
    result = []
    for line in _LINE_SPLIT.split(inner):
        line = quotes.trim_print(line)
        if not line:
            continue
        if options.line_limit > 0 and len(result) >= options.line_limit:
            break
        if options.col_limit > 0:
            line = line[:options.col_limit]
        result.append(line)
    return "\n".join(result)


def render_part(part: MimePart, options: DigestOptions = SUMMARY_OPTIONS) -> str:
    media_type = part.media_type

    if not part.is_text and not media_type.startswith("multipart/"):
        return "( " + part.content_type + ")"

    if media_type == "multipart/alternative":
        for child in part.children:
            if child.is_text:
                return render_part(child, options)

    if not part.is_leaf:
        rendered = [render_part(child, options) for child in part.children]
        return "\n---\n".join(r for r in rendered if r)

    # gmail base64url-encodes every body it returns
    data = part.body.strip()
    decoded = transfer.probe_base64(data)
    if decoded is not None:
        data = decoded

    cte = part.transfer_encoding.strip().lower()
    if cte == "quoted-printable":
        try:
            return clip(transfer.decode_quoted_printable(data), options)
        except TransferDecodeError as e:
            logger.debug("Keeping undecoded quoted-printable body: %s", e)
            return data

    if cte not in _PASSTHROUGH_ENCODINGS:
        return "unknown content-transfer-encoding " + cte

    return clip(data, options)


def summarize(message: Dict[str, Any], padding: str = "",
              options: DigestOptions = SUMMARY_OPTIONS) -> str:
    """
    Convert a single Gmail message resource into text.

    Messages without a payload fall back to their snippet.
    """
    payload = message.get("payload")
    if not payload:
        return message.get("snippet", "")

    headers = get_headers(payload.get("headers"))
    body = render_part(part_from_payload(payload), options)
    return ("From: " + headers.get("from", "") +
            "\nSubject: " + headers.get("subject", "") +
            "\n" + pad(body, padding) + "\n")
