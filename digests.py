# digests.py
import logging
from typing import Iterable, Iterator, List, Optional, Tuple

import config
from errors import DigestError
from gmail_client import GmailClient
from mark_read_worker import bulk_mark_read_with_retry
from options import DigestOptions
from processor import digest_message
from summary import SUMMARY_OPTIONS, summarize

logger = logging.getLogger(__name__)


def iter_digests(gmail: GmailClient, options: Optional[DigestOptions] = None,
                 query: str = config.GMAIL_QUERY) -> Iterator[Tuple[str, str]]:
    """
    Yield (message id, digest) for every message matching query, in the order Gmail lists them.

    A message that can't be digested is logged and skipped; the rest of the
    listing is still processed.
    """
    options = options or DigestOptions.from_env()
    for mid in gmail.list_message_ids(query=query):
        raw = gmail.get_raw_bytes(mid)
        if raw is None:
            logger.warning("Message %s has no raw body, skipping", mid)
            continue
        try:
            digest = digest_message(raw.decode("utf-8", errors="replace"), options)
        except DigestError as e:
            logger.warning("Could not digest message %s, skipping: %s", mid, e)
            continue
        yield mid, digest


def iter_summaries(gmail: GmailClient, padding: str = "", options: DigestOptions = SUMMARY_OPTIONS,
                   query: str = config.GMAIL_QUERY) -> Iterator[Tuple[str, str]]:
    """Like iter_digests, but from Gmail's pre-parsed MIME tree."""
    for mid in gmail.list_message_ids(query=query):
        yield mid, summarize(gmail.get_message_full(mid), padding, options)


def unread_digests(gmail: GmailClient, options: Optional[DigestOptions] = None,
                   query: str = config.GMAIL_QUERY) -> List[str]:
    results = [digest for _, digest in iter_digests(gmail, options, query)]
    logger.info("Digested %d message(s)", len(results))
    return results


def unread_summaries(gmail: GmailClient, padding: str = "", options: DigestOptions = SUMMARY_OPTIONS,
                     query: str = config.GMAIL_QUERY) -> List[str]:
    return [summary for _, summary in iter_summaries(gmail, padding, options, query)]


def mark_read(gmail: GmailClient, message_ids: Iterable[str]) -> int:
    """Mark exactly the given messages read, usually the ids a digest run yielded."""
    ids = list(message_ids)
    if not ids:
        return 0
    return bulk_mark_read_with_retry(gmail, ids)
