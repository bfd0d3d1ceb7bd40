# mark_read_worker.py
import logging
import time
from typing import List

from googleapiclient.errors import HttpError

from gmail_client import GmailClient
from utils import chunks

logger = logging.getLogger(__name__)

MAX_ATTEMPTS = 3


def bulk_mark_read_with_retry(gmail_client: GmailClient, message_ids: List[str], batch_size: int = 100,
                              pause: float = 0.4) -> int:
    """Mark message ids read in chunks, with basic retry. Returns how many were marked."""
    marked = 0
    for batch in chunks(message_ids, batch_size):
        attempts = 0
        while True:
            try:
                gmail_client.mark_read(batch)
                marked += len(batch)
                break
            except HttpError as e:
                attempts += 1
                if attempts >= MAX_ATTEMPTS:
                    logger.error("Giving up on marking %d message(s) read: %s", len(batch), e)
                    raise
                logger.warning("Mark read error, retrying (attempt %d): %s", attempts, e)
                time.sleep(2 ** attempts)
        time.sleep(pause)
    return marked
