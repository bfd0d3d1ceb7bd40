# html_text.py
import logging

import html2text

logger = logging.getLogger(__name__)


def html_to_text(html: str, omit_links: bool = False, pretty_tables: bool = False) -> str:
    """Flatten an HTML fragment to plain text; on failure the error text is returned instead."""
    h = html2text.HTML2Text()
    h.ignore_links = omit_links
    h.ignore_images = True
    h.ignore_emphasis = True
    h.pad_tables = pretty_tables
    h.body_width = 0  # don't wrap lines
    try:
        return h.handle(html)
    except Exception as e:
        logger.warning("HTML to text conversion failed: %s", e)
        return str(e)
