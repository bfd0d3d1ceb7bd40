# cli.py
import argparse
import logging
import sys
from dataclasses import replace
from typing import List, Optional

import config
from digests import iter_digests, iter_summaries, mark_read
from gmail_client import GmailClient
from options import DigestOptions
from summary import SUMMARY_OPTIONS

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="inbox-digest", description="Print short digests of unread Gmail messages.")
    parser.add_argument("--account", help="Account name; credentials are cached in <account>.pickle")
    parser.add_argument("--query", default=config.GMAIL_QUERY, help="Gmail search query")
    parser.add_argument("--full", action="store_true", help="Summarize Gmail's parsed MIME tree instead of raw messages")
    parser.add_argument("--padding", default="", help="Prefix for body lines (with --full)")
    parser.add_argument("--lines", type=int, help="Max body lines per message (0 = unlimited)")
    parser.add_argument("--cols", type=int, help="Max characters per body line (0 = unlimited)")
    parser.add_argument("--mark-read", action="store_true", help="Mark the messages read afterwards")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=config.LOG_LEVEL, format="%(levelname)s - %(message)s")

    limits = {}
    if args.lines is not None:
        limits["line_limit"] = args.lines
    if args.cols is not None:
        limits["col_limit"] = args.cols

    token_file = f"{args.account}.pickle" if args.account else config.TOKEN_PICKLE
    try:
        gmail = GmailClient(token_file=token_file)
        if args.full:
            options = replace(SUMMARY_OPTIONS, **limits)
            results = list(iter_summaries(gmail, args.padding, options, query=args.query))
        else:
            options = replace(DigestOptions.from_env(), **limits)
            results = list(iter_digests(gmail, options, query=args.query))
        print(len(results), "unread messages")
        print("\n\n".join(digest for _, digest in results))
        if args.mark_read:
            marked = mark_read(gmail, [mid for mid, _ in results])
            logger.info("Marked %d message(s) read", marked)
    except Exception as e:
        logger.error("Inbox digest failed: %s", e, exc_info=True)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
