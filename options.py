# options.py
from dataclasses import dataclass

import config


@dataclass(frozen=True)
class DigestOptions:
    """
    Knobs for turning a message into a digest.

    Attributes:
        line_limit: Max lines of body text (0 = unlimited)
        col_limit: Max characters per body line (0 = unlimited)
        skip_html: Pass HTML bodies through with their tags
        omit_links: Drop link URLs when flattening HTML
        pretty_tables: Lay out HTML tables as padded columns
        allow_non_letter_lines: Keep lines without any letter in them
    """
    line_limit: int = 0
    col_limit: int = 0
    skip_html: bool = False
    omit_links: bool = False
    pretty_tables: bool = False
    allow_non_letter_lines: bool = False

    @classmethod
    def from_env(cls) -> "DigestOptions":
        """Options for inbox scans, overridable through DIGEST_* variables."""
        return cls(
            line_limit=config.env_int("DIGEST_LINE_LIMIT", 10),
            col_limit=config.env_int("DIGEST_COL_LIMIT", 80),
            skip_html=config.env_flag("DIGEST_SKIP_HTML"),
            omit_links=config.env_flag("DIGEST_OMIT_LINKS", True),
            pretty_tables=config.env_flag("DIGEST_PRETTY_TABLES"),
            allow_non_letter_lines=config.env_flag("DIGEST_ALLOW_NON_LETTER_LINES"),
        )
