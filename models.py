# models.py
from dataclasses import dataclass, field
from typing import List


@dataclass
class MimePart:
    """
    One node of a decoded MIME tree.

    Attributes:
        content_type: Declared Content-Type header value (may be empty)
        transfer_encoding: Declared Content-Transfer-Encoding (may be empty)
        body: Raw body text, empty for containers
        children: Nested parts, empty for leaves
    """
    content_type: str = ""
    transfer_encoding: str = ""
    body: str = ""
    children: List["MimePart"] = field(default_factory=list)

    @property
    def media_type(self) -> str:
        """Lowercased type/subtype without parameters."""
        return self.content_type.split(";", 1)[0].strip().lower()

    @property
    def is_leaf(self) -> bool:
        # a body wins over children when both are present
        return bool(self.body) or not self.children

    @property
    def is_text(self) -> bool:
        """Untyped parts count as text, as in RFC 2045."""
        return not self.media_type or self.media_type.startswith("text/")
