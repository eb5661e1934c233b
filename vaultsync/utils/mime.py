"""Content classification — decide whether a content type is binary or text."""

from __future__ import annotations

import mimetypes
from typing import Iterable, Optional

# Non ``text/*`` types that still carry line-oriented text
TEXT_TYPES = {
    "application/xml",
    "application/json",
    "application/javascript",
    "application/ecmascript",
    "application/x-javascript",
    "application/x-sh",
    "application/x-shellscript",
    "application/x-python",
    "application/x-yaml",
    "application/yaml",
    "application/sql",
    "application/x-httpd-php",
}

# Suffixes of structured syntax types (RFC 6839) that are text
TEXT_SUFFIXES = ("+xml", "+json")

DEFAULT_MIME_TYPE = "application/octet-stream"


class MimeTypes:
    """Classifies content types; unknown or missing types count as binary."""

    def __init__(
        self,
        text_types: Optional[Iterable[str]] = None,
        binary_types: Optional[Iterable[str]] = None,
    ) -> None:
        self.text_types = set(TEXT_TYPES) | {t.lower() for t in text_types or ()}
        self.binary_types = {t.lower() for t in binary_types or ()}

    def is_binary(self, content_type: Optional[str]) -> bool:
        if not content_type:
            return True
        mime = content_type.split(";", 1)[0].strip().lower()
        # Configured binary types win over every text rule
        if mime in self.binary_types:
            return True
        if mime.startswith("text/") or mime in self.text_types:
            return False
        return not mime.endswith(TEXT_SUFFIXES)

    def is_text(self, content_type: Optional[str]) -> bool:
        return not self.is_binary(content_type)


def guess_content_type(name: str) -> str:
    """Return the content type for a file name, by extension."""
    mime, _ = mimetypes.guess_type(name, strict=False)
    return mime or DEFAULT_MIME_TYPE
