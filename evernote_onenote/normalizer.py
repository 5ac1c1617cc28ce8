"""Normalize note titles into valid, unique OneNote page titles."""

import logging
import re

from .models import Export, Note

logger = logging.getLogger(__name__)

# OneNote rejects page and section names longer than this
MAX_TITLE_LENGTH = 49

# Replaced by full-width look-alikes before the separator cleanup
FULL_WIDTH_CHARS = {
    "!": "！",
    "?": "？",
    "&": "＆",
    "%": "％",
    ":": "：",
}

FORBIDDEN_CHARS = '~#%&*{}|\\:"<>?/^'
FORBIDDEN_RE = re.compile("[" + re.escape(FORBIDDEN_CHARS) + "]")

DUPLICATE_SUFFIX_FORMAT = "%Y-%m-%d %H:%M:%S"


class TitleNormalizer:
    """Applies the title passes to an export in their required order.

    1. make titles unique (suffixing the creation time of repeats)
    2. replace characters OneNote does not allow
    3. cut titles to MAX_TITLE_LENGTH

    Cutting before de-duplication could produce new duplicates, so the
    passes are only available through normalize().

    Known limitations, kept as is:

    - two notes with the same title and creation time still collide
    - the later passes can merge titles that were unique after the first:
      cutting a long repeated title drops its "(timestamp)" suffix, and
      "A?" and "A？" both become "A？"
    """

    def __init__(self, max_length: int = MAX_TITLE_LENGTH):
        self.max_length = max_length

    def normalize(self, export: Export) -> Export:
        """Normalize every note title of export in place and return it."""
        originals = export.titles

        self._make_unique(export.notes)
        for note in export.notes:
            note.title = self._cut(self._replace_forbidden(note.title))

        for original, note in zip(originals, export.notes):
            if original != note.title:
                logger.debug("Renamed note %r -> %r", original, note.title)
        return export

    def _make_unique(self, notes: list[Note]) -> None:
        # Two notes sharing title and creation time still collide here.
        seen: set[str] = set()
        for note in notes:
            if note.title in seen:
                note.title = f"{note.title}({note.created.strftime(DUPLICATE_SUFFIX_FORMAT)})"
            seen.add(note.title)

    def _replace_forbidden(self, title: str) -> str:
        for char, full_width in FULL_WIDTH_CHARS.items():
            title = title.replace(char, full_width)
        parts = (part.strip() for part in FORBIDDEN_RE.split(title))
        return " ".join(part for part in parts if part).strip()

    def _cut(self, title: str) -> str:
        if len(title) > self.max_length:
            return title[: self.max_length]
        return title


def normalize_titles(export: Export) -> Export:
    """Normalize the titles of export with the default settings."""
    return TitleNormalizer().normalize(export)
