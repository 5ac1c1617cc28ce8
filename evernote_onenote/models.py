"""Data models for Evernote to OneNote import."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from .storage import TempPayload


@dataclass
class NoteAttributes:
    """The optional note-attributes block of an Evernote note."""

    latitude: float = 0.0
    longitude: float = 0.0
    altitude: float = 0.0
    author: Optional[str] = None
    source_url: Optional[str] = None


@dataclass
class ResourceAttributes:
    """The optional resource-attributes block of a resource."""

    file_name: Optional[str] = None
    source_url: Optional[str] = None


@dataclass
class Resource:
    """Represents a resource (binary attachment) of an Evernote note."""

    mime: Optional[str] = None
    width: int = 0
    height: int = 0
    payload: Optional[TempPayload] = None  # None unless the data was base64
    attributes: Optional[ResourceAttributes] = None

    @property
    def source_url(self) -> Optional[str]:
        """Source URL used to match the resource with en-media references."""
        if self.attributes is None:
            return None
        return self.attributes.source_url


@dataclass
class Note:
    """Represents an Evernote note."""

    title: str
    content: str  # ENML content
    created: datetime
    updated: datetime
    tags: list[str] = field(default_factory=list)
    attributes: Optional[NoteAttributes] = None
    resources: list[Resource] = field(default_factory=list)

    @property
    def source_url(self) -> Optional[str]:
        if self.attributes is None:
            return None
        return self.attributes.source_url


@dataclass
class Export:
    """A parsed .enex file: its base name and notes in document order."""

    name: str
    notes: list[Note] = field(default_factory=list)

    @property
    def titles(self) -> list[str]:
        return [note.title for note in self.notes]


@dataclass
class Attachment:
    """A resource paired with a page, referenced from content by name."""

    name: str
    content_type: str
    payload: TempPayload
    width: int = 0
    height: int = 0


@dataclass
class PageRequest:
    """Represents a note converted into a OneNote page."""

    title: str
    content: str  # XHTML body content
    created: Optional[datetime] = None
    source_url: Optional[str] = None
    attachments: list[Attachment] = field(default_factory=list)

    @property
    def has_attachments(self) -> bool:
        return len(self.attachments) > 0
