import base64
from datetime import datetime, timezone
from pathlib import Path

import pytest

from evernote_onenote.models import Export, Note
from evernote_onenote.storage import PayloadStore

JPEG_BYTES = b"\xff\xd8\xff\xe0fake-jpeg-data"
PDF_BYTES = b"%PDF-1.4 fake"

SAMPLE_ENEX = f"""<?xml version="1.0" encoding="UTF-8"?>
<!DOCTYPE en-export SYSTEM "http://xml.evernote.com/pub/evernote-export3.dtd">
<en-export export-date="20240101T000000Z" application="Evernote" version="10">
  <note>
    <title>Trip</title>
    <content><![CDATA[<?xml version="1.0" encoding="UTF-8"?>
<!DOCTYPE en-note SYSTEM "http://xml.evernote.com/pub/enml2.dtd">
<en-note><div>Day one&nbsp;photo</div><en-media hash="abc123" type="image/jpeg"/><en-media hash="def456" type="application/pdf"/></en-note>]]></content>
    <created>20230102T030405Z</created>
    <updated>20230103T030405Z</updated>
    <tag>travel,photos</tag>
    <note-attributes>
      <latitude>35.6</latitude>
      <longitude>not-a-number</longitude>
      <author>someone</author>
      <source-url>https://example.com/trip</source-url>
    </note-attributes>
    <resource>
      <data encoding="base64">{base64.b64encode(JPEG_BYTES).decode()}</data>
      <mime>image/jpeg</mime>
      <width>640</width>
      <height>N/A</height>
      <resource-attributes>
        <file-name>photo.jpg</file-name>
        <source-url>https://service/res/abc123</source-url>
      </resource-attributes>
    </resource>
    <resource>
      <data encoding="base64">{base64.b64encode(PDF_BYTES).decode()}</data>
      <mime>application/pdf</mime>
      <resource-attributes>
        <source-url>https://service/res/def456</source-url>
      </resource-attributes>
    </resource>
  </note>
  <wrapper>
    <note>
      <title>Trip</title>
      <content><![CDATA[<en-note>Second</en-note>]]></content>
      <created>20230105T101112Z</created>
      <updated>20230105T101112Z</updated>
    </note>
  </wrapper>
</en-export>
"""


def make_note(title: str, created: datetime | None = None, content: str = "<en-note>x</en-note>", **kwargs) -> Note:
    created = created or datetime(2023, 1, 2, 3, 4, 5, tzinfo=timezone.utc)
    return Note(title=title, content=content, created=created, updated=created, **kwargs)


@pytest.fixture
def store(tmp_path: Path):
    with PayloadStore(tmp_path / "payloads") as payload_store:
        yield payload_store


@pytest.fixture
def enex_file(tmp_path: Path) -> Path:
    path = tmp_path / "Travel.enex"
    path.write_text(SAMPLE_ENEX, encoding="utf-8")
    return path


@pytest.fixture
def export() -> Export:
    return Export(name="Sample", notes=[make_note("First"), make_note("Second")])
