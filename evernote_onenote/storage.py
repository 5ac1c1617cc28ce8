"""Temporary on-disk storage for decoded resource payloads."""

import logging
import os
import tempfile
from pathlib import Path
from typing import BinaryIO, Iterator

logger = logging.getLogger(__name__)


class TempPayload:
    """Owned handle to one decoded payload stored in a temporary file."""

    def __init__(self, path: Path):
        self.path = Path(path)
        self._released = False

    def __repr__(self) -> str:
        state = "released" if self._released else "live"
        return f"TempPayload({str(self.path)!r}, {state})"

    @property
    def released(self) -> bool:
        """Whether the backing file has already been deleted."""
        return self._released

    @property
    def size(self) -> int:
        return self.path.stat().st_size

    def read_bytes(self) -> bytes:
        """Read the whole payload."""
        if self._released:
            raise ValueError(f"Payload already released: {self.path}")
        return self.path.read_bytes()

    def open(self) -> BinaryIO:
        """Open the payload for binary reading."""
        if self._released:
            raise ValueError(f"Payload already released: {self.path}")
        return open(self.path, "rb")

    def release(self) -> None:
        """Delete the backing file. Further calls do nothing."""
        if self._released:
            return
        self._released = True
        try:
            self.path.unlink()
        except FileNotFoundError:
            logger.debug("Payload file already gone: %s", self.path)


class PayloadStore:
    """Owns every payload written during one import run.

    Use it as a context manager so the payloads are released whether the
    run succeeds or fails:

        with PayloadStore() as store:
            export = parse_enex_file(path, store)
            ...
    """

    def __init__(self, directory: Path | str | None = None):
        self.directory = Path(directory) if directory else None
        self._payloads: list[TempPayload] = []

    def __len__(self) -> int:
        return len(self._payloads)

    def __iter__(self) -> Iterator[TempPayload]:
        return iter(self._payloads)

    def __enter__(self) -> "PayloadStore":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.release_all()

    def write(self, data: bytes) -> TempPayload:
        """Persist data to a fresh temporary file and track its handle."""
        if self.directory is not None:
            self.directory.mkdir(parents=True, exist_ok=True)
        fd, name = tempfile.mkstemp(prefix="enex-", suffix=".bin", dir=self.directory)
        with os.fdopen(fd, "wb") as f:
            f.write(data)

        payload = TempPayload(Path(name))
        self._payloads.append(payload)
        return payload

    def release_all(self) -> int:
        """Release every tracked payload. Returns how many were released."""
        released = 0
        for payload in self._payloads:
            if not payload.released:
                payload.release()
                released += 1
        if released:
            logger.debug("Released %d temporary payload(s)", released)
        return released
