"""Runtime settings read from the environment."""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from .errors import ConfigurationError
from .onenote_client import DEFAULT_TIMEOUT, GRAPH_URL


@dataclass
class Settings:
    """Settings for one import run. CLI options override these."""

    access_token: Optional[str] = None
    timeout: float = DEFAULT_TIMEOUT
    graph_url: str = GRAPH_URL
    notebook_name: Optional[str] = None
    section_name: Optional[str] = None
    temp_dir: Optional[Path] = None

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "Settings":
        """Build settings from ONENOTE_* / ENEX_* environment variables."""
        env = os.environ if environ is None else environ

        timeout = DEFAULT_TIMEOUT
        raw_timeout = env.get("ONENOTE_TIMEOUT")
        if raw_timeout:
            try:
                timeout = float(raw_timeout)
            except ValueError as e:
                raise ConfigurationError(f"ONENOTE_TIMEOUT must be a number, got {raw_timeout!r}") from e
            if timeout <= 0:
                raise ConfigurationError("ONENOTE_TIMEOUT must be positive")

        temp_dir = env.get("ENEX_TEMP_DIR")
        return cls(
            access_token=env.get("ONENOTE_ACCESS_TOKEN") or None,
            timeout=timeout,
            graph_url=env.get("ONENOTE_GRAPH_URL") or GRAPH_URL,
            notebook_name=env.get("ONENOTE_NOTEBOOK") or None,
            section_name=env.get("ONENOTE_SECTION") or None,
            temp_dir=Path(temp_dir).expanduser() if temp_dir else None,
        )
