from pathlib import Path

import pytest

from evernote_onenote.config import Settings
from evernote_onenote.errors import ConfigurationError
from evernote_onenote.onenote_client import DEFAULT_TIMEOUT, GRAPH_URL


def test_defaults():
    settings = Settings.from_env({})
    assert settings.access_token is None
    assert settings.timeout == DEFAULT_TIMEOUT
    assert settings.graph_url == GRAPH_URL
    assert settings.temp_dir is None


def test_values_from_environment():
    settings = Settings.from_env(
        {
            "ONENOTE_ACCESS_TOKEN": "abc",
            "ONENOTE_TIMEOUT": "12.5",
            "ONENOTE_NOTEBOOK": "Evernote",
            "ONENOTE_SECTION": "Imported",
            "ENEX_TEMP_DIR": "/tmp/enex",
        }
    )
    assert settings.access_token == "abc"
    assert settings.timeout == 12.5
    assert settings.notebook_name == "Evernote"
    assert settings.section_name == "Imported"
    assert settings.temp_dir == Path("/tmp/enex")


@pytest.mark.parametrize("value", ["soon", "0", "-3"])
def test_invalid_timeout(value):
    with pytest.raises(ConfigurationError):
        Settings.from_env({"ONENOTE_TIMEOUT": value})
