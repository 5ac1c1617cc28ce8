from unittest.mock import Mock

import pytest
from click.testing import CliRunner

from evernote_onenote import cli
from evernote_onenote.errors import OneNoteError


@pytest.fixture
def runner(monkeypatch):
    for name in ("ONENOTE_ACCESS_TOKEN", "ONENOTE_TIMEOUT", "ONENOTE_NOTEBOOK", "ONENOTE_SECTION", "ENEX_TEMP_DIR"):
        monkeypatch.delenv(name, raising=False)
    return CliRunner()


@pytest.fixture
def fake_client(monkeypatch):
    client = Mock()
    client.create_notebook.return_value = "nb-1"
    client.create_section.return_value = "sec-1"
    client.create_page.return_value = {"id": "page"}
    factory = Mock(return_value=client)
    monkeypatch.setattr(cli, "OneNoteClient", factory)
    return factory


def test_missing_token(runner):
    result = runner.invoke(cli.main, [])
    assert result.exit_code == cli.EXIT_MISSING_TOKEN


def test_missing_path(runner, tmp_path):
    result = runner.invoke(cli.main, ["token"])
    assert result.exit_code == cli.EXIT_BAD_PATH


def test_nonexistent_path(runner, tmp_path):
    result = runner.invoke(cli.main, ["token", str(tmp_path / "nope.enex")])
    assert result.exit_code == cli.EXIT_BAD_PATH


def test_import_success(runner, enex_file, fake_client):
    result = runner.invoke(cli.main, ["token", str(enex_file), "--timeout", "7"])

    assert result.exit_code == cli.EXIT_OK, result.output
    assert "Found 2 notes in Travel.enex" in result.output
    assert "2 page(s) with 1 attachment(s) in Travel/Travel" in result.output
    fake_client.assert_called_once()
    assert fake_client.call_args.args == ("token",)
    assert fake_client.call_args.kwargs["timeout"] == 7


def test_token_from_environment(runner, enex_file, fake_client, monkeypatch):
    monkeypatch.setenv("ONENOTE_ACCESS_TOKEN", "env-token")
    result = runner.invoke(cli.main, [str(enex_file)])

    assert result.exit_code == cli.EXIT_OK, result.output
    assert fake_client.call_args.args == ("env-token",)


def test_dry_run_needs_no_token(runner, enex_file, fake_client):
    result = runner.invoke(cli.main, [str(enex_file), "--dry-run", "--verbose"])

    assert result.exit_code == cli.EXIT_OK, result.output
    assert "[DRY RUN] Would create: Trip" in result.output
    fake_client.assert_not_called()


def test_transport_failure(runner, enex_file, fake_client):
    fake_client.return_value.create_notebook.side_effect = OneNoteError("HTTP 401: Unauthorized")
    result = runner.invoke(cli.main, ["token", str(enex_file)])

    assert result.exit_code == cli.EXIT_FAILURE
    assert "Import failed: HTTP 401" in result.output


def test_malformed_export(runner, tmp_path, fake_client):
    path = tmp_path / "broken.enex"
    path.write_text("<en-export><note>")
    result = runner.invoke(cli.main, ["token", str(path)])

    assert result.exit_code == cli.EXIT_FAILURE


def test_bad_timeout_env(runner, enex_file, monkeypatch):
    monkeypatch.setenv("ONENOTE_TIMEOUT", "soon")
    result = runner.invoke(cli.main, ["token", str(enex_file)])
    assert result.exit_code == cli.EXIT_FAILURE


def test_unwritable_temp_dir_is_a_failure(runner, enex_file, tmp_path, monkeypatch):
    not_a_dir = tmp_path / "payloads"
    not_a_dir.write_text("")
    monkeypatch.setenv("ENEX_TEMP_DIR", str(not_a_dir))
    result = runner.invoke(cli.main, [str(enex_file), "--dry-run"])

    assert result.exit_code == cli.EXIT_FAILURE
    assert "Import failed" in result.output


@pytest.mark.parametrize("value", ["0", "-1"])
def test_timeout_must_be_positive(runner, enex_file, fake_client, value):
    result = runner.invoke(cli.main, ["token", str(enex_file), "--timeout", value])

    assert result.exit_code == 2
    fake_client.assert_not_called()


def test_timeout_defaults_to_environment(runner, enex_file, fake_client, monkeypatch):
    monkeypatch.setenv("ONENOTE_TIMEOUT", "12")
    result = runner.invoke(cli.main, ["token", str(enex_file)])

    assert result.exit_code == cli.EXIT_OK, result.output
    assert fake_client.call_args.kwargs["timeout"] == 12
