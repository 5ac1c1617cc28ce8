"""Command-line interface for the Evernote to OneNote importer."""

import logging
import sys
from pathlib import Path

import click

from . import __version__
from .config import Settings
from .enex_parser import count_notes_in_enex
from .errors import EvernoteImportError
from .importer import run_import
from .models import PageRequest
from .onenote_client import OneNoteClient

EXIT_OK = 0
EXIT_MISSING_TOKEN = 1
EXIT_BAD_PATH = 2
EXIT_FAILURE = 3


def configure_logging(verbose: bool) -> None:
    """Send library log records to stderr when --verbose is given."""
    if not verbose:
        return
    logging.basicConfig(
        level=logging.DEBUG,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


@click.command()
@click.version_option(version=__version__, prog_name="evernote-onenote")
@click.argument("access_token", required=False)
@click.argument("enex_path", required=False)
@click.option(
    "--notebook",
    help="Name of the OneNote notebook to create (default: ENEX file name)",
)
@click.option(
    "--section",
    help="Name of the section to create in the notebook (default: ENEX file name)",
)
@click.option(
    "--timeout",
    type=click.FloatRange(min=0, min_open=True),
    help="Seconds to wait for each OneNote API response (default: 30)",
)
@click.option(
    "--dry-run",
    is_flag=True,
    help="Parse and convert without calling OneNote",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose output",
)
def main(
    access_token: str | None,
    enex_path: str | None,
    notebook: str | None,
    section: str | None,
    timeout: float | None,
    dry_run: bool,
    verbose: bool,
):
    """Import an Evernote export (.enex) into a new OneNote notebook.

    ACCESS_TOKEN is a Microsoft Graph token with Notes.ReadWrite permission.
    It can be omitted when ONENOTE_ACCESS_TOKEN is set or with --dry-run.
    """
    configure_logging(verbose)

    try:
        settings = Settings.from_env()
    except EvernoteImportError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(EXIT_FAILURE)

    # A single argument is the ENEX path when the token comes from elsewhere
    if enex_path is None and access_token is not None and (dry_run or settings.access_token):
        enex_path, access_token = access_token, None

    token = access_token or settings.access_token
    if not token and not dry_run:
        click.echo("Error: an access token is required.", err=True)
        click.echo("Pass it as the first argument or set ONENOTE_ACCESS_TOKEN.", err=True)
        sys.exit(EXIT_MISSING_TOKEN)

    if not enex_path:
        click.echo("Error: no ENEX file given.", err=True)
        sys.exit(EXIT_BAD_PATH)
    source_path = Path(enex_path)
    if not source_path.is_file():
        click.echo(f"Error: ENEX file not found: {source_path}", err=True)
        sys.exit(EXIT_BAD_PATH)

    client = None
    if not dry_run:
        client = OneNoteClient(
            token,
            base_url=settings.graph_url,
            timeout=timeout if timeout is not None else settings.timeout,
        )

    def report_page(page: PageRequest) -> None:
        if verbose:
            label = "[DRY RUN] Would create" if dry_run else "Created"
            click.echo(f"\n{label}: {page.title}")
            click.echo(f"  Content length: {len(page.content)} chars")
            click.echo(f"  Attachments: {len(page.attachments)}")

    try:
        total_notes = count_notes_in_enex(source_path)
        click.echo(f"Found {total_notes} notes in {source_path.name}")

        with click.progressbar(length=total_notes, label="Importing notes", show_pos=True) as bar:

            def on_page(page: PageRequest) -> None:
                report_page(page)
                bar.update(1)

            result = run_import(
                source_path,
                client,
                notebook_name=notebook or settings.notebook_name,
                section_name=section or settings.section_name,
                dry_run=dry_run,
                temp_dir=settings.temp_dir,
                on_page=on_page,
            )
    except (EvernoteImportError, OSError) as e:
        click.echo(f"\nImport failed: {e}", err=True)
        sys.exit(EXIT_FAILURE)

    click.echo("\n" + "=" * 50)
    click.echo("Import complete!")
    click.echo(f"  {result.summary()}")
    if dry_run:
        click.echo("\n[DRY RUN] No changes were made to OneNote.")
    sys.exit(EXIT_OK)


if __name__ == "__main__":
    main()
