"""OneNote (Microsoft Graph) REST API client for creating notebooks and pages."""

import logging
from html import escape
from typing import Any

import requests

from .errors import OneNoteError
from .models import PageRequest

logger = logging.getLogger(__name__)

GRAPH_URL = "https://graph.microsoft.com/v1.0"
DEFAULT_TIMEOUT = 30.0


def build_page_html(page: PageRequest) -> str:
    """Build the HTML document OneNote expects for a new page."""
    lines = [
        "<!DOCTYPE html>",
        "<html>",
        "  <head>",
    ]
    if page.title and page.title.strip():
        lines.append(f"    <title>{escape(page.title, quote=False)}</title>")
    if page.created is not None:
        lines.append(f'    <meta name="created" content="{page.created.isoformat(timespec="seconds")}" />')
    lines.append("  </head>")
    lines.append("  <body>")
    if page.source_url and page.source_url.strip():
        lines.append(f"    <blockquote>{escape(page.source_url, quote=False)}</blockquote>")
    lines.append(f"    {page.content}")
    lines.append("  </body>")
    lines.append("</html>")
    return "\n".join(lines) + "\n"


class OneNoteClient:
    """Client for the OneNote part of the Microsoft Graph API.

    Calls are synchronous and never retried. Any failure is raised as
    OneNoteError so the caller can stop the import.
    """

    def __init__(
        self,
        access_token: str,
        base_url: str = GRAPH_URL,
        timeout: float = DEFAULT_TIMEOUT,
    ):
        """
        Initialize OneNote client.

        Args:
            access_token: OAuth bearer token with Notes.ReadWrite permission
            base_url: Graph API root, without trailing slash
            timeout: Seconds to wait for each HTTP response
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

        self.session = requests.Session()
        self.session.headers.update({
            "Authorization": f"Bearer {access_token}",
            "Accept": "application/json",
        })

    def _url(self, path: str) -> str:
        return f"{self.base_url}/me/onenote/{path}"

    def _request(self, method: str, path: str, **kwargs: Any) -> dict:
        """Send a request and return the decoded JSON body."""
        url = self._url(path)
        logger.debug("%s %s", method, url)
        try:
            response = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.RequestException as e:
            raise OneNoteError(f"Request error: {e} | URL: {url}") from e

        if not 200 <= response.status_code < 300:
            raise OneNoteError(
                f"HTTP {response.status_code} from {method} {url}: {response.text[:500]}",
                status_code=response.status_code,
                response_text=response.text,
            )

        if not response.content:
            return {}
        try:
            return response.json()
        except ValueError as e:
            raise OneNoteError(f"Invalid JSON in response from {url}") from e

    def get_notebooks(self) -> list[dict]:
        """List the notebooks of the signed-in user."""
        data = self._request("GET", "notebooks")
        return data.get("value", [])

    def create_notebook(self, name: str) -> str:
        """Create a notebook and return its ID."""
        data = self._request("POST", "notebooks", json={"displayName": name})
        logger.info("Created notebook %r", name)
        return self._require_id(data, "notebook")

    def create_section(self, notebook_id: str, name: str) -> str:
        """Create a section in a notebook and return its ID."""
        data = self._request("POST", f"notebooks/{notebook_id}/sections", json={"displayName": name})
        logger.info("Created section %r", name)
        return self._require_id(data, "section")

    def create_page(self, section_id: str, page: PageRequest) -> dict:
        """
        Create a page in a section.

        Pages with attachments are sent as multipart/form-data: a
        "Presentation" part holding the HTML, then one part per attachment
        named after the name:... reference used in the content.
        """
        html = build_page_html(page)
        path = f"sections/{section_id}/pages"

        if not page.has_attachments:
            return self._request(
                "POST",
                path,
                data=html.encode("utf-8"),
                headers={"Content-Type": "application/xhtml+xml"},
            )

        parts = [("Presentation", (None, html.encode("utf-8"), "text/html"))]
        for attachment in page.attachments:
            parts.append(
                (
                    attachment.name,
                    (attachment.name, attachment.payload.read_bytes(), attachment.content_type),
                )
            )
        return self._request("POST", path, files=parts)

    @staticmethod
    def _require_id(data: dict, kind: str) -> str:
        try:
            return data["id"]
        except KeyError:
            raise OneNoteError(f"Response for new {kind} has no id") from None
