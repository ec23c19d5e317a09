"""URL templates for the gateway's Squidex content routes."""

import urllib.parse
from typing import Any

CONTENT_ACTIONS = ("publish", "unpublish", "archive", "restore")


def _format_param(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


class UrlBuilder:
    """Build gateway URLs for content operations."""

    def __init__(self, base_url: str):
        self.base_url = base_url.rstrip("/")

    def content_path(self, schema: str) -> str:
        """Path of a schema's content collection."""
        return f"/squidex/content/{urllib.parse.quote(schema, safe='')}"

    def content_item_path(self, schema: str, content_id: str) -> str:
        """Path of a single content item."""
        return f"{self.content_path(schema)}/{urllib.parse.quote(content_id, safe='')}"

    def content_action_path(self, schema: str, content_id: str, action: str) -> str:
        """Path of a status action (publish, unpublish, archive, restore) on an item."""
        if action not in CONTENT_ACTIONS:
            raise ValueError(f"Unknown content action: {action}")
        return f"{self.content_item_path(schema, content_id)}/{action}"

    def build(self, path: str, params: dict[str, Any] | None = None) -> str:
        """
        Build a full URL from a path and optional query parameters.

        None values are dropped, booleans are rendered as true/false and the
        ``$`` of OData parameter names is kept literal.
        """
        url = path if path.startswith(("http://", "https://")) else f"{self.base_url}{path}"

        filtered = {k: _format_param(v) for k, v in (params or {}).items() if v is not None}
        if not filtered:
            return url

        query_string = urllib.parse.urlencode(filtered, quote_via=urllib.parse.quote, safe="$")
        separator = "&" if "?" in url else "?"
        return f"{url}{separator}{query_string}"
