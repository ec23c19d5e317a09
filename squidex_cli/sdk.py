"""
Squidex SDK - High-level client with nice ergonomics.

This layer provides a clean, typed interface for content operations.
Built on top of the core APIClient.
"""

from collections.abc import Callable, Iterator
from typing import Any

from squidex_cli.core.client import APIClient, ClientConfig
from squidex_cli.core.errors import ErrorKind, SquidexError
from squidex_cli.core.query import CompiledQuery, QueryBuilder
from squidex_cli.core.types import (
    Content,
    ContentList,
    CreateContentOptions,
    DeleteContentOptions,
    UpdateContentOptions,
)

DEFAULT_PAGE_SIZE = 100


class SquidexClient:
    """
    High-level Squidex gateway client with typed methods.

    Example:
        client = SquidexClient(api_base_url="http://localhost:8200/games")

        query = (
            client.create_query()
            .equals("data/difficulty/iv", "easy")
            .order_by("created", "desc")
            .top(20)
        )
        page = client.content.list("questions", query)
        item = client.content.get("questions", page.items[0].id)

    """

    def __init__(
        self,
        config: ClientConfig | None = None,
        api_base_url: str | None = None,
        timeout: float | None = None,
        retries: int | None = None,
        retry_delay: float | None = None,
        sleep: Callable[[float], None] | None = None,
    ):
        """
        Initialize the Squidex client.

        Args:
            config: Explicit configuration. When omitted, it is read from
                SQUIDEX_* env vars, with the keyword arguments below taking
                precedence.
            api_base_url: Gateway base URL (or SQUIDEX_API_BASE_URL env var)
            timeout: Request timeout in seconds (or SQUIDEX_TIMEOUT)
            retries: Max retries (or SQUIDEX_RETRIES)
            retry_delay: Base backoff delay in seconds (or SQUIDEX_RETRY_DELAY)
            sleep: Function used to wait between retries

        """
        if config is None:
            config = ClientConfig.from_env(
                api_base_url=api_base_url,
                timeout=timeout,
                retries=retries,
                retry_delay=retry_delay,
            )
        self._config = config
        self._client = APIClient(config, sleep=sleep) if sleep else APIClient(config)

        self.content = ContentOperations(self._client)

    @property
    def config(self) -> ClientConfig:
        """Get a copy of the client configuration."""
        return self._config.copy()

    @property
    def http(self) -> APIClient:
        """Get the underlying HTTP client (for advanced usage)."""
        return self._client

    def create_query(self) -> QueryBuilder:
        """Create a new query builder."""
        return QueryBuilder()


# =============================================================================
# Content Operations
# =============================================================================


def _optional_content(result: Any) -> Content | None:
    """Parse a write response; status actions may answer with an empty body."""
    if not isinstance(result, dict):
        return None
    return Content.from_dict(result)


def _compile(query: QueryBuilder | CompiledQuery | None) -> CompiledQuery:
    if query is None:
        return {}
    if isinstance(query, QueryBuilder):
        return query.build()
    return dict(query)


class ContentOperations:
    """Operations for managing content items."""

    def __init__(self, client: APIClient):
        self._client = client

    def list(
        self,
        schema: str,
        query: QueryBuilder | CompiledQuery | None = None,
    ) -> ContentList:
        """
        List content items of a schema.

        Args:
            schema: Schema name
            query: QueryBuilder or already compiled query parameters

        Returns:
            ContentList with the total count and one page of items

        """
        result = self._client.get(self._client.urls.content_path(schema), _compile(query))
        return ContentList.from_dict(result or {})

    def iterate(
        self,
        schema: str,
        query: QueryBuilder | CompiledQuery | None = None,
        page_size: int = DEFAULT_PAGE_SIZE,
    ) -> Iterator[Content]:
        """
        Iterate through all matching content items, page by page.

        Paging starts at the query's $skip (default 0); the query's $top is
        replaced by ``page_size``.

        Yields:
            Content items

        """
        params = _compile(query)
        offset = params.get("$skip") or 0

        while True:
            page = self.list(schema, {**params, "$top": page_size, "$skip": offset})
            yield from page.items

            offset += len(page.items)
            if offset >= page.total or not page.items:
                break

    def get(self, schema: str, content_id: str) -> Content:
        """
        Get a content item by ID.

        Args:
            schema: Schema name
            content_id: Content ID

        Returns:
            Content item

        Raises:
            SquidexError: UNCLASSIFIED when the gateway sends no item

        """
        result = self._client.get(self._client.urls.content_item_path(schema, content_id))
        if not isinstance(result, dict):
            raise SquidexError(
                ErrorKind.UNCLASSIFIED,
                f"Empty response for content {content_id}",
                details={"schema": schema, "id": content_id},
            )
        return Content.from_dict(result)

    def create(
        self,
        schema: str,
        data: dict[str, Any],
        options: CreateContentOptions | None = None,
    ) -> Content | None:
        """
        Create a new content item.

        Args:
            schema: Schema name
            data: Content data, e.g. {"title": {"iv": "New Question"}}
            options: Publish immediately / explicit ID

        Returns:
            Created content item, or None when the gateway sends no body

        """
        options = options or CreateContentOptions()
        result = self._client.post(
            self._client.urls.content_path(schema),
            data,
            params={"publish": options.publish or None, "id": options.id},
        )
        return _optional_content(result)

    def update(
        self,
        schema: str,
        content_id: str,
        data: dict[str, Any],
        options: UpdateContentOptions | None = None,
    ) -> Content | None:
        """
        Update an existing content item.

        Uses PUT (full replacement) unless ``options.patch`` is set, in which
        case a PATCH (partial update) is sent. ``options.expected_version`` is
        sent as If-Match for optimistic concurrency.

        Returns:
            Updated content item, or None when the gateway sends no body

        """
        options = options or UpdateContentOptions()
        headers = {}
        if options.expected_version is not None:
            headers["If-Match"] = str(options.expected_version)

        path = self._client.urls.content_item_path(schema, content_id)
        if options.patch:
            result = self._client.patch(path, data, headers=headers)
        else:
            result = self._client.put(path, data, headers=headers)
        return _optional_content(result)

    def delete(
        self,
        schema: str,
        content_id: str,
        options: DeleteContentOptions | None = None,
    ) -> bool:
        """
        Delete a content item.

        Returns:
            True on success

        """
        options = options or DeleteContentOptions()
        self._client.delete(
            self._client.urls.content_item_path(schema, content_id),
            params={"permanent": options.permanent or None},
        )
        return True

    def _action(self, schema: str, content_id: str, action: str) -> Content | None:
        result = self._client.put(self._client.urls.content_action_path(schema, content_id, action))
        return _optional_content(result)

    def publish(self, schema: str, content_id: str) -> Content | None:
        """Publish a content item."""
        return self._action(schema, content_id, "publish")

    def unpublish(self, schema: str, content_id: str) -> Content | None:
        """Unpublish a content item."""
        return self._action(schema, content_id, "unpublish")

    def archive(self, schema: str, content_id: str) -> Content | None:
        """Archive a content item."""
        return self._action(schema, content_id, "archive")

    def restore(self, schema: str, content_id: str) -> Content | None:
        """Restore a content item from the archive."""
        return self._action(schema, content_id, "restore")
