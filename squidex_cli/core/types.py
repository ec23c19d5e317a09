"""
Core types for content served by the Squidex gateway.

These dataclasses provide type safety and IDE support for API responses.
Content payloads (the ``data`` field) are passed through untouched; the
backend owns schema validation.
"""

from dataclasses import dataclass, field
from typing import Any

# =============================================================================
# Content Types
# =============================================================================


@dataclass
class Content:
    """A content item of some schema."""

    id: str
    data: dict[str, Any] = field(default_factory=dict)
    version: int = 0
    created: str | None = None
    created_by: str | None = None
    last_modified: str | None = None
    last_modified_by: str | None = None
    status: str | None = None
    new_status: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Content":
        """Create from API response dict."""
        return cls(
            id=data["id"],
            data=data.get("data") or {},
            version=data.get("version", 0),
            created=data.get("created"),
            created_by=data.get("createdBy") or data.get("created_by"),
            last_modified=data.get("lastModified") or data.get("last_modified"),
            last_modified_by=data.get("lastModifiedBy") or data.get("last_modified_by"),
            status=data.get("status"),
            new_status=data.get("newStatus") or data.get("new_status"),
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dict for JSON output."""
        result = {
            "id": self.id,
            "created": self.created,
            "createdBy": self.created_by,
            "lastModified": self.last_modified,
            "lastModifiedBy": self.last_modified_by,
            "data": self.data,
            "version": self.version,
            "status": self.status,
        }
        if self.new_status:
            result["newStatus"] = self.new_status
        return result


@dataclass
class ContentList:
    """A page of content items."""

    total: int
    items: list[Content] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ContentList":
        """Create from API response dict."""
        items = [Content.from_dict(item) for item in data.get("items") or []]
        total = data.get("total")
        return cls(total=total if total is not None else len(items), items=items)


# =============================================================================
# Operation Options
# =============================================================================


@dataclass
class CreateContentOptions:
    """Options for creating content."""

    publish: bool = False
    id: str | None = None


@dataclass
class UpdateContentOptions:
    """Options for updating content."""

    # PATCH (partial update) instead of PUT
    patch: bool = False
    # Sent as If-Match for optimistic concurrency
    expected_version: int | None = None


@dataclass
class DeleteContentOptions:
    """Options for deleting content."""

    permanent: bool = False
