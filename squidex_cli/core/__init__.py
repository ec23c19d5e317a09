"""
Core layer - Query builder, error taxonomy and HTTP client.

This layer provides:
- QueryBuilder compiling filters into OData query parameters
- SquidexError taxonomy, classifier and retryability predicate
- Low-level HTTP client with retries and error classification
"""

from squidex_cli.core.client import APIClient, ClientConfig
from squidex_cli.core.errors import (
    CLIError,
    ConfigError,
    ErrorKind,
    SquidexError,
    TransportError,
    ValidationError,
    classify_error,
    extract_error_message,
    is_retryable,
)
from squidex_cli.core.query import CompiledQuery, FilterClause, QueryBuilder
from squidex_cli.core.retry import RetryPolicy, retry_delay
from squidex_cli.core.types import (
    Content,
    ContentList,
    CreateContentOptions,
    DeleteContentOptions,
    UpdateContentOptions,
)
from squidex_cli.core.urls import UrlBuilder

__all__ = [
    "APIClient",
    "CLIError",
    "ClientConfig",
    "CompiledQuery",
    "ConfigError",
    "Content",
    "ContentList",
    "CreateContentOptions",
    "DeleteContentOptions",
    "ErrorKind",
    "FilterClause",
    "QueryBuilder",
    "RetryPolicy",
    "SquidexError",
    "TransportError",
    "UpdateContentOptions",
    "UrlBuilder",
    "ValidationError",
    "classify_error",
    "extract_error_message",
    "is_retryable",
    "retry_delay",
]
