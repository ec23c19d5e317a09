"""
Squidex CLI - Three-layer client for Squidex content behind ap-games-api.

Layers:
- core: Query builder, error taxonomy and HTTP client
- sdk: High-level SquidexClient with nice ergonomics
- cli: Opinionated command-line interface
"""

from squidex_cli.core.client import ClientConfig
from squidex_cli.core.errors import ErrorKind, SquidexError
from squidex_cli.core.query import QueryBuilder
from squidex_cli.sdk import SquidexClient

__version__ = "0.1.0"
__all__ = ["ClientConfig", "ErrorKind", "QueryBuilder", "SquidexClient", "SquidexError"]
