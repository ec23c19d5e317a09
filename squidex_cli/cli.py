"""
Squidex CLI - Opinionated command-line interface.

This layer provides the user-facing CLI commands, using the SDK layer
for all operations. It handles:
- Argument parsing
- TTY detection for human vs machine output
- Pretty formatting for human output
- JSON output for piping/automation
"""

import argparse
import json
import logging
import sys
from typing import Any

from dotenv import load_dotenv

from squidex_cli.core.errors import CLIError, ValidationError
from squidex_cli.core.query import QueryBuilder
from squidex_cli.core.types import (
    Content,
    CreateContentOptions,
    DeleteContentOptions,
    UpdateContentOptions,
)
from squidex_cli.sdk import SquidexClient

# =============================================================================
# Output Helpers
# =============================================================================


HUMAN_LIMIT = 20  # Default $top for human-readable output


def is_tty() -> bool:
    """Check if stdout is a TTY (human) or pipe (LLM/machine)."""
    return sys.stdout.isatty()


def json_output(data: Any, pretty: bool = False) -> None:
    """Print JSON output."""
    indent = 2 if pretty or is_tty() else None
    print(json.dumps(data, indent=indent, default=str))


def error_output(error: CLIError) -> None:
    """Print error and exit."""
    json_output(error.to_dict())
    sys.exit(1)


def success_output(data: Any) -> None:
    """Print success output."""
    json_output(data)


def table_output(
    headers: list[str],
    rows: list[list[str]],
    widths: list[int],
) -> None:
    """Print a formatted table for human output."""
    header_line = "  ".join(h.ljust(w) for h, w in zip(headers, widths))
    print(header_line)
    print("-" * len(header_line))

    for row in rows:
        print("  ".join(str(v)[:w].ljust(w) for v, w in zip(row, widths)))


# =============================================================================
# Argument Parsing Helpers
# =============================================================================


def parse_value(text: str) -> Any:
    """Parse a CLI value as JSON (numbers, booleans, quoted strings), else keep the raw string."""
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        return text


def split_assignment(text: str) -> tuple[str, str]:
    """Split ``field=value``."""
    field, sep, value = text.partition("=")
    if not sep or not field:
        raise ValidationError(f"Expected field=value, got: {text!r}")
    return field, value


def read_json_arg(value: str, flag: str) -> Any:
    """Read a JSON argument, or stdin when the value is ``-``."""
    try:
        if value == "-":
            return json.load(sys.stdin)
        return json.loads(value)
    except json.JSONDecodeError as e:
        raise ValidationError(f"Invalid JSON in {flag}: {e}")


class ClauseAction(argparse.Action):
    """Collect filter flags into one ordered list of (operator, argument) pairs."""

    def __call__(self, parser, namespace, values, option_string=None):
        clauses = list(getattr(namespace, self.dest, None) or [])
        clauses.append((self.const, values))
        setattr(namespace, self.dest, clauses)


def build_query(args: argparse.Namespace) -> QueryBuilder:
    """Translate filter/sort/paging flags into a QueryBuilder, keeping flag order."""
    query = QueryBuilder()

    for op, arg in args.clauses or []:
        if op == "raw":
            query.raw(arg)
            continue

        field, value = split_assignment(arg)
        if op == "eq":
            query.equals(field, parse_value(value))
        elif op == "ne":
            query.not_equals(field, parse_value(value))
        elif op in ("gt", "ge", "lt", "le"):
            number = parse_value(value)
            if isinstance(number, bool) or not isinstance(number, (int, float)):
                raise ValidationError(f"--{op} expects a number, got: {value!r}")
            {
                "gt": query.greater_than,
                "ge": query.greater_or_equal,
                "lt": query.less_than,
                "le": query.less_or_equal,
            }[op](field, number)
        elif op == "contains":
            query.contains(field, value)
        elif op == "startswith":
            query.starts_with(field, value)
        elif op == "endswith":
            query.ends_with(field, value)
        elif op == "in":
            values = [parse_value(v) for v in value.split(",")] if value else []
            query.in_(field, values)

    if args.orderby:
        parts = args.orderby.split()
        if len(parts) == 2 and parts[1] in ("asc", "desc"):
            query.order_by(parts[0], parts[1])
        elif len(parts) == 1:
            query.order_by(parts[0])
        else:
            raise ValidationError(f"--orderby expects 'field [asc|desc]', got: {args.orderby!r}")
    if args.top is not None:
        query.top(args.top)
    if args.skip is not None:
        query.skip(args.skip)
    if args.search is not None:
        query.search(args.search)

    return query


def content_summary(item: Content) -> dict[str, Any]:
    """Compact JSON shape of a content item."""
    return {
        "id": item.id,
        "status": item.status,
        "version": item.version,
        "lastModified": item.last_modified,
        "data": item.data,
    }


# =============================================================================
# CLI Commands
# =============================================================================


def cmd_query(_client: SquidexClient | None, args: argparse.Namespace) -> None:
    """Print the compiled query parameters without calling the API."""
    try:
        success_output(build_query(args).build())
    except CLIError as e:
        error_output(e)


def cmd_content_list(client: SquidexClient, args: argparse.Namespace) -> None:
    """List content items of a schema."""
    try:
        query = build_query(args)

        if is_tty():
            if args.top is None:
                query.top(HUMAN_LIMIT)
            page = client.content.list(args.schema, query)
            if not page.items:
                print("No content found.")
                return

            table_output(
                ["ID", "Status", "Version", "Last Modified"],
                [[c.id, c.status or "", str(c.version), c.last_modified or ""] for c in page.items],
                [36, 12, 8, 28],
            )

            if len(page.items) < page.total:
                print(f"\nShowing {len(page.items)} of {page.total} items")
        elif args.top is not None:
            page = client.content.list(args.schema, query)
            success_output({"items": [content_summary(c) for c in page.items], "total": page.total})
        else:
            items = list(client.content.iterate(args.schema, query))
            success_output({"items": [content_summary(c) for c in items], "total": len(items)})
    except CLIError as e:
        error_output(e)


def cmd_content_get(client: SquidexClient, args: argparse.Namespace) -> None:
    """Get a content item by ID."""
    try:
        item = client.content.get(args.schema, args.content_id)
        success_output(item.to_dict())
    except CLIError as e:
        error_output(e)


def cmd_content_create(client: SquidexClient, args: argparse.Namespace) -> None:
    """Create a content item."""
    try:
        data = read_json_arg(args.data, "--data")
        item = client.content.create(
            args.schema,
            data,
            CreateContentOptions(publish=args.publish, id=args.id),
        )
        if item is None:
            success_output({"id": args.id, "status": None, "message": "Content created"})
            return
        success_output({"id": item.id, "status": item.status, "message": "Content created"})
    except CLIError as e:
        error_output(e)


def cmd_content_update(client: SquidexClient, args: argparse.Namespace) -> None:
    """Update a content item."""
    try:
        data = read_json_arg(args.data, "--data")
        item = client.content.update(
            args.schema,
            args.content_id,
            data,
            UpdateContentOptions(patch=args.patch, expected_version=args.expected_version),
        )
        if item is None:
            success_output({"id": args.content_id, "version": None, "message": "Content updated"})
            return
        success_output({"id": item.id, "version": item.version, "message": "Content updated"})
    except CLIError as e:
        error_output(e)


def cmd_content_delete(client: SquidexClient, args: argparse.Namespace) -> None:
    """Delete a content item."""
    try:
        client.content.delete(
            args.schema,
            args.content_id,
            DeleteContentOptions(permanent=args.permanent),
        )
        success_output({"success": True, "message": f"Content {args.content_id} deleted"})
    except CLIError as e:
        error_output(e)


def cmd_content_action(client: SquidexClient, args: argparse.Namespace) -> None:
    """Run a status action (publish, unpublish, archive, restore)."""
    try:
        item = getattr(client.content, args.action)(args.schema, args.content_id)
        success_output(
            {
                "id": item.id if item else args.content_id,
                "status": item.status if item else None,
                "message": f"Content {args.action} done",
            }
        )
    except CLIError as e:
        error_output(e)


# =============================================================================
# Main CLI
# =============================================================================


def add_query_arguments(parser: argparse.ArgumentParser) -> None:
    """Add filter/sort/paging flags shared by `content list` and `query`."""
    filters = [
        ("--eq", "eq", "field=value: equals (value parsed as JSON, else string)"),
        ("--ne", "ne", "field=value: not equals"),
        ("--gt", "gt", "field=number: greater than"),
        ("--ge", "ge", "field=number: greater or equal"),
        ("--lt", "lt", "field=number: less than"),
        ("--le", "le", "field=number: less or equal"),
        ("--contains", "contains", "field=text: contains(field, 'text')"),
        ("--startswith", "startswith", "field=text: startswith(field, 'text')"),
        ("--endswith", "endswith", "field=text: endswith(field, 'text')"),
        ("--in", "in", "field=v1,v2,...: field in (v1,v2,...)"),
        ("--filter", "raw", "Raw filter expression"),
    ]
    for flag, op, help_text in filters:
        parser.add_argument(flag, dest="clauses", action=ClauseAction, const=op, metavar="EXPR", help=help_text)
    parser.add_argument("--orderby", help="Sort as 'field [asc|desc]'")
    parser.add_argument("--top", type=int, help="Max results")
    parser.add_argument("--skip", type=int, help="Results to skip")
    parser.add_argument("--search", help="Full-text search term")


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="squidex",
        description="Squidex CLI - Command-line interface for Squidex content via ap-games-api",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Output Modes:
  TTY (human):  Pretty tables, limited rows
  Pipe (LLM):   Full JSON, auto-paginates all results

Examples:
  squidex content list questions --eq data/difficulty/iv=easy --orderby "created desc"
  squidex content get questions <id>
  squidex content create questions --data '{"title": {"iv": "Hello"}}' --publish
  squidex query --contains data/title/iv=math --top 20
""",
    )
    parser.add_argument("--base-url", help="Gateway base URL (overrides SQUIDEX_API_BASE_URL)")
    parser.add_argument("--verbose", "-v", action="store_true", help="Log HTTP requests and retries")
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # ========== Query ==========
    query = subparsers.add_parser("query", help="Print compiled query parameters")
    add_query_arguments(query)
    query.set_defaults(func=cmd_query, offline=True)

    # ========== Content ==========
    content = subparsers.add_parser("content", help="List and manage content items")
    content.set_defaults(func=lambda _c, _a: content.print_help(), offline=True)
    content_sub = content.add_subparsers(dest="subcommand")

    c_list = content_sub.add_parser("list", help="List content items")
    c_list.add_argument("schema", help="Schema name")
    add_query_arguments(c_list)
    c_list.set_defaults(func=cmd_content_list, offline=False)

    c_get = content_sub.add_parser("get", help="Get a content item")
    c_get.add_argument("schema", help="Schema name")
    c_get.add_argument("content_id", help="Content ID")
    c_get.set_defaults(func=cmd_content_get, offline=False)

    c_create = content_sub.add_parser("create", help="Create a content item")
    c_create.add_argument("schema", help="Schema name")
    c_create.add_argument("--data", "-d", required=True, help="JSON content data (or - for stdin)")
    c_create.add_argument("--publish", action="store_true", help="Publish immediately")
    c_create.add_argument("--id", help="Explicit content ID")
    c_create.set_defaults(func=cmd_content_create, offline=False)

    c_update = content_sub.add_parser("update", help="Update a content item")
    c_update.add_argument("schema", help="Schema name")
    c_update.add_argument("content_id", help="Content ID")
    c_update.add_argument("--data", "-d", required=True, help="JSON content data (or - for stdin)")
    c_update.add_argument("--patch", action="store_true", help="Partial update (PATCH)")
    c_update.add_argument("--expected-version", type=int, help="Fail unless the item is at this version")
    c_update.set_defaults(func=cmd_content_update, offline=False)

    c_delete = content_sub.add_parser("delete", help="Delete a content item")
    c_delete.add_argument("schema", help="Schema name")
    c_delete.add_argument("content_id", help="Content ID")
    c_delete.add_argument("--permanent", action="store_true", help="Delete permanently")
    c_delete.set_defaults(func=cmd_content_delete, offline=False)

    for action in ("publish", "unpublish", "archive", "restore"):
        c_action = content_sub.add_parser(action, help=f"{action.capitalize()} a content item")
        c_action.add_argument("schema", help="Schema name")
        c_action.add_argument("content_id", help="Content ID")
        c_action.set_defaults(func=cmd_content_action, action=action, offline=False)

    return parser


def main(argv: list[str] | None = None) -> None:
    """Main CLI entry point."""
    load_dotenv()

    parser = create_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        sys.exit(0)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    # Create client (not needed for offline commands)
    client = None
    if not args.offline:
        try:
            client = SquidexClient(api_base_url=args.base_url)
        except CLIError as e:
            error_output(e)

    args.func(client, args)


if __name__ == "__main__":
    main()
