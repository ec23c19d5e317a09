"""
OData-style query builder for content listing endpoints.

Compiles chained filter/sort/paging calls into the query parameters the
gateway's content endpoints accept ($filter, $orderby, $top, $skip, $search).

Example:
    query = (
        QueryBuilder()
        .equals("data/difficulty/iv", "easy")
        .contains("data/title/iv", "math")
        .order_by("created", "desc")
        .top(20)
        .build()
    )

String operands are wrapped in single quotes as-is. Embedded quotes are NOT
escaped; callers must not pass values containing ``'``.
"""

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any, Literal, Union

Operand = Union[str, int, float, bool]
Direction = Literal["asc", "desc"]

# Compiled query: keys are "$filter", "$orderby", "$top", "$skip", "$search"
CompiledQuery = dict[str, Any]

FUNCTION_OPERATORS = ("contains", "startswith", "endswith")
CLAUSE_SEPARATOR = " and "


def format_literal(value: Any) -> str:
    """Render an operand: strings quoted, booleans lowercase, numbers bare."""
    if isinstance(value, str):
        return f"'{value}'"
    return format_bare(value)


def format_bare(value: Any) -> str:
    """Render an operand without quoting. Integral floats drop the trailing ".0"."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


@dataclass(frozen=True)
class FilterClause:
    """A single filter predicate."""

    field: str
    operator: str
    operand: Any

    def render(self) -> str:
        """Render the clause as a filter expression fragment."""
        if self.operator in FUNCTION_OPERATORS:
            return f"{self.operator}({self.field}, '{self.operand}')"
        if self.operator == "in":
            values = ",".join(format_literal(v) for v in self.operand)
            return f"{self.field} in ({values})"
        if self.operator in ("eq", "ne"):
            return f"{self.field} {self.operator} {format_literal(self.operand)}"
        return f"{self.field} {self.operator} {format_bare(self.operand)}"


class QueryBuilder:
    """
    Fluent builder for content queries.

    Every method returns the builder itself. Filter clauses accumulate in call
    order; order_by, top, skip and search keep only the latest value. build()
    does not reset the builder.
    """

    def __init__(self) -> None:
        self._clauses: list[FilterClause | str] = []
        self._order_by: tuple[str, str] | None = None
        self._top: int | None = None
        self._skip: int | None = None
        self._search: str | None = None

    def __repr__(self) -> str:
        return f"QueryBuilder({self.build()!r})"

    @property
    def clauses(self) -> tuple[FilterClause | str, ...]:
        """Filter clauses added so far, in call order."""
        return tuple(self._clauses)

    def copy(self) -> "QueryBuilder":
        """Return an independent builder with the same state."""
        other = QueryBuilder()
        other._clauses = list(self._clauses)
        other._order_by = self._order_by
        other._top = self._top
        other._skip = self._skip
        other._search = self._search
        return other

    def _add(self, field: str, operator: str, operand: Any) -> "QueryBuilder":
        self._clauses.append(FilterClause(field, operator, operand))
        return self

    # =========================================================================
    # Filters
    # =========================================================================

    def equals(self, field: str, value: Operand) -> "QueryBuilder":
        """Add ``field eq value``."""
        return self._add(field, "eq", value)

    def not_equals(self, field: str, value: Operand) -> "QueryBuilder":
        """Add ``field ne value``."""
        return self._add(field, "ne", value)

    def greater_than(self, field: str, value: int | float) -> "QueryBuilder":
        return self._add(field, "gt", value)

    def greater_or_equal(self, field: str, value: int | float) -> "QueryBuilder":
        return self._add(field, "ge", value)

    def less_than(self, field: str, value: int | float) -> "QueryBuilder":
        return self._add(field, "lt", value)

    def less_or_equal(self, field: str, value: int | float) -> "QueryBuilder":
        return self._add(field, "le", value)

    def contains(self, field: str, value: str) -> "QueryBuilder":
        """Add ``contains(field, 'value')``."""
        return self._add(field, "contains", value)

    def starts_with(self, field: str, value: str) -> "QueryBuilder":
        """Add ``startswith(field, 'value')``."""
        return self._add(field, "startswith", value)

    def ends_with(self, field: str, value: str) -> "QueryBuilder":
        """Add ``endswith(field, 'value')``."""
        return self._add(field, "endswith", value)

    def in_(self, field: str, values: Sequence[str | int | float]) -> "QueryBuilder":
        """
        Add ``field in (v1,v2,...)``.

        An empty sequence compiles to ``field in ()``.
        """
        return self._add(field, "in", tuple(values))

    def raw(self, expression: str) -> "QueryBuilder":
        """Add a filter expression verbatim."""
        self._clauses.append(expression)
        return self

    # =========================================================================
    # Sorting, paging, search
    # =========================================================================

    def order_by(self, field: str, direction: Direction = "asc") -> "QueryBuilder":
        """Set the sort order, replacing any previous one."""
        self._order_by = (field, direction)
        return self

    def top(self, limit: int) -> "QueryBuilder":
        """Set the maximum number of items to return."""
        self._top = limit
        return self

    def skip(self, offset: int) -> "QueryBuilder":
        """Set the number of items to skip."""
        self._skip = offset
        return self

    def search(self, term: str) -> "QueryBuilder":
        """Set the full-text search term. An empty string still counts as set."""
        self._search = term
        return self

    # =========================================================================
    # Compile
    # =========================================================================

    def build(self) -> CompiledQuery:
        """Compile the accumulated state into query parameters."""
        query: CompiledQuery = {}

        if self._clauses:
            query["$filter"] = CLAUSE_SEPARATOR.join(
                c if isinstance(c, str) else c.render() for c in self._clauses
            )

        if self._order_by is not None:
            field, direction = self._order_by
            query["$orderby"] = f"{field} {direction}"

        if self._top is not None:
            query["$top"] = self._top

        if self._skip is not None:
            query["$skip"] = self._skip

        if self._search is not None:
            query["$search"] = self._search

        return query
