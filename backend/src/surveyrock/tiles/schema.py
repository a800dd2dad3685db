"""Normalize schema-introspection payloads into DatabaseField lists.

Accepted payload shapes:
1. Array of tables: [{"name" | "table_name": ..., "columns": [...]}, ...]
2. Object of tables: {"orders": [{column}, ...], ...}
3. Two-level listing: {"schemas": [...], "tables": {schema: [table, ...]}}
   whose columns are fetched per table.

Payloads may arrive wrapped in a response envelope ({"success", "data"} or
{"schema": ...}). Unrecognized shapes produce no fields.
"""

import logging
from collections.abc import Awaitable, Callable
from typing import Any

from surveyrock.tiles.types import DatabaseField

logger = logging.getLogger(__name__)

# (schema, table) -> column list
ColumnFetcher = Callable[[str, str], Awaitable[list[dict[str, Any]]]]


class SchemaPayloadError(Exception):
    """Raised when a schema response reports an error instead of a payload."""

    pass


def unwrap_schema_response(response: Any) -> Any:
    """Strip the response envelope from a schema payload.

    Raises:
        SchemaPayloadError: If the response is empty or carries an error
    """
    if not response:
        raise SchemaPayloadError("Failed to fetch schema data")
    if isinstance(response, dict):
        if response.get("error"):
            raise SchemaPayloadError(str(response["error"]))
        if response.get("success") and response.get("data") is not None:
            return response["data"]
        if response.get("schema") is not None:
            return response["schema"]
    return response


def field_from_column(column: dict[str, Any], table: str) -> DatabaseField | None:
    """Build a field from a column record; None if the column has no name."""
    if not isinstance(column, dict):
        return None
    name = column.get("name") or column.get("column_name")
    if not name:
        return None
    return DatabaseField(
        name=str(name),
        type=str(column.get("type") or column.get("data_type") or ""),
        table=table,
        description=column.get("description") or "",
    )


def _fields_from_columns(columns: Any, table: str) -> list[DatabaseField]:
    if not isinstance(columns, list):
        return []
    fields = []
    for column in columns:
        field = field_from_column(column, table)
        if field:
            fields.append(field)
    return fields


def is_two_level(payload: Any) -> bool:
    return (
        isinstance(payload, dict)
        and bool(payload.get("schemas"))
        and isinstance(payload.get("tables"), dict)
    )


def fields_from_tables(payload: Any) -> list[DatabaseField]:
    """Normalize the single-level shapes (array or object of tables)."""
    fields: list[DatabaseField] = []

    if isinstance(payload, list):
        for table in payload:
            if not isinstance(table, dict):
                continue
            table_name = table.get("name") or table.get("table_name")
            if not table_name:
                continue
            fields.extend(_fields_from_columns(table.get("columns"), str(table_name)))
        return fields

    if isinstance(payload, dict) and not is_two_level(payload):
        for table_name, columns in payload.items():
            fields.extend(_fields_from_columns(columns, str(table_name)))
        return fields

    return fields


async def fields_from_schema_listing(
    payload: dict[str, Any],
    fetch_columns: ColumnFetcher,
) -> list[DatabaseField]:
    """Normalize the two-level shape, fetching columns one table at a time.

    A table whose columns cannot be fetched is logged and skipped.
    """
    fields: list[DatabaseField] = []
    tables = payload["tables"]

    for schema in payload["schemas"]:
        for table_name in tables.get(schema) or []:
            try:
                columns = await fetch_columns(schema, table_name)
            except Exception as e:
                logger.warning("Error loading columns for %s.%s: %s", schema, table_name, e)
                continue
            fields.extend(_fields_from_columns(columns, f"{schema}.{table_name}"))

    return fields


async def normalize_schema(
    payload: Any,
    fetch_columns: ColumnFetcher | None = None,
) -> list[DatabaseField]:
    """Normalize any accepted schema payload into a flat field list.

    Args:
        payload: Unwrapped schema payload
        fetch_columns: Column loader for the two-level shape

    Returns:
        Fields in table order, then column order
    """
    if is_two_level(payload):
        if fetch_columns is None:
            logger.warning("Schema listing needs a column fetcher; no fields loaded")
            return []
        return await fields_from_schema_listing(payload, fetch_columns)

    fields = fields_from_tables(payload)
    if not fields and payload:
        logger.info("Unrecognized schema payload shape: %s", type(payload).__name__)
    return fields
