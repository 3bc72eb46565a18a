# =============================================================================
# core/schema.py - Table Definitions and Row Ownership Policy
# =============================================================================
# Python mirror of supabase/migrations/*_create_songs_and_prompter_settings.sql.
#
# It describes both tables (columns, defaults, check constraints) and the
# row-level security rules that apply to them:
# - an actor may only select, insert, update or delete rows it owns
# - insert/update payloads may not name another owner
# - prompter settings can never be deleted directly
# - anonymous actors are denied everything
#
# The in-memory store enforces the constraints; OwnedTable enforces the
# policy for every repository call, whatever the backend.
# =============================================================================

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Callable
from uuid import UUID

from app.exceptions import AuthorizationError, ConstraintViolationError
from core.models.prompter import DEFAULT_ROTATION_INTERVAL, FontSize
from core.models.song import SongCategory


class Operation(str, Enum):
    """Row operations covered by the ownership policy."""
    SELECT = "select"
    INSERT = "insert"
    UPDATE = "update"
    DELETE = "delete"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class TableSchema:
    """
    Storage-level description of one table.

    Attributes:
        name: Table name
        primary_key: Column holding the row identity
        owner_column: Column holding the owning account id
        columns: All columns, in declaration order
        not_null: Columns that may never be NULL
        defaults: Column -> value or zero-argument factory applied on insert
        checks: Column -> allowed values (CHECK ... IN (...))
        operations: Operations the policy allows on owned rows
        generated_key: Whether the primary key is generated by the server
    """
    name: str
    primary_key: str
    owner_column: str
    columns: tuple[str, ...]
    not_null: frozenset[str]
    defaults: dict[str, Any] = field(default_factory=dict)
    checks: dict[str, frozenset[str]] = field(default_factory=dict)
    operations: frozenset[Operation] = frozenset(Operation)
    generated_key: bool = False


SONGS = TableSchema(
    name="songs",
    primary_key="id",
    owner_column="user_id",
    columns=(
        "id", "user_id", "title", "category", "mnemonic",
        "lyrics", "media_link", "created_at", "updated_at",
    ),
    not_null=frozenset({"id", "user_id", "title", "category"}),
    defaults={"created_at": utcnow, "updated_at": utcnow},
    checks={"category": frozenset(SongCategory.values())},
    generated_key=True,
)

PROMPTER_SETTINGS = TableSchema(
    name="prompter_settings",
    primary_key="user_id",
    owner_column="user_id",
    columns=(
        "user_id", "rotation_interval", "font_size", "is_dark_mode",
        "use_high_contrast", "upper_case", "updated_at",
    ),
    not_null=frozenset({
        "user_id", "rotation_interval", "font_size", "is_dark_mode",
        "use_high_contrast", "upper_case",
    }),
    defaults={
        "rotation_interval": DEFAULT_ROTATION_INTERVAL,
        "font_size": FontSize.MEDIUM.value,
        "is_dark_mode": True,
        "use_high_contrast": False,
        "upper_case": False,
        "updated_at": utcnow,
    },
    checks={"font_size": frozenset(FontSize.values())},
    # No delete policy: settings only go away with the account
    operations=frozenset({Operation.SELECT, Operation.INSERT, Operation.UPDATE}),
)

TABLES: dict[str, TableSchema] = {
    SONGS.name: SONGS,
    PROMPTER_SETTINGS.name: PROMPTER_SETTINGS,
}


# =============================================================================
# Constraints
# =============================================================================

def apply_defaults(schema: TableSchema, row: dict[str, Any]) -> dict[str, Any]:
    """Return a copy of `row` with column defaults filled in for missing columns."""
    result = dict(row)
    for column, default in schema.defaults.items():
        if result.get(column) is None:
            result[column] = default() if callable(default) else default
    return result


def check_row(schema: TableSchema, row: dict[str, Any]) -> None:
    """
    Validate a complete row against the table's constraints.

    Raises:
        ConstraintViolationError: On unknown columns, NULL in a NOT NULL
            column, or a value outside a CHECK enumeration
    """
    unknown = set(row) - set(schema.columns)
    if unknown:
        raise ConstraintViolationError(
            schema.name,
            "columns",
            f"Unknown column(s) for {schema.name}: {', '.join(sorted(unknown))}",
        )

    for column in schema.not_null:
        if row.get(column) is None:
            raise ConstraintViolationError(
                schema.name,
                f"{column}_not_null",
                f'Null value in column "{column}" of {schema.name}',
            )

    for column, allowed in schema.checks.items():
        value = row.get(column)
        if isinstance(value, Enum):
            value = value.value
        if value not in allowed:
            raise ConstraintViolationError(
                schema.name,
                f"{schema.name}_{column}_check",
                f'Value "{value}" violates check constraint on {schema.name}.{column}',
            )


def touch(fields: dict[str, Any], now: Callable[[], datetime] = utcnow) -> dict[str, Any]:
    """
    Stamp `updated_at` on an update payload.

    Any client-supplied updated_at is overwritten.
    """
    stamped = dict(fields)
    stamped["updated_at"] = now()
    return stamped


# =============================================================================
# Ownership Policy
# =============================================================================

def owner_of(schema: TableSchema, row: dict[str, Any]) -> str | None:
    value = row.get(schema.owner_column)
    return str(value) if value is not None else None


def authorize(
    schema: TableSchema,
    operation: Operation,
    actor: UUID | str | None,
    row: dict[str, Any] | None = None,
    submitted: dict[str, Any] | None = None,
) -> None:
    """
    Apply the row-level security rule for one operation.

    Args:
        schema: Table being accessed
        operation: What the actor wants to do
        actor: Authenticated account id, or None for anonymous access
        row: Existing row being read/changed/deleted (the USING clause)
        submitted: New row values for insert/update (the WITH CHECK clause)

    Raises:
        AuthorizationError: If the operation is denied
    """
    if actor is None or operation not in schema.operations:
        raise AuthorizationError(schema.name, operation.value)

    actor_id = str(actor)

    if row is not None and owner_of(schema, row) != actor_id:
        raise AuthorizationError(schema.name, operation.value)

    if operation in (Operation.INSERT, Operation.UPDATE) and submitted is not None:
        submitted_owner = owner_of(schema, submitted)
        if operation == Operation.INSERT and submitted_owner is None:
            raise AuthorizationError(schema.name, operation.value)
        if submitted_owner is not None and submitted_owner != actor_id:
            raise AuthorizationError(schema.name, operation.value)
