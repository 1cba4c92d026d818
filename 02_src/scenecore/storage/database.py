"""Storage port and its SQLite implementation."""

from pathlib import Path
from typing import TYPE_CHECKING, Any, Protocol, Sequence

import aiosqlite

from ..config import resolve_db_path
from ..logging_config import get_logger, operation_context
from ..models import ActiveRecord

if TYPE_CHECKING:
    from ..scene import Scene

logger = get_logger(__name__)


class IDatabase(Protocol):
    """CRUD over record classes, for any relational backend."""

    async def insert(
        self,
        scene: "Scene",
        record_class: type[ActiveRecord],
        props: dict[str, Any],
    ) -> ActiveRecord:
        """Insert a record and return it with storage-assigned fields."""
        ...

    async def update(self, scene: "Scene", record: ActiveRecord) -> None:
        """Persist all fields of an existing record."""
        ...

    async def delete(self, scene: "Scene", record: ActiveRecord) -> None:
        """Delete an existing record."""
        ...

    async def query_by_example(
        self,
        scene: "Scene",
        record_class: type[ActiveRecord],
        props: dict[str, Any],
    ) -> list[ActiveRecord]:
        """Records whose fields equal every given value (= and AND only)."""
        ...

    async def execute_sql(
        self,
        scene: "Scene",
        sql: str,
        sql_vars: dict[str, Any],
        read: Sequence[type[ActiveRecord]] | None = None,
        write: Sequence[type[ActiveRecord]] | None = None,
    ) -> list[dict[str, Any]]:
        """Run arbitrary SQL. ``read``/``write`` are hints only."""
        ...


def _quote(identifier: str) -> str:
    return '"' + identifier.replace('"', '""') + '"'


class SqliteDatabase:
    """SQLite storage implementation."""

    def __init__(self, db_path: str | Path | None = None):
        if db_path is None:
            self._db_path = resolve_db_path()
        else:
            self._db_path = resolve_db_path(db_path)
        self._conn: aiosqlite.Connection | None = None

    async def init(self, schema: str | None = None) -> None:
        """Open the connection and optionally run a schema script."""
        self._conn = await aiosqlite.connect(self._db_path)
        self._conn.row_factory = aiosqlite.Row

        if schema:
            await self._conn.executescript(schema)
            await self._conn.commit()

    async def close(self) -> None:
        """Close database connection."""
        if self._conn:
            await self._conn.close()
            self._conn = None

    def _connection(self) -> aiosqlite.Connection:
        if not self._conn:
            raise RuntimeError("Database not initialized")
        return self._conn

    @staticmethod
    def _columns(record_class: type[ActiveRecord], props: dict[str, Any]) -> list[str]:
        """Column names can't be bound, so only declared fields are accepted."""
        known = set(record_class.field_names())
        unknown = [name for name in props if name not in known]
        if unknown:
            raise ValueError(
                f"Unknown columns for {record_class.table_name()}: {', '.join(unknown)}"
            )
        return list(props)

    async def insert(
        self,
        scene: "Scene",
        record_class: type[ActiveRecord],
        props: dict[str, Any],
    ) -> ActiveRecord:
        """Insert a record and return the stored row, including database defaults."""
        conn = self._connection()
        table = _quote(record_class.table_name())
        columns = self._columns(record_class, props)

        if columns:
            placeholders = ", ".join("?" * len(columns))
            sql = (
                f"INSERT INTO {table} ({', '.join(_quote(c) for c in columns)}) "
                f"VALUES ({placeholders})"
            )
        else:
            sql = f"INSERT INTO {table} DEFAULT VALUES"

        cursor = await conn.execute(f"{sql} RETURNING *", [props[c] for c in columns])
        row = await cursor.fetchone()
        await cursor.close()
        if row is None:
            await conn.rollback()
            raise RuntimeError(
                f"Insert into {record_class.table_name()} returned no row"
            )
        await conn.commit()

        logger.debug(
            "Inserted into %s",
            record_class.table_name(),
            extra={"context": operation_context(scene.operation)},
        )
        return record_class.from_row(row)

    async def update(self, scene: "Scene", record: ActiveRecord) -> None:
        """Persist all fields of an existing record, located by primary key."""
        conn = self._connection()
        pk = record.primary_key
        values = {k: v for k, v in record.to_dict().items() if k != pk}
        if not values:
            return

        assignments = ", ".join(f"{_quote(k)} = ?" for k in values)
        await conn.execute(
            f"UPDATE {_quote(record.table_name())} SET {assignments} "
            f"WHERE {_quote(pk)} = ?",
            [*values.values(), record.primary_key_value()],
        )
        await conn.commit()

    async def delete(self, scene: "Scene", record: ActiveRecord) -> None:
        """Delete an existing record, located by primary key."""
        conn = self._connection()
        await conn.execute(
            f"DELETE FROM {_quote(record.table_name())} "
            f"WHERE {_quote(record.primary_key)} = ?",
            (record.primary_key_value(),),
        )
        await conn.commit()

    async def query_by_example(
        self,
        scene: "Scene",
        record_class: type[ActiveRecord],
        props: dict[str, Any],
    ) -> list[ActiveRecord]:
        """Equality-only, AND-combined filter; values are always bound parameters."""
        conn = self._connection()
        columns = self._columns(record_class, props)

        sql = f"SELECT * FROM {_quote(record_class.table_name())}"
        if columns:
            # IS compares NULL as a value, = never matches it
            sql += " WHERE " + " AND ".join(f"{_quote(c)} IS ?" for c in columns)

        cursor = await conn.execute(sql, [props[c] for c in columns])
        rows = await cursor.fetchall()
        return [record_class.from_row(row) for row in rows]

    async def execute_sql(
        self,
        scene: "Scene",
        sql: str,
        sql_vars: dict[str, Any],
        read: Sequence[type[ActiveRecord]] | None = None,
        write: Sequence[type[ActiveRecord]] | None = None,
    ) -> list[dict[str, Any]]:
        """Run arbitrary SQL with named parameters (``:name``)."""
        conn = self._connection()
        cursor = await conn.execute(sql, sql_vars or {})
        rows = await cursor.fetchall()
        await conn.commit()

        logger.debug(
            "Executed SQL (read=%s, write=%s)",
            [c.table_name() for c in read or []],
            [c.table_name() for c in write or []],
            extra={"context": operation_context(scene.operation)},
        )
        return [dict(row) for row in rows]
