"""Direct context - writes entities with INSERT ... RETURNING on flush."""

import dataclasses
import logging
from typing import Any

import psycopg
from psycopg import AsyncConnection, sql
from psycopg.rows import dict_row
from psycopg.types.json import Jsonb

from seedwright.config import SeedSettings
from seedwright.contexts.base import UnitOfWork, entity_attributes, is_entity, table_name
from seedwright.exceptions import PersistenceError

logger = logging.getLogger(__name__)


class DirectContext(UnitOfWork):
    """
    PostgreSQL persistence context.

    Pending entities are inserted on flush() in dependency order, one
    INSERT per entity. PostgreSQL's RETURNING clause captures generated
    values (id, defaults), which are copied back onto the entity.

    Mapping rules:
    - table: __tablename__ or snake_case class name
    - single-valued relation `author` → column `author_id`
    - list-valued relations are not written (owned by the other side)
    - value objects (dataclasses without an `id` field) → one jsonb column
    - None values are omitted so column defaults apply
    """

    def __init__(self, conn: AsyncConnection, schema: str = "public"):
        """
        Initialize context.

        Args:
            conn: Async PostgreSQL connection
            schema: Schema name for qualified table names
        """
        super().__init__()
        self.conn = conn
        self.schema = schema

    @classmethod
    async def connect(cls, settings: SeedSettings | None = None) -> "DirectContext":
        """Open a connection from settings and wrap it in a context."""
        settings = settings or SeedSettings()
        try:
            conn = await AsyncConnection.connect(settings.database_url)
        except psycopg.Error as exc:
            raise PersistenceError(f"Could not connect to database: {exc}") from exc
        return cls(conn, schema=settings.schema_name)

    async def _write_batch(self, entities: list[Any]) -> None:
        try:
            async with self.conn.cursor(row_factory=dict_row) as cur:
                for entity in entities:
                    query, values = self.build_insert(entity)
                    await cur.execute(query, values)
                    row = await cur.fetchone()
                    for column, value in (row or {}).items():
                        if not _is_value_object(getattr(entity, column, None)):
                            setattr(entity, column, value)
            await self.conn.commit()
        except psycopg.Error as exc:
            raise PersistenceError(
                f"Flush failed on {len(entities)} pending entities: {exc}"
            ) from exc

        logger.debug(f"Inserted {len(entities)} rows into schema '{self.schema}'")

    def build_insert(self, entity: Any) -> tuple[sql.Composed, list[Any]]:
        """
        Build INSERT ... RETURNING statement for one entity.

        Returns:
            (query, values) ready for cursor.execute()
        """
        row = self.row_values(entity)
        target = sql.Identifier(self.schema, table_name(type(entity)))

        if not row:
            query = sql.SQL("INSERT INTO {} DEFAULT VALUES RETURNING *").format(target)
            return query, []

        query = sql.SQL("INSERT INTO {} ({}) VALUES ({}) RETURNING *").format(
            target,
            sql.SQL(", ").join(sql.Identifier(col) for col in row),
            sql.SQL(", ").join(sql.Placeholder() * len(row)),
        )
        return query, list(row.values())

    def row_values(self, entity: Any) -> dict[str, Any]:
        """Map entity attributes to column values."""
        row: dict[str, Any] = {}
        for name, value in entity_attributes(entity).items():
            if is_entity(value):
                row[f"{name}_id"] = getattr(value, "id", None)
            elif _is_value_object(value):
                row[name] = Jsonb(dataclasses.asdict(value))
            elif isinstance(value, (list, tuple, set)):
                # Empty or entity collections: left to defaults / the other side
                if value and not any(is_entity(v) for v in value):
                    row[name] = list(value)
            elif value is not None and name not in row:
                row[name] = value
        return {col: value for col, value in row.items() if value is not None}


def _is_value_object(value: Any) -> bool:
    return (
        dataclasses.is_dataclass(value)
        and not isinstance(value, type)
        and not is_entity(value)
    )
