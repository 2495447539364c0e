from collections.abc import Mapping
from typing import Any

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

from query_analyzer.config import settings
import logging

logger = logging.getLogger(__name__)


def create_engine_from_settings(**engine_kwargs: Any) -> AsyncEngine:
    if not settings.database_url:
        raise ValueError("DATABASE_URL is not configured")

    # Environment-based configurations
    if settings.environment == "production":
        engine_kwargs.setdefault("pool_size", 20)
        engine_kwargs.setdefault("pool_recycle", 1800)
    return create_async_engine(settings.database_url, **engine_kwargs)


class SQLAlchemyExecutor:
    """
    Async execute capability over a SQLAlchemy engine.

    ``statement`` is SQL text or a mapping with ``query`` and optional
    ``bind``; ``exec_options`` may carry ``replacements``. Both are passed
    to the driver as named bind parameters. Each call runs in its own
    transaction and returns the result rows as dicts.
    """

    def __init__(self, engine: AsyncEngine):
        self.engine = engine

    async def execute(self, statement: Any, exec_options: Mapping[str, Any] | None = None) -> list[dict[str, Any]]:
        if isinstance(statement, Mapping):
            query = statement["query"]
            params = statement.get("bind")
        else:
            query = statement
            params = None
        if params is None and exec_options:
            params = exec_options.get("replacements")

        async with self.engine.begin() as conn:
            result = await conn.execute(text(query), dict(params or {}))
            if not result.returns_rows:
                return []
            return [dict(row._mapping) for row in result]

    __call__ = execute

    async def dispose(self) -> None:
        try:
            await self.engine.dispose()
        except Exception as e:
            logger.warning(f"Error disposing engine: {e}")
