import asyncpg

from courtside.config import Settings


def _asyncpg_dsn(settings: Settings) -> str:
    """Convert DATABASE_URL to asyncpg-compatible DSN if needed."""
    dsn = settings.DATABASE_URL
    if dsn.startswith("postgresql://"):
        dsn = dsn.replace("postgresql://", "postgres://", 1)
    return dsn


async def create_pool(settings: Settings) -> asyncpg.Pool:
    statement_timeout_ms = int(settings.DB_STATEMENT_TIMEOUT * 1000)
    return await asyncpg.create_pool(
        _asyncpg_dsn(settings),
        min_size=settings.DB_POOL_MIN_SIZE,
        max_size=settings.DB_POOL_MAX_SIZE,
        max_inactive_connection_lifetime=settings.DB_IDLE_TIMEOUT,
        timeout=settings.DB_CONNECT_TIMEOUT,
        command_timeout=settings.DB_STATEMENT_TIMEOUT,
        server_settings={"statement_timeout": str(statement_timeout_ms)},
    )


async def close_pool(pool: asyncpg.Pool | None) -> None:
    if pool:
        await pool.close()


async def fetch_rows(pool, sql: str, params: list | None = None) -> list[dict]:
    """Run a read-only parameterized query and return plain dicts."""
    async with pool.acquire() as conn:
        async with conn.transaction(readonly=True):
            rows = await conn.fetch(sql, *(params or []))
    return [dict(r) for r in rows]
