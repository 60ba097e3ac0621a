from .session import (
    AsyncSessionLocal,
    async_engine,
    create_engine_for_url,
    enable_sqlite_foreign_keys,
    init_db,
    session_scope,
)

__all__ = [
    "AsyncSessionLocal",
    "async_engine",
    "create_engine_for_url",
    "enable_sqlite_foreign_keys",
    "init_db",
    "session_scope",
]
