"""
Database-backed AdminGrantStore for production use (Postgres).

Why: In-memory grants are lost on restart and are not shared across
instances. This store persists grants in Postgres while keeping the cookie
opaque (only the grant id leaves the server).

Note: This module uses psycopg3. It is imported only when enabled via
`SESSIONS_BACKEND=db`. Tests continue to use the in-memory store.

Expected table:
    create table public.admin_grants (
        grant_id text primary key,
        sub text not null,
        created_at timestamptz not null default now()
    );
"""
from __future__ import annotations

from typing import Optional
import os
import re
import secrets

try:
    import psycopg
    from psycopg import sql
    HAVE_PSYCOPG = True
except Exception:  # pragma: no cover - optional dependency in dev
    psycopg = None  # type: ignore
    sql = None  # type: ignore
    HAVE_PSYCOPG = False

from .stores import GRANT_TTL_SECONDS, AdminGrant

_TABLE_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]{0,62}(?:\.[A-Za-z_][A-Za-z0-9_]{0,62})?$")


class DBAdminGrantStore:
    """Postgres-backed admin grant store.

    Parameters
    ----------
    dsn:
        Psycopg3 connection string. Defaults to DATABASE_URL.
    table:
        Optionally schema-qualified table name. Defaults to `public.admin_grants`.
    ttl_seconds:
        Grants older than this no longer unlock the gate.
    """

    def __init__(
        self, dsn: str | None = None, table: str = "public.admin_grants", ttl_seconds: int = GRANT_TTL_SECONDS
    ) -> None:
        if not HAVE_PSYCOPG:
            raise RuntimeError("psycopg3 is required for DBAdminGrantStore")
        self._dsn = dsn or os.getenv("DATABASE_URL", "")
        if not self._dsn:
            raise RuntimeError("No database DSN provided for DBAdminGrantStore")
        if not _TABLE_RE.match(table or ""):
            raise ValueError("Invalid table name")
        schema, _, name = table.rpartition(".")
        self._ident = sql.Identifier(schema or "public", name)
        self._ttl_seconds = ttl_seconds

    def create(self, *, sub: str) -> AdminGrant:
        grant_id = secrets.token_urlsafe(24)
        stmt = sql.SQL(
            "insert into {} (grant_id, sub) values (%s, %s) "
            "returning extract(epoch from created_at)::bigint"
        ).format(self._ident)
        with psycopg.connect(self._dsn, autocommit=True) as conn:
            with conn.cursor() as cur:
                cur.execute(stmt, (grant_id, sub))
                row = cur.fetchone()
        created_at = int(row[0]) if row and row[0] is not None else 0
        return AdminGrant(grant_id=grant_id, sub=sub, created_at=created_at)

    def get(self, grant_id: str) -> Optional[AdminGrant]:
        stmt = sql.SQL(
            "select grant_id, sub, extract(epoch from created_at)::bigint from {} "
            "where grant_id = %s and created_at > now() - make_interval(secs => %s)"
        ).format(self._ident)
        with psycopg.connect(self._dsn) as conn:
            with conn.cursor() as cur:
                cur.execute(stmt, (grant_id, self._ttl_seconds))
                row = cur.fetchone()
        if not row:
            return None
        return AdminGrant(grant_id=row[0], sub=row[1], created_at=int(row[2] or 0))
