"""Column types that behave the same on Postgres and on the SQLite test database."""
from __future__ import annotations

from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.types import JSON

# JSONB in production; SQLite has no JSONB, so tests store plain JSON.
JSONBCompat = JSONB().with_variant(JSON(), "sqlite")
