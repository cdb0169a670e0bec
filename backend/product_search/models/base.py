"""Base SQLAlchemy declarative base for all models"""

from sqlalchemy.orm import declarative_base
from sqlalchemy import TypeDecorator, JSON
from sqlalchemy.dialects.postgresql import JSONB


class PortableJSONB(TypeDecorator):
    """JSON type that works with both PostgreSQL (JSONB) and SQLite (JSON).

    Uses JSONB on PostgreSQL for the embedding and product detail columns,
    falls back to JSON on SQLite for testing compatibility. Python None is
    stored as SQL NULL so "not embedded yet" is queryable with IS NULL.
    """
    impl = JSON(none_as_null=True)
    cache_ok = True

    def load_dialect_impl(self, dialect):
        if dialect.name == 'postgresql':
            return dialect.type_descriptor(JSONB(none_as_null=True))
        else:
            return dialect.type_descriptor(JSON(none_as_null=True))


Base = declarative_base()
