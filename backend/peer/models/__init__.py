"""All SQLAlchemy models – re-exported for Alembic and app use."""

from peer.models.reading import Reading

__all__ = ["Reading"]
