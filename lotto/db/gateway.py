"""Transactional access to the round and ticket store."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import TYPE_CHECKING, Iterator, Optional

from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from ..errors import ConstraintViolationError, PersistenceError
from .engine import get_sessionmaker, make_engine

if TYPE_CHECKING:
    from ..config import DatabaseSettings

logger = logging.getLogger(__name__)


class PersistenceGateway:
    """Owns the connection pool and scopes every unit of work.

    All check-then-write sequences (open-if-none-active, close-if-active,
    draw-if-closed-and-undrawn, ticket-insert-if-round-open) run inside
    :meth:`transaction`, so either every statement of the sequence commits or
    none does.
    """

    def __init__(self, engine: Engine) -> None:
        """Bind the gateway to ``engine``; the gateway disposes it on :meth:`dispose`.

        Parameters
        ----------
        engine : Engine
            SQLAlchemy engine whose pool is shared by all callers.
        """

        self._engine = engine
        self._sessionmaker = get_sessionmaker(engine)

    @classmethod
    def from_url(cls, database_url: Optional[str] = None, **engine_options) -> "PersistenceGateway":
        return cls(make_engine(database_url, **engine_options))

    @classmethod
    def from_settings(cls, settings: "DatabaseSettings") -> "PersistenceGateway":
        return cls(
            make_engine(
                settings.url,
                echo=settings.echo,
                connect_args=settings.connect_args,
                pool_size=settings.pool_size,
                pool_timeout=settings.pool_timeout,
            )
        )

    @property
    def engine(self) -> Engine:
        return self._engine

    @contextmanager
    def transaction(self) -> Iterator[Session]:
        """Run the enclosed block as one atomic unit of work.

        Commits when the block exits normally. Any exception rolls the whole
        unit back; domain errors propagate unchanged while SQLAlchemy errors
        are re-raised as :class:`PersistenceError` (or
        :class:`ConstraintViolationError` for integrity failures). The pooled
        connection is returned on every exit path.

        Yields
        ------
        Session
            Session bound to the open transaction.
        """

        session = self._sessionmaker()
        try:
            with session.begin():
                yield session
        except IntegrityError as exc:
            logger.warning(f"Constraint rejected write, rolled back: {exc.orig}")
            raise ConstraintViolationError(str(exc.orig)) from exc
        except SQLAlchemyError as exc:
            logger.error(f"Persistence failure, rolled back: {exc}")
            raise PersistenceError(f"Persistence failure: {exc}") from exc
        finally:
            session.close()

    def create_schema(self) -> None:
        """Create all tables directly from model metadata (tests and local dev)."""

        from ..models import Base

        Base.metadata.create_all(self._engine)

    def dispose(self) -> None:
        """Close every pooled connection. Call once at shutdown."""

        self._engine.dispose()

    def __enter__(self) -> "PersistenceGateway":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.dispose()


__all__ = ["PersistenceGateway"]
