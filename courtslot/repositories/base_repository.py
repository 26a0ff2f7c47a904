# courtslot/repositories/base_repository.py
"""
Base Repository Pattern for the booking engine.

Repositories translate SQLAlchemy failures into RepositoryException and
never commit: they flush, and the calling service owns the transaction.
Bookings and slots are never hard-deleted, so there is no delete here.
"""

from abc import ABC, abstractmethod
from contextlib import contextmanager
import logging
from typing import Any, Generic, Iterator, List, Optional, Type, TypeVar

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Query, Session

from ..core.exceptions import RepositoryException

# Type variable for generic model support
T = TypeVar("T")

logger = logging.getLogger(__name__)


class IRepository(ABC, Generic[T]):
    """Lookup and field update by primary key."""

    @abstractmethod
    def get_by_id(self, id: str, load_relationships: bool = True) -> Optional[T]:
        """The entity, or None when no row has this id."""

    @abstractmethod
    def update(self, id: str, **kwargs) -> Optional[T]:
        """
        Set the given fields on an existing entity and flush.

        Returns:
            The updated entity, or None when no row has this id
        """


class BaseRepository(IRepository[T]):
    """
    Common data access for one model.

    Attributes:
        db: SQLAlchemy session (managed by the service layer)
        model: SQLAlchemy model class
    """

    def __init__(self, db: Session, model: Type[T]):
        self.db = db
        self.model = model
        self.logger = logging.getLogger(f"{__name__}.{model.__name__}")

    def get_by_id(self, id: str, load_relationships: bool = True) -> Optional[T]:
        query = self.db.query(self.model).filter(self.model.id == id)
        if load_relationships:
            query = self._apply_eager_loading(query)
        return self._execute_first(query, f"{self.model.__name__} {id}")

    def update(self, id: str, **kwargs) -> Optional[T]:
        entity = self.get_by_id(id, load_relationships=False)
        if entity is None:
            return None

        with self._wrap_errors(f"update {self.model.__name__} {id}"):
            for key, value in kwargs.items():
                if not hasattr(entity, key):
                    raise RepositoryException(f"{self.model.__name__} has no field {key!r}")
                setattr(entity, key, value)
            self.db.flush()
        return entity

    # Protected helper methods for use by subclasses

    def _apply_eager_loading(self, query: Query) -> Query:
        """Override to load the relationships responses need."""
        return query

    def _execute_first(self, query: Query, what: str) -> Optional[T]:
        with self._wrap_errors(f"retrieve {what}"):
            return query.first()

    def _execute_query(self, query: Query) -> List[T]:
        with self._wrap_errors(f"query {self.model.__name__}"):
            return query.all()

    def _execute_scalar(self, query: Query) -> Any:
        with self._wrap_errors(f"aggregate {self.model.__name__}"):
            return query.scalar()

    @contextmanager
    def _wrap_errors(self, action: str) -> Iterator[None]:
        try:
            yield
        except SQLAlchemyError as e:
            self.logger.error(f"Failed to {action}: {str(e)}")
            raise RepositoryException(f"Failed to {action}: {str(e)}") from e
