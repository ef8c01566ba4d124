from typing import Dict, Generic, List, Optional, Sequence, Type, TypeVar

from sqlalchemy import func, inspect
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import FlushError

from certmgmt.errors import ConflictError, NotFoundError

T = TypeVar("T")


class KeyedStore(Generic[T]):
    """
    Narrow store over one model whose primary key is a content-addressed id.
    Services hold one instance per entity kind.
    """

    def __init__(self, db_session: Session, model: Type[T]):
        self.db = db_session
        self.model = model
        self._pk = inspect(model).primary_key[0]

    def exists(self, entity_id: str) -> bool:
        return self.db.get(self.model, entity_id) is not None

    def find_by_id(self, entity_id: str) -> T:
        entity = self.db.get(self.model, entity_id)
        if entity is None:
            raise NotFoundError(f"{self.model.__name__} {entity_id} not found")
        return entity

    def find(
        self,
        *criteria,
        order_by: Optional[Sequence] = None,
        limit: Optional[int] = None,
        offset: Optional[int] = None
    ) -> List[T]:
        query = self.db.query(self.model).filter(*criteria)
        if order_by:
            query = query.order_by(*order_by)
        if offset:
            query = query.offset(offset)
        if limit:
            query = query.limit(limit)
        return query.all()

    def find_one(self, *criteria) -> Optional[T]:
        return self.db.query(self.model).filter(*criteria).first()

    def count(self, *criteria) -> int:
        return (
            self.db.query(func.count(self._pk))
            .filter(*criteria)
            .scalar()
        )

    def create(self, entity: T) -> T:
        """Inserts the entity; a primary key collision raises ConflictError"""
        self.db.add(entity)
        try:
            self.db.commit()
        except (IntegrityError, FlushError) as e:
            self.db.rollback()
            raise ConflictError(f"{self.model.__name__} already exists") from e
        self.db.refresh(entity)
        return entity

    def update_by_id(self, entity_id: str, patch: Dict) -> T:
        entity = self.find_by_id(entity_id)
        for field, value in patch.items():
            setattr(entity, field, value)
        self.db.commit()
        self.db.refresh(entity)
        return entity

    def update_all(self, patch: Dict, *criteria) -> int:
        count = (
            self.db.query(self.model)
            .filter(*criteria)
            .update(patch, synchronize_session="fetch")
        )
        self.db.commit()
        return count
