# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

from typing import Any, Generic, Optional, Type, TypeVar

from sqlalchemy.orm import Session

from photo_editor.db.base import Base

ModelType = TypeVar("ModelType", bound=Base)


class BaseService(Generic[ModelType]):
    """
    Base service class providing generic read operations
    """

    def __init__(self, model: Type[ModelType]):
        """
        Initialize service
        :param model: SQLAlchemy model class
        """
        self.model = model

    def get(self, db: Session, id: Any) -> Optional[ModelType]:
        """
        Get object by ID
        """
        return db.query(self.model).filter(self.model.id == id).first()

    def count(self, db: Session, **filters) -> int:
        """
        Count objects
        """
        query = db.query(self.model)
        for field, value in filters.items():
            if value is not None:
                query = query.filter(getattr(self.model, field) == value)
        return query.count()
