"""Repository for user data access (CRUD)."""
from __future__ import annotations

import uuid
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from ..models import UserModel
from ...domain.enums import Grade, Role
from ...domain.user import User

_UNSET = object()


def to_domain(m: UserModel) -> User:
    return User(id=m.id, name=m.name, email=m.email, role=m.role, grade=m.grade, created_at=m.created_at)


class UserRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def list(self) -> List[User]:
        stmt = select(UserModel).order_by(UserModel.created_at.desc())
        return [to_domain(m) for m in self.session.scalars(stmt).all()]

    def get(self, user_id: str) -> Optional[User]:
        m = self.session.get(UserModel, user_id)
        return to_domain(m) if m else None

    def exists(self, user_id: str) -> bool:
        stmt = select(UserModel.id).where(UserModel.id == user_id).limit(1)
        return self.session.scalars(stmt).first() is not None

    def get_by_email(self, email: str) -> Optional[User]:
        stmt = select(UserModel).where(UserModel.email == email.lower())
        m = self.session.scalars(stmt).first()
        return to_domain(m) if m else None

    def create(self, *, name: str, email: str, role: Role, grade: Grade | None = None) -> User:
        entity = UserModel(id=str(uuid.uuid4()), name=name, email=email.lower(), role=role, grade=grade)
        self.session.add(entity)
        self.session.commit()
        self.session.refresh(entity)
        return to_domain(entity)

    def update(self, user_id: str, *, name=_UNSET, role=_UNSET, grade=_UNSET) -> Optional[User]:
        entity = self.session.get(UserModel, user_id)
        if not entity:
            return None
        if name is not _UNSET:
            entity.name = name
        if role is not _UNSET:
            entity.role = role
        if grade is not _UNSET:
            entity.grade = grade
        self.session.commit()
        self.session.refresh(entity)
        return to_domain(entity)
