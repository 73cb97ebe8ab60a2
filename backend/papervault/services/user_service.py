"""User service encapsulating sign-up, profile and role rules."""
from __future__ import annotations

from typing import List, Optional

from loguru import logger
from sqlalchemy.orm import Session

from ..db.repositories.bookmark_repo import BookmarkRepository
from ..db.repositories.user_repo import UserRepository
from ..domain.enums import Grade, Role
from ..domain.user import ANONYMOUS, User, Viewer
from ..errors import Conflict, NotFound, PermissionDenied, returns_result


def _grade_for(role: Role, grade: Optional[Grade]) -> Optional[Grade]:
    return grade if role is Role.HIGH_SCHOOL else None


class UserService:
    def __init__(self, session: Session) -> None:
        self.repo = UserRepository(session)
        self.bookmarks = BookmarkRepository(session)

    @returns_result
    def sign_up(self, name: str, email: str, role: Role, grade: Optional[Grade] = None) -> User:
        if role is Role.ADMIN:
            raise PermissionDenied("The Admin role cannot be chosen at sign-up.")
        if self.repo.get_by_email(email):
            raise Conflict("User with this email already exists.")
        user = self.repo.create(name=name, email=email, role=role, grade=_grade_for(role, grade))
        logger.info("user {} signed up as {}", user.id, role.value)
        return user

    @returns_result
    def sign_in(self, email: str) -> User:
        user = self.repo.get_by_email(email)
        if user is None:
            raise NotFound("No account found for this email.")
        return user

    @returns_result
    def get_user(self, user_id: str) -> User:
        user = self.repo.get(user_id)
        if user is None:
            raise NotFound("User not found.")
        return user

    @returns_result
    def list_users(self, actor: User) -> List[User]:
        if not actor.role.is_admin:
            raise PermissionDenied("Admin role required.")
        return self.repo.list()

    @returns_result
    def update_profile(self, user_id: str, *, name: Optional[str] = None,
                       role: Optional[Role] = None, grade: Optional[Grade] = None) -> User:
        user = self.repo.get(user_id)
        if user is None:
            raise NotFound("User not found.")
        if user.role.is_admin and role is not None and role is not Role.ADMIN:
            raise PermissionDenied("Admin role cannot be changed.")
        if role is Role.ADMIN and not user.role.is_admin:
            raise PermissionDenied("Only an administrator can grant the Admin role.")

        new_role = role or user.role
        new_grade = grade if grade is not None else user.grade
        updated = self.repo.update(
            user_id,
            name=name if name is not None else user.name,
            role=new_role,
            grade=_grade_for(new_role, new_grade),
        )
        assert updated is not None
        if new_role is not user.role:
            logger.info("user {} changed role {} -> {}", user_id, user.role.value, new_role.value)
        return updated

    @returns_result
    def set_role(self, actor: User, user_id: str, role: Role, grade: Optional[Grade] = None) -> User:
        if not actor.role.is_admin:
            raise PermissionDenied("Admin role required.")
        user = self.repo.get(user_id)
        if user is None:
            raise NotFound("User not found.")
        updated = self.repo.update(user_id, role=role, grade=_grade_for(role, grade or user.grade))
        assert updated is not None
        logger.info("admin {} set role of {} to {}", actor.id, user_id, role.value)
        return updated

    def viewer_for(self, user_id: Optional[str]) -> Viewer:
        if not user_id:
            return ANONYMOUS
        user = self.repo.get(user_id)
        if user is None:
            return ANONYMOUS
        return Viewer(user=user, bookmarks=frozenset(self.bookmarks.ids_for(user.id)))
