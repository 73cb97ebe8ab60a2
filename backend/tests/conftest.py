from __future__ import annotations

import json
from datetime import datetime, timedelta
from typing import Dict, List, Optional

import pytest

from papervault import create_app
from papervault.auth.jwt import issue_token
from papervault.config import TestConfig
from papervault.db.repositories.paper_repo import PaperRepository
from papervault.db.repositories.user_repo import UserRepository
from papervault.db.session import current_db
from papervault.domain.enums import Grade, Level, Role
from papervault.domain.paper import Paper


class FakeProvider:
    """Completion provider that replays canned JSON answers and records prompts."""

    def __init__(self, *answers) -> None:
        self.answers = list(answers)
        self.calls: List[List[Dict[str, str]]] = []

    def chat_completion(self, messages, model=None, temperature=0.0, max_tokens=None) -> str:
        self.calls.append(list(messages))
        answer = self.answers.pop(0)
        if isinstance(answer, Exception):
            raise answer
        return answer if isinstance(answer, str) else json.dumps(answer)


@pytest.fixture()
def app(tmp_path):
    app = create_app(TestConfig, STORAGE_LOCAL_PATH=str(tmp_path / "storage"), SERVER_NAME="papers.test")
    with app.app_context():
        db = current_db()
        db.create_all()
        yield app
        db.dispose()


@pytest.fixture()
def client(app):
    return app.test_client()


@pytest.fixture()
def session(app):
    return current_db().Session()


@pytest.fixture()
def make_user(session):
    users = UserRepository(session)
    counter = {"n": 0}

    def _make(role: Role = Role.HIGH_SCHOOL, grade: Optional[Grade] = None, name: Optional[str] = None):
        counter["n"] += 1
        n = counter["n"]
        return users.create(
            name=name or f"User {n}",
            email=f"user{n}@example.com",
            role=role,
            grade=grade if role is Role.HIGH_SCHOOL else None,
        )

    return _make


@pytest.fixture()
def admin(make_user):
    return make_user(Role.ADMIN, name="Ada Admin")


@pytest.fixture()
def student(make_user):
    return make_user(Role.HIGH_SCHOOL, Grade.GRADE_11, name="Sam Student")


@pytest.fixture()
def auth_header():
    def _header(user) -> Dict[str, str]:
        return {"Authorization": f"Bearer {issue_token(user)}"}

    return _header


@pytest.fixture()
def make_paper(session, admin):
    papers = PaperRepository(session)
    base = datetime(2024, 1, 1)
    counter = {"n": 0}

    def _make(title: str = "Paper", level: Level = Level.HIGH_SCHOOL, subject: str = "Mathematics",
              year: int = 2023, grade: Optional[Grade] = Grade.GRADE_11, description: Optional[str] = None):
        counter["n"] += 1
        return papers.create(Paper(
            id="",
            title=title,
            description=description,
            level=level,
            grade=grade if level is Level.HIGH_SCHOOL else None,
            subject=subject,
            year=year,
            uploader_id=admin.id,
            created_at=base + timedelta(hours=counter["n"]),
        ))

    return _make


@pytest.fixture()
def fake_llm(app):
    def _install(*answers) -> FakeProvider:
        provider = FakeProvider(*answers)
        app.extensions["llm"].provider = provider
        return provider

    return _install
