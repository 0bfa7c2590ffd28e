"""Shared fixtures: in-memory database, demo-mode advisor and scripted model invokers."""

import os

# Must happen before classroom_ai.settings is imported anywhere
os.environ["DATABASE_URL"] = "sqlite://"
for _key in (
    "GOOGLE_GENERATIVE_AI_API_KEY",
    "GEMINI_API_KEY",
    "NEXT_PUBLIC_GOOGLE_GENERATIVE_AI_API_KEY",
    "PUBLIC_GOOGLE_GENERATIVE_AI_API_KEY",
):
    os.environ.pop(_key, None)

import pytest

from classroom_ai.advisor import ClassroomAdvisor
from classroom_ai.capability import ModelCapability
from classroom_ai.schemas import Student

VALID_KEY = "AIzaSy" + "x" * 33


class ScriptedInvoker:
    """Returns (or raises) the queued responses in call order."""

    def __init__(self, responses=None):
        self.responses = list(responses or [])
        self.calls = []

    async def invoke(self, prompt, system_instruction):
        self.calls.append((prompt, system_instruction))
        if not self.responses:
            raise AssertionError("invoker called more times than scripted")
        item = self.responses.pop(0)
        if isinstance(item, BaseException):
            raise item
        return item


class RoutingInvoker:
    """Answers by system instruction, so concurrent calls stay deterministic."""

    def __init__(self, routes):
        self.routes = routes
        self.calls = []

    async def invoke(self, prompt, system_instruction):
        self.calls.append((prompt, system_instruction))
        item = self.routes[system_instruction]
        if isinstance(item, BaseException):
            raise item
        return item


def make_student(student_id="s1", name="Ada Lovelace", grade=80, tags=None, notes="", **extra):
    return Student(id=student_id, name=name, email=f"{student_id}@school.test", grade=grade, tags=tags or [], notes=notes, **extra)


@pytest.fixture
def student_factory():
    return make_student


@pytest.fixture
def demo_advisor():
    return ClassroomAdvisor(ModelCapability(available=False), invoker=ScriptedInvoker())


@pytest.fixture
def live_capability():
    return ModelCapability(available=True, api_key=VALID_KEY, source="server")


@pytest.fixture
def scripted_invoker():
    return ScriptedInvoker


@pytest.fixture
def routing_invoker():
    return RoutingInvoker


@pytest.fixture
def db_session():
    from classroom_ai.db import Base, SessionLocal, engine, init_db

    init_db()
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(demo_advisor):
    from fastapi.testclient import TestClient

    from classroom_ai.advisor import get_advisor
    from classroom_ai.db import Base, engine
    from classroom_ai.main import app

    app.dependency_overrides[get_advisor] = lambda: demo_advisor
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
    Base.metadata.drop_all(bind=engine)
