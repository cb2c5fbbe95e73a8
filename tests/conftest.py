import os
import uuid

os.environ["DATABASE_URL"] = "sqlite:///./test.db"
os.environ["GEMINI_API_KEY"] = "test-key"
os.environ["LANGUAGE_API_KEY"] = "test-key"

import pytest
from fastapi.testclient import TestClient
from app.main import app
from app.api.deps import get_llm, get_sentiment
from app.core.db import Base, engine
from app.errors import UpstreamError


class FakeLLM:
    """Stands in for GeminiClient; replies are queued per test."""

    def __init__(self):
        self.texts = []
        self.json_replies = []
        self.calls = []
        self.fail = False

    async def generate(self, system, contents, temperature=0.4, json_mode=False):
        self.calls.append((system, contents))
        if self.fail:
            raise UpstreamError("AI API request failed.")
        return self.texts.pop(0) if self.texts else "I'm here for you."

    async def generate_json(self, system, contents, temperature=0.0):
        self.calls.append((system, contents))
        if self.fail:
            raise UpstreamError("AI API request failed.")
        return self.json_replies.pop(0)


class FakeSentiment:
    def __init__(self, score=0.0):
        self.score = score
        self.enabled = True
        self.fail = False

    async def analyze(self, text):
        if self.fail:
            raise UpstreamError("Sentiment service request failed.")
        return self.score


@pytest.fixture(autouse=True, scope="session")
def setup_db():
    # fresh db for tests
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)

@pytest.fixture()
def llm():
    return FakeLLM()

@pytest.fixture()
def sentiment():
    return FakeSentiment()

@pytest.fixture()
def client(llm, sentiment):
    app.dependency_overrides[get_llm] = lambda: llm
    app.dependency_overrides[get_sentiment] = lambda: sentiment
    yield TestClient(app)
    app.dependency_overrides.clear()

@pytest.fixture()
def signup(client):
    def _signup(name=None):
        r = client.post("/auth/signup", json={
            "email": f"{uuid.uuid4().hex[:12]}@example.com",
            "password": "P@ssw0rd!",
            "name": name,
        })
        assert r.status_code == 200, r.text
        return r.json()
    return _signup

@pytest.fixture()
def auth(signup):
    data = signup()
    return {"Authorization": f"Bearer {data['token']['accessToken']}"}
