# aipulse/tests/conftest.py
import json
import pytest
import requests


def make_article(id="20240101-001", category="Model", importance="normal",
                 published_at="2024-01-01T00:00:00Z", url=None, source_name="OpenAI Blog",
                 title=None, summary="テスト用の概要です。"):
    return {
        "id": id,
        "title": title or f"Title {id}",
        "url": url or f"https://example.com/news/{id}",
        "sourceName": source_name,
        "category": category,
        "publishedAt": published_at,
        "summary": summary,
        "importance": importance,
    }


def make_snapshot(*articles, last_updated="2024-01-02T00:00:00Z"):
    return {"lastUpdated": last_updated, "news": list(articles)}


@pytest.fixture()
def data_paths(tmp_path, monkeypatch):
    # Redireciona data/ e config/ para diretório temporário
    from aipulse.storage import repository as repo
    from aipulse.storage import session

    snapshot = tmp_path / "data" / "current.json"
    session_file = tmp_path / "data" / "session.json"
    whitelist = tmp_path / "config" / "whitelist.json"
    snapshot.parent.mkdir()
    whitelist.parent.mkdir()
    whitelist.write_text(json.dumps({"sources": [
        {"url": "https://openai.com/news/", "sourceName": "OpenAI Blog"},
        {"url": "https://www.anthropic.com/news", "sourceName": "Anthropic News"},
    ]}), encoding="utf-8")

    monkeypatch.setattr(repo, "SNAPSHOT_PATH", str(snapshot), raising=True)
    monkeypatch.setattr(repo, "WHITELIST_PATH", str(whitelist), raising=True)
    monkeypatch.setattr(session, "SESSION_PATH", str(session_file), raising=True)
    return {"root": tmp_path, "snapshot": snapshot, "session": session_file, "whitelist": whitelist}


class FakeResponse:
    def __init__(self, status_code=200, payload=None, text=None):
        self.status_code = status_code
        self._payload = payload
        self._text = text

    def json(self):
        if self._text is not None:
            return json.loads(self._text)
        return self._payload


class FakeSession:
    """Substitui a sessão requests do loader; devolve uma resposta fixa."""

    def __init__(self):
        self.response = FakeResponse(200, make_snapshot())
        self.error = None
        self.calls = []

    def get(self, url, timeout=None):
        self.calls.append(url)
        if self.error is not None:
            raise self.error
        return self.response

    def respond(self, status_code=200, payload=None, text=None):
        self.response = FakeResponse(status_code, payload, text)

    def fail(self, message="Connection refused"):
        self.error = requests.ConnectionError(message)


@pytest.fixture()
def fake_fetch(monkeypatch):
    from aipulse.reader import loader
    fake = FakeSession()
    monkeypatch.setattr(loader, "_SESSION", fake, raising=True)
    return fake


@pytest.fixture()
def app(data_paths, fake_fetch, monkeypatch):
    from aipulse import settings
    from aipulse.api import main as api_main
    monkeypatch.setattr(settings, "SNAPSHOT_URL", None, raising=True)
    return api_main.app


@pytest.fixture()
def client(app):
    from fastapi.testclient import TestClient
    with TestClient(app) as c:
        yield c


@pytest.fixture()
def mk_article():
    return make_article


@pytest.fixture()
def mk_snapshot():
    return make_snapshot
