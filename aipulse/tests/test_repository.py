# aipulse/tests/test_repository.py
import json

import pytest

from aipulse.storage import repository as repo
from aipulse.storage.models import NewsSnapshot


def _write(path, doc):
    path.write_text(json.dumps(doc, ensure_ascii=False), encoding="utf-8")


def test_load_missing_snapshot(data_paths):
    assert repo.load_snapshot() is None


def test_load_valid_snapshot(data_paths, mk_article, mk_snapshot):
    _write(data_paths["snapshot"], mk_snapshot(mk_article(), mk_article(id="20240101-002")))
    snap = repo.load_snapshot()
    assert [a.id for a in snap.news] == ["20240101-001", "20240101-002"]
    assert snap.news[0].source_name == "OpenAI Blog"


def test_invalid_json_raises(data_paths):
    data_paths["snapshot"].write_text("{", encoding="utf-8")
    with pytest.raises(repo.SnapshotError):
        repo.load_snapshot()


def test_invalid_utf8_snapshot_raises(data_paths):
    data_paths["snapshot"].write_bytes(b"\xff\xfe{garbage")
    with pytest.raises(repo.SnapshotError):
        repo.load_snapshot()


@pytest.mark.parametrize("overrides", [
    {"category": "Robotics"},
    {"importance": "urgent"},
    {"id": "2024-01-01-1"},
    {"url": "/relative/path"},
    {"published_at": "yesterday"},
])
def test_invariant_violations_raise(data_paths, mk_article, mk_snapshot, overrides):
    _write(data_paths["snapshot"], mk_snapshot(mk_article(**overrides)))
    with pytest.raises(repo.SnapshotError):
        repo.load_snapshot()


def test_duplicate_url_raises(data_paths, mk_article, mk_snapshot):
    _write(data_paths["snapshot"], mk_snapshot(
        mk_article(id="20240101-001", url="https://example.com/a"),
        mk_article(id="20240101-002", url="https://example.com/a"),
    ))
    with pytest.raises(repo.SnapshotError, match="duplicate article url"):
        repo.load_snapshot()


def test_duplicate_id_raises(data_paths, mk_article, mk_snapshot):
    _write(data_paths["snapshot"], mk_snapshot(
        mk_article(id="20240101-001", url="https://example.com/a"),
        mk_article(id="20240101-001", url="https://example.com/b"),
    ))
    with pytest.raises(repo.SnapshotError, match="duplicate article id"):
        repo.load_snapshot()


def test_save_uses_wire_names(data_paths, mk_article, mk_snapshot):
    doc = mk_snapshot(mk_article())
    repo.save_snapshot(NewsSnapshot.model_validate(doc))
    assert json.loads(data_paths["snapshot"].read_text(encoding="utf-8")) == doc


def test_ensure_snapshot_creates_empty(data_paths):
    snap = repo.ensure_snapshot()
    assert snap.news == []
    assert data_paths["snapshot"].exists()
    assert repo.load_snapshot().news == []


def test_ensure_snapshot_keeps_existing(data_paths, mk_article, mk_snapshot):
    _write(data_paths["snapshot"], mk_snapshot(mk_article()))
    assert len(repo.ensure_snapshot().news) == 1


def test_new_articles_by_url(mk_article, mk_snapshot):
    before = NewsSnapshot.model_validate(mk_snapshot(mk_article(id="20240101-001")))
    after = NewsSnapshot.model_validate(mk_snapshot(
        mk_article(id="20240101-001"), mk_article(id="20240102-001")))
    assert [a.id for a in repo.new_articles(before, after)] == ["20240102-001"]
    assert len(repo.new_articles(None, after)) == 2


def test_load_whitelist(data_paths):
    wl = repo.load_whitelist()
    assert [s.source_name for s in wl.sources] == ["OpenAI Blog", "Anthropic News"]


def test_missing_whitelist_raises(data_paths):
    data_paths["whitelist"].unlink()
    with pytest.raises(repo.WhitelistError):
        repo.load_whitelist()


def test_empty_whitelist_raises(data_paths):
    _write(data_paths["whitelist"], {"sources": []})
    with pytest.raises(repo.WhitelistError):
        repo.load_whitelist()


def test_invalid_utf8_whitelist_raises(data_paths):
    data_paths["whitelist"].write_bytes(b"\xff\xfe{garbage")
    with pytest.raises(repo.WhitelistError):
        repo.load_whitelist()


def test_raw_urls_of_snapshot_with_duplicates(data_paths, mk_article, mk_snapshot):
    _write(data_paths["snapshot"], mk_snapshot(
        mk_article(id="20240101-001", url="https://example.com/a"),
        mk_article(id="20240101-002", url="https://example.com/a"),
        mk_article(id="20240101-003", url="https://example.com/b"),
    ))
    assert repo.raw_snapshot_urls() == {"https://example.com/a", "https://example.com/b"}


def test_raw_urls_of_unreadable_snapshot(data_paths):
    assert repo.raw_snapshot_urls() == set()
    data_paths["snapshot"].write_bytes(b"\xff\xfe{garbage")
    assert repo.raw_snapshot_urls() == set()


def test_new_articles_against_url_set(mk_article, mk_snapshot):
    after = NewsSnapshot.model_validate(mk_snapshot(
        mk_article(id="20240101-001", url="https://example.com/a"),
        mk_article(id="20240102-001", url="https://example.com/b")))
    assert [a.id for a in repo.new_articles({"https://example.com/a"}, after)] == ["20240102-001"]
