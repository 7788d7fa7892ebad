"""
Tests for DataStore operations against SQLite
"""

import pytest
from sqlalchemy.orm import Query

from knowledge_base.core.config import Settings
from knowledge_base.core.database import build_engine, create_tables
from knowledge_base.core.errors import ConstraintViolation, DataStoreError, TransportError
from knowledge_base.core.security import verify_password
from knowledge_base.database.data_store import DataStore
from knowledge_base.schemas.chat import Message
from knowledge_base.schemas.chunk import ChunkCreate


def make_chunk(chunk_id, file_path, content="text"):
    return {
        "id": chunk_id,
        "file_path": file_path,
        "content": content,
        "embedding": [0.1, 0.2, 0.3],
    }


# Users

def test_get_user_unknown_email_returns_empty_list(store):
    assert store.get_user("nobody@x.com") == []


def test_create_user_stores_verifiable_hash(store):
    store.create_user("a@x.com", "pw1")

    users = store.get_user("a@x.com")
    assert len(users) == 1
    assert users[0].email == "a@x.com"
    assert users[0].password != "pw1"
    assert verify_password("pw1", users[0].password)
    assert not verify_password("wrong", users[0].password)


def test_create_user_uses_fresh_salt(store):
    first = store.create_user("a@x.com", "same")
    second = store.create_user("b@x.com", "same")

    assert first.password != second.password


def test_create_user_duplicate_email_raises_constraint_violation(store):
    store.create_user("a@x.com", "pw1")

    with pytest.raises(ConstraintViolation) as exc_info:
        store.create_user("a@x.com", "pw2")

    assert exc_info.value.orig is not None
    assert len(store.get_user("a@x.com")) == 1


# Chats

def test_create_message_then_get_chat_by_id(chat_store):
    messages = [{"role": "user", "content": "hi"}]

    chat_store.create_message("c1", messages, "a@x.com")

    chat = chat_store.get_chat_by_id("c1")
    assert chat.author == "a@x.com"
    assert chat.messages == messages
    assert chat.created_at is not None


def test_create_message_update_keeps_author_and_created_at(chat_store):
    chat_store.create_message("c1", [{"role": "user", "content": "hi"}], "a@x.com")
    before = chat_store.get_chat_by_id("c1")

    new_messages = [{"role": "assistant", "content": "hello"}]
    returned = chat_store.create_message("c1", new_messages, "someone-else@x.com")
    after = chat_store.get_chat_by_id("c1")

    assert after.messages == new_messages
    assert after.author == "a@x.com"
    assert after.created_at == before.created_at
    assert returned.messages == new_messages
    assert returned.author == "a@x.com"


def test_create_message_accepts_message_schemas(chat_store):
    messages = [
        Message(role="user", content="what is in the report?"),
        Message(role="assistant", content=[{"type": "text", "text": "A summary."}], id="m2"),
    ]

    chat_store.create_message("c2", messages, "a@x.com")

    chat = chat_store.get_chat_by_id("c2")
    assert chat.messages == [
        {"role": "user", "content": "what is in the report?"},
        {"role": "assistant", "content": [{"type": "text", "text": "A summary."}], "id": "m2"},
    ]


def test_get_chat_by_id_unknown_returns_none(store):
    assert store.get_chat_by_id("missing") is None


def test_get_chats_by_user_newest_first(chat_store):
    chat_store.create_message("older", [{"role": "user", "content": "1"}], "a@x.com")
    chat_store.create_message("other", [{"role": "user", "content": "2"}], "b@x.com")
    chat_store.create_message("newer", [{"role": "user", "content": "3"}], "a@x.com")

    chats = chat_store.get_chats_by_user("a@x.com")

    assert [chat.id for chat in chats] == ["newer", "older"]
    assert chats[0].created_at > chats[1].created_at


def test_get_chats_by_user_order_unaffected_by_updates(chat_store):
    chat_store.create_message("first", [], "a@x.com")
    chat_store.create_message("second", [], "a@x.com")
    chat_store.create_message("first", [{"role": "user", "content": "later edit"}], "a@x.com")

    assert [chat.id for chat in chat_store.get_chats_by_user("a@x.com")] == ["second", "first"]


def test_get_chats_by_user_unknown_email_returns_empty_list(store):
    assert store.get_chats_by_user("nobody@x.com") == []


def test_user_and_chat_scenario(chat_store):
    chat_store.create_user("a@x.com", "pw1")
    assert len(chat_store.get_user("a@x.com")) == 1

    chat_store.create_message("c1", [{"role": "user", "content": "hi"}], "a@x.com")
    created = chat_store.get_chat_by_id("c1")
    assert created.messages == [{"role": "user", "content": "hi"}]

    chat_store.create_message("c1", [{"role": "assistant", "content": "hello"}], "a@x.com")
    updated = chat_store.get_chat_by_id("c1")
    assert updated.messages == [{"role": "assistant", "content": "hello"}]
    assert updated.author == created.author
    assert updated.created_at == created.created_at


# Chunks

def test_insert_and_get_chunks_by_file_paths(store):
    inserted = store.insert_chunks([
        make_chunk("a-0", "docs/a.md"),
        make_chunk("a-1", "docs/a.md"),
        make_chunk("b-0", "docs/b.md"),
        make_chunk("c-0", "docs/c.md"),
    ])

    assert inserted == 4
    chunks = store.get_chunks_by_file_paths(["docs/a.md", "docs/b.md"])
    assert sorted(chunk.id for chunk in chunks) == ["a-0", "a-1", "b-0"]
    assert chunks[0].embedding == [0.1, 0.2, 0.3]


def test_insert_chunks_accepts_schemas(store):
    store.insert_chunks([ChunkCreate(id="x-0", file_path="x.txt", content="body", embedding=[1.0])])

    [chunk] = store.get_chunks_by_file_paths(["x.txt"])
    assert chunk.content == "body"
    assert chunk.embedding == [1.0]


def test_insert_chunks_empty_is_noop(store):
    assert store.insert_chunks([]) == 0
    assert store.get_chunks_by_file_paths(["docs/a.md"]) == []


def test_insert_chunks_duplicate_id_raises_constraint_violation(store):
    store.insert_chunks([make_chunk("a-0", "docs/a.md")])

    with pytest.raises(ConstraintViolation):
        store.insert_chunks([make_chunk("a-0", "docs/other.md")])


def test_get_chunks_by_file_paths_empty_input(store):
    store.insert_chunks([make_chunk("a-0", "docs/a.md")])

    assert store.get_chunks_by_file_paths([]) == []


def test_delete_chunks_by_file_path(store):
    store.insert_chunks([
        make_chunk("a-0", "docs/a.md"),
        make_chunk("a-1", "docs/a.md"),
        make_chunk("b-0", "docs/b.md"),
    ])

    assert store.delete_chunks_by_file_path("docs/a.md") == 2
    assert store.get_chunks_by_file_paths(["docs/a.md"]) == []
    assert [chunk.id for chunk in store.get_chunks_by_file_paths(["docs/b.md"])] == ["b-0"]


def test_delete_chunks_by_unknown_file_path_affects_nothing(store):
    assert store.delete_chunks_by_file_path("missing.md") == 0


# Errors

def test_unreachable_database_raises_transport_error(tmp_path):
    settings = Settings(_env_file=None)
    missing = tmp_path / "no-such-dir" / "store.db"
    store = DataStore(build_engine(f"sqlite:///{missing}", settings))

    with pytest.raises(TransportError) as exc_info:
        store.get_user("a@x.com")

    assert exc_info.value.orig is not None


def test_missing_table_is_not_reported_as_transport_error(test_settings):
    store = DataStore(build_engine("sqlite://", test_settings))

    with pytest.raises(DataStoreError) as exc_info:
        store.get_user("a@x.com")

    assert not isinstance(exc_info.value, TransportError)
    assert "no such table" in str(exc_info.value)


# Chat edge cases

def test_create_message_keeps_null_fields(chat_store):
    messages = [
        Message(role="user", content="x", name=None),
        {"role": "assistant", "content": "hi", "toolInvocations": None},
    ]

    chat_store.create_message("c8", messages, "a@x.com")

    assert chat_store.get_chat_by_id("c8").messages == [
        {"role": "user", "content": "x", "name": None},
        {"role": "assistant", "content": "hi", "toolInvocations": None},
    ]


def test_concurrent_first_write_loses_with_constraint_violation(engine, clock, monkeypatch):
    store = DataStore(engine, atomic_upsert=False, clock=clock)
    store.create_message("c1", [{"role": "user", "content": "first"}], "a@x.com")
    before = store.get_chat_by_id("c1")

    # Both writers saw "not found": the existence check misses the row another writer inserted
    monkeypatch.setattr(Query, "first", lambda self: None)
    with pytest.raises(ConstraintViolation):
        store.create_message("c1", [{"role": "user", "content": "second"}], "b@x.com")
    monkeypatch.undo()

    after = store.get_chat_by_id("c1")
    assert after.messages == [{"role": "user", "content": "first"}]
    assert after.author == "a@x.com"
    assert after.created_at == before.created_at


# Password hashing cost

def test_bcrypt_rounds_follow_store_settings(engine):
    store = DataStore(engine, bcrypt_rounds=5)

    user = store.create_user("a@x.com", "pw1")

    assert user.password.startswith("$2b$05$")
    assert verify_password("pw1", user.password)


def test_from_settings_applies_bcrypt_rounds():
    settings = Settings(_env_file=None, POSTGRES_URL="sqlite://", bcrypt_rounds=4)
    store = DataStore.from_settings(settings)
    create_tables(store.engine)

    user = store.create_user("a@x.com", "pw1")

    assert user.password.startswith("$2b$04$")
