from __future__ import annotations

import json
from pathlib import Path

import pytest

from liminal.storage import (
    NEW_CHAT_TITLE,
    ChatStore,
    ProjectStore,
    StoreError,
    StoreNotFoundError,
    chat_title_from,
    slugify,
)


def test_slugify_examples() -> None:
    assert slugify("Getting Started") == "getting-started"
    assert slugify("Café Basics") == "cafe-basics"
    assert slugify("!!!") == "page"
    assert slugify("") == "page"
    assert slugify("A" * 100, max_len=20) == "a" * 20


def test_project_round_trip_uses_camel_case_on_disk(tmp_path: Path) -> None:
    store = ProjectStore(tmp_path)
    meta = store.create_project("Cells", "Intro to biology")

    raw = json.loads((tmp_path / "projects" / meta.id / "meta.json").read_text(encoding="utf-8"))
    assert set(raw) == {"id", "title", "description", "createdAt", "updatedAt", "pageOrder"}
    assert (tmp_path / "projects" / meta.id / "pages").is_dir()

    loaded = store.load_project(meta.id)
    assert loaded.title == "Cells"
    assert loaded.page_order == []


def test_list_projects_newest_first_and_skips_broken(tmp_path: Path) -> None:
    store = ProjectStore(tmp_path)
    first = store.create_project("First")
    second = store.create_project("Second")
    store.create_page(first.id, "Touch", "x")
    broken = tmp_path / "projects" / "broken"
    broken.mkdir()
    (broken / "meta.json").write_text("{not json", encoding="utf-8")

    items = store.list_projects()

    assert [item.id for item in items] == [first.id, second.id]
    assert items[0].page_count == 1


def test_create_page_numbers_sequentially(tmp_path: Path) -> None:
    store = ProjectStore(tmp_path)
    pid = store.create_project("Book").id
    assert store.create_page(pid, "Getting Started", "a") == "01-getting-started.md"
    assert store.create_page(pid, "???", "b") == "02-page.md"
    assert store.load_project(pid).page_order == ["01-getting-started.md", "02-page.md"]


def test_missing_project_and_page_are_not_found(tmp_path: Path) -> None:
    store = ProjectStore(tmp_path)
    with pytest.raises(StoreNotFoundError):
        store.load_project("nope")
    pid = store.create_project("Book").id
    with pytest.raises(StoreNotFoundError, match="Page not found: 01-x.md"):
        store.load_page(pid, "01-x.md")
    with pytest.raises(StoreNotFoundError, match="not found in project"):
        store.delete_page(pid, "01-x.md")


def test_unsafe_names_are_rejected(tmp_path: Path) -> None:
    store = ProjectStore(tmp_path)
    pid = store.create_project("Book").id
    with pytest.raises(StoreError, match="invalid page name"):
        store.load_page(pid, "../meta.json")
    with pytest.raises(StoreError, match="invalid project id"):
        store.load_project("..")


def test_reorder_and_delete_project(tmp_path: Path) -> None:
    store = ProjectStore(tmp_path)
    pid = store.create_project("Book").id
    a = store.create_page(pid, "A", "a")
    b = store.create_page(pid, "B", "b")

    assert store.reorder_pages(pid, [b, a]).page_order == [b, a]

    store.delete_project(pid)
    store.delete_project(pid)
    assert store.list_projects() == []


def test_import_folder_names_pages_from_headings_and_filenames(tmp_path: Path) -> None:
    src = tmp_path / "notes"
    src.mkdir()
    (src / "01-first_part.md").write_text("no heading here\n", encoding="utf-8")
    (src / "02-b.md").write_text("intro\n# Second Title\nbody\n", encoding="utf-8")
    (src / "readme.txt").write_text("ignored", encoding="utf-8")
    store = ProjectStore(tmp_path / "data")

    meta = store.import_folder(src, "Imported", "From disk")

    assert meta.page_order == ["01-first-part.md", "02-second-title.md"]
    assert store.load_page(meta.id, "02-second-title.md") == "intro\n# Second Title\nbody\n"


def test_import_folder_rejects_bad_input(tmp_path: Path) -> None:
    store = ProjectStore(tmp_path / "data")
    with pytest.raises(StoreError, match="Invalid folder path"):
        store.import_folder(tmp_path / "missing", "X")
    empty = tmp_path / "empty"
    empty.mkdir()
    with pytest.raises(StoreError, match="No markdown files found"):
        store.import_folder(empty, "X")
    assert store.list_projects() == []


def test_chat_title_comes_from_first_user_message(tmp_path: Path) -> None:
    projects = ProjectStore(tmp_path)
    pid = projects.create_project("Book").id
    chats = ChatStore(projects)
    session = chats.create_session(pid)
    assert session.title == NEW_CHAT_TITLE

    long_message = "Please add a section about the mitochondria and how they produce ATP"
    chats.append_message(pid, session.id, "user", long_message)
    chats.append_message(pid, session.id, "assistant", "Done.")
    chats.append_message(pid, session.id, "user", "Thanks")

    loaded = chats.load_session(pid, session.id)
    assert loaded.title == long_message[:50] + "..."
    assert [m.role for m in loaded.messages] == ["user", "assistant", "user"]
    assert chat_title_from("short") == "short"


def test_chat_sessions_list_and_delete(tmp_path: Path) -> None:
    projects = ProjectStore(tmp_path)
    pid = projects.create_project("Book").id
    chats = ChatStore(projects)
    older = chats.create_session(pid)
    newer = chats.create_session(pid)
    chats.append_message(pid, newer.id, "user", "hi")

    items = chats.list_sessions(pid)
    assert [item.id for item in items] == [newer.id, older.id]
    assert items[0].message_count == 1

    chats.delete_session(pid, older.id)
    assert [item.id for item in chats.list_sessions(pid)] == [newer.id]
    with pytest.raises(StoreNotFoundError):
        chats.load_session(pid, older.id)
