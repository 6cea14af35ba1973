"""Storage module.

File-backed persistence for projects, pages and chat sessions.

Layout under the data root::

    projects/<project_id>/meta.json
    projects/<project_id>/pages/<NN-slug>.md
    projects/<project_id>/chats/<session_id>.json
"""

from __future__ import annotations

import json
import logging
import shutil
import unicodedata
import uuid
from pathlib import Path

from pymdownx.slugs import slugify as _md_slugify

from liminal.models import (
    ChatMessage,
    ChatSession,
    ChatSessionListItem,
    ProjectListItem,
    ProjectMeta,
    utc_now,
)

logger = logging.getLogger(__name__)

NEW_CHAT_TITLE = "New Chat"
_CHAT_TITLE_CHARS = 50

_slugify_lower = _md_slugify(case="lower", separator="-")


class StoreError(RuntimeError):
    pass


class StoreNotFoundError(StoreError):
    pass


def slugify(text: str, max_len: int = 60) -> str:
    normalized = unicodedata.normalize("NFKD", text or "").encode("ascii", "ignore").decode("ascii")
    slug = _slugify_lower(normalized, sep="-") or "page"
    if len(slug) > max_len:
        slug = slug[:max_len].rstrip("-")
    return slug


def _safe_name(name: str, *, kind: str) -> str:
    raw = str(name or "").strip()
    if not raw or raw in {".", ".."} or "/" in raw or "\\" in raw:
        raise StoreError(f"invalid {kind}: {name!r}")
    return raw


def _read_json(path: Path, *, what: str) -> dict:
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError as exc:
        raise StoreNotFoundError(f"Failed to read {what}: {path.name} not found") from exc
    except (OSError, ValueError) as exc:
        raise StoreError(f"Failed to read {what}: {exc}") from exc
    if not isinstance(raw, dict):
        raise StoreError(f"Failed to parse {what}: expected a JSON object")
    return raw


def _write_json(path: Path, payload: dict, *, what: str) -> None:
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(payload, ensure_ascii=False, indent=2), encoding="utf-8")
    except OSError as exc:
        raise StoreError(f"Failed to write {what}: {exc}") from exc


class ProjectStore:
    def __init__(self, root: Path | str) -> None:
        self.root = Path(root)

    @property
    def projects_dir(self) -> Path:
        return self.root / "projects"

    def project_dir(self, project_id: str) -> Path:
        return self.projects_dir / _safe_name(project_id, kind="project id")

    def pages_dir(self, project_id: str) -> Path:
        return self.project_dir(project_id) / "pages"

    def _page_path(self, project_id: str, page_name: str) -> Path:
        return self.pages_dir(project_id) / _safe_name(page_name, kind="page name")

    # projects

    def list_projects(self) -> list[ProjectListItem]:
        items: list[ProjectListItem] = []
        if not self.projects_dir.exists():
            return items
        for entry in self.projects_dir.iterdir():
            meta_path = entry / "meta.json"
            if not meta_path.is_file():
                continue
            try:
                items.append(ProjectListItem.from_meta(ProjectMeta.from_dict(_read_json(meta_path, what="project"))))
            except (StoreError, KeyError, ValueError):
                logger.warning("skipping unreadable project metadata: %s", meta_path)
        items.sort(key=lambda item: item.updated_at, reverse=True)
        return items

    def create_project(self, title: str, description: str = "") -> ProjectMeta:
        now = utc_now()
        meta = ProjectMeta(id=str(uuid.uuid4()), title=title, description=description, created_at=now, updated_at=now)
        self.save_project(meta, touch=False)
        logger.info("created project %s (%s)", meta.id, title)
        return meta

    def load_project(self, project_id: str) -> ProjectMeta:
        raw = _read_json(self.project_dir(project_id) / "meta.json", what="project")
        try:
            return ProjectMeta.from_dict(raw)
        except (KeyError, ValueError) as exc:
            raise StoreError(f"Failed to parse project: {exc}") from exc

    def save_project(self, meta: ProjectMeta, *, touch: bool = True) -> None:
        if touch:
            meta.updated_at = utc_now()
        self.pages_dir(meta.id).mkdir(parents=True, exist_ok=True)
        _write_json(self.project_dir(meta.id) / "meta.json", meta.to_dict(), what="project")

    def delete_project(self, project_id: str) -> None:
        path = self.project_dir(project_id)
        if path.exists():
            shutil.rmtree(path)

    # pages

    def load_page(self, project_id: str, page_name: str) -> str:
        path = self._page_path(project_id, page_name)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError as exc:
            raise StoreNotFoundError(f"Page not found: {page_name}") from exc
        except OSError as exc:
            raise StoreError(f"Failed to read page: {exc}") from exc

    def save_page(self, project_id: str, page_name: str, content: str) -> None:
        path = self._page_path(project_id, page_name)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content, encoding="utf-8")
        except OSError as exc:
            raise StoreError(f"Failed to write page: {exc}") from exc
        try:
            self.save_project(self.load_project(project_id))
        except StoreError:
            logger.debug("page saved without project metadata: %s/%s", project_id, page_name)

    def create_page(self, project_id: str, title: str, content: str) -> str:
        meta = self.load_project(project_id)
        page_name = self._next_page_name(meta, title)
        self.save_page(project_id, page_name, content)
        meta.page_order.append(page_name)
        self.save_project(meta)
        return page_name

    def _next_page_name(self, meta: ProjectMeta, title: str) -> str:
        # numbering continues past the highest prefix; freed numbers are not reused
        prefixes = [int(p[:2]) for p in meta.page_order if p[:2].isdigit()]
        number = max(prefixes, default=len(meta.page_order)) + 1
        slug = slugify(title)
        while True:
            page_name = f"{number:02d}-{slug}.md"
            if page_name not in meta.page_order and not self._page_path(meta.id, page_name).exists():
                return page_name
            number += 1

    def delete_page(self, project_id: str, page_name: str) -> None:
        meta = self.load_project(project_id)
        if page_name not in meta.page_order:
            raise StoreNotFoundError(f"File '{page_name}' not found in project")
        path = self._page_path(project_id, page_name)
        meta.page_order = [p for p in meta.page_order if p != page_name]
        try:
            path.unlink(missing_ok=True)
        except OSError as exc:
            raise StoreError(f"Failed to delete file: {exc}") from exc
        self.save_project(meta)

    def reorder_pages(self, project_id: str, order: list[str]) -> ProjectMeta:
        meta = self.load_project(project_id)
        meta.page_order = [str(p) for p in order]
        self.save_project(meta)
        return meta

    def import_folder(self, folder: Path | str, title: str, description: str = "") -> ProjectMeta:
        src = Path(folder)
        if not src.is_dir():
            raise StoreError("Invalid folder path")
        md_files = sorted((p for p in src.iterdir() if p.is_file() and p.suffix == ".md"), key=lambda p: p.name)
        if not md_files:
            raise StoreError("No markdown files found in folder")

        meta = self.create_project(title, description)
        for index, path in enumerate(md_files, start=1):
            try:
                content = path.read_text(encoding="utf-8")
            except OSError as exc:
                raise StoreError(f"Failed to read file {path}: {exc}") from exc
            page_name = f"{index:02d}-{slugify(_page_title(path, content))}.md"
            try:
                self._page_path(meta.id, page_name).write_text(content, encoding="utf-8")
            except OSError as exc:
                raise StoreError(f"Failed to write page: {exc}") from exc
            meta.page_order.append(page_name)
        self.save_project(meta)
        return meta


def _page_title(path: Path, content: str) -> str:
    for line in content.splitlines():
        if line.startswith("# "):
            return line[2:].strip()
    stem = path.stem
    cleaned = stem.lstrip("0123456789-_").replace("-", " ").replace("_", " ")
    return cleaned or stem


def chat_title_from(message: str) -> str:
    if len(message) > _CHAT_TITLE_CHARS:
        return message[:_CHAT_TITLE_CHARS] + "..."
    return message


class ChatStore:
    def __init__(self, projects: ProjectStore) -> None:
        self.projects = projects

    def chats_dir(self, project_id: str) -> Path:
        return self.projects.project_dir(project_id) / "chats"

    def _path(self, project_id: str, session_id: str) -> Path:
        return self.chats_dir(project_id) / f"{_safe_name(session_id, kind='session id')}.json"

    def list_sessions(self, project_id: str) -> list[ChatSessionListItem]:
        out: list[ChatSessionListItem] = []
        chats = self.chats_dir(project_id)
        if not chats.exists():
            return out
        for path in chats.glob("*.json"):
            try:
                out.append(ChatSessionListItem.from_session(ChatSession.from_dict(_read_json(path, what="chat session"))))
            except (StoreError, KeyError, ValueError):
                logger.warning("skipping unreadable chat session: %s", path)
        out.sort(key=lambda item: item.updated_at, reverse=True)
        return out

    def create_session(self, project_id: str, title: str = NEW_CHAT_TITLE) -> ChatSession:
        now = utc_now()
        session = ChatSession(id=str(uuid.uuid4()), project_id=project_id, title=title, created_at=now, updated_at=now)
        self.save_session(session)
        return session

    def load_session(self, project_id: str, session_id: str) -> ChatSession:
        raw = _read_json(self._path(project_id, session_id), what="chat session")
        try:
            return ChatSession.from_dict(raw)
        except (KeyError, ValueError) as exc:
            raise StoreError(f"Failed to parse chat session: {exc}") from exc

    def save_session(self, session: ChatSession) -> None:
        _write_json(self._path(session.project_id, session.id), session.to_dict(), what="chat session")

    def append_message(self, project_id: str, session_id: str, role: str, content: str) -> ChatSession:
        session = self.load_session(project_id, session_id)
        add_message(session, role, content)
        self.save_session(session)
        return session

    def delete_session(self, project_id: str, session_id: str) -> None:
        path = self._path(project_id, session_id)
        try:
            path.unlink(missing_ok=True)
        except OSError as exc:
            raise StoreError(f"Failed to delete chat session: {exc}") from exc


def add_message(session: ChatSession, role: str, content: str) -> None:
    now = utc_now()
    session.messages.append(ChatMessage(role=role, content=content, timestamp=now))
    session.updated_at = now
    if role == "user" and session.title == NEW_CHAT_TITLE:
        session.title = chat_title_from(content)
