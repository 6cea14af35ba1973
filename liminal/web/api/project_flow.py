"""Project Flow module.

This module belongs to `liminal.web.api` in the liminal codebase.
"""

from __future__ import annotations

from fastapi import APIRouter

from liminal.web import runtime
from liminal.web.contracts import (
    OkResponse,
    PageContent,
    PageCreateRequest,
    PageOrderRequest,
    PageSaveRequest,
    PageView,
    ProjectCreateRequest,
    ProjectImportRequest,
    ProjectListResponse,
    ProjectSummary,
    ProjectView,
)

router = APIRouter()

NEW_PAGE_CONTENT = "# New Page\n\nStart writing here..."


@router.get("/api/projects")
def list_projects() -> ProjectListResponse:
    items = runtime.project_store().list_projects()
    return ProjectListResponse(items=[ProjectSummary.from_item(item) for item in items])


@router.post("/api/projects")
def create_project(payload: ProjectCreateRequest) -> ProjectView:
    return ProjectView.from_meta(runtime.project_store().create_project(payload.title, payload.description))


@router.post("/api/projects/import")
def import_project(payload: ProjectImportRequest) -> ProjectView:
    meta = runtime.project_store().import_folder(payload.folder_path, payload.title, payload.description)
    return ProjectView.from_meta(meta)


@router.get("/api/projects/{project_id}")
def get_project(project_id: str) -> ProjectView:
    return ProjectView.from_meta(runtime.project_store().load_project(project_id))


@router.delete("/api/projects/{project_id}")
def delete_project(project_id: str) -> OkResponse:
    runtime.project_store().delete_project(project_id)
    return OkResponse()


@router.get("/api/projects/{project_id}/pages/{page_name}")
def get_page(project_id: str, page_name: str) -> PageContent:
    content = runtime.project_store().load_page(project_id, page_name)
    return PageContent(project_id=project_id, page_name=page_name, content=content)


@router.put("/api/projects/{project_id}/pages/{page_name}")
def save_page(project_id: str, page_name: str, payload: PageSaveRequest) -> OkResponse:
    runtime.project_store().save_page(project_id, page_name, payload.content)
    return OkResponse()


@router.post("/api/projects/{project_id}/pages")
def add_page(project_id: str, payload: PageCreateRequest) -> PageView:
    content = payload.content if payload.content is not None else NEW_PAGE_CONTENT
    name = runtime.project_store().create_page(project_id, payload.title, content)
    return PageView(name=name, title=payload.title)


@router.put("/api/projects/{project_id}/order")
def reorder_pages(project_id: str, payload: PageOrderRequest) -> ProjectView:
    return ProjectView.from_meta(runtime.project_store().reorder_pages(project_id, payload.order))
