from __future__ import annotations

from collections import defaultdict

import liminal.web.app as web_app


def _path_endpoint_modules():
    mapping: dict[str, set[str]] = defaultdict(set)
    for route in web_app.app.routes:
        path = getattr(route, "path", "")
        endpoint = getattr(route, "endpoint", None)
        module = getattr(endpoint, "__module__", "") if endpoint else ""
        mapping[path].add(module)
    return mapping


def test_routes_registered_once_from_flow_modules() -> None:
    modules = _path_endpoint_modules()

    expected = {
        "/api/config": "liminal.web.api.config_flow",
        "/api/projects": "liminal.web.api.project_flow",
        "/api/projects/import": "liminal.web.api.project_flow",
        "/api/projects/{project_id}": "liminal.web.api.project_flow",
        "/api/projects/{project_id}/pages": "liminal.web.api.project_flow",
        "/api/projects/{project_id}/pages/{page_name}": "liminal.web.api.project_flow",
        "/api/projects/{project_id}/order": "liminal.web.api.project_flow",
        "/api/generate": "liminal.web.api.ai_flow",
        "/api/generate/stream": "liminal.web.api.ai_flow",
        "/api/projects/{project_id}/pages/{page_name}/expand": "liminal.web.api.ai_flow",
        "/api/projects/{project_id}/pages/{page_name}/expansions/{expansion_id}": "liminal.web.api.ai_flow",
        "/api/answer": "liminal.web.api.ai_flow",
        "/api/projects/{project_id}/chats": "liminal.web.api.chat_flow",
        "/api/projects/{project_id}/chats/{session_id}": "liminal.web.api.chat_flow",
        "/api/projects/{project_id}/chats/{session_id}/messages": "liminal.web.api.chat_flow",
    }

    for path, module in expected.items():
        assert path in modules, f"missing route: {path}"
        assert modules[path] == {module}, f"route {path} is not owned by {module}: {modules[path]}"
