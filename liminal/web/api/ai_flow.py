"""Ai Flow module.

This module belongs to `liminal.web.api` in the liminal codebase.
"""

from __future__ import annotations

import json
import logging
import queue
import threading
from dataclasses import asdict
from typing import Any, Iterator

from fastapi import APIRouter
from fastapi.responses import StreamingResponse

from liminal.agents import (
    LoggingStatusSink,
    QueueStatusSink,
    StatusEvent,
    answer_question,
    expand_selection,
    generate_learning_material,
    remove_expansion,
)
from liminal.web import runtime
from liminal.web.contracts import (
    AnswerRequest,
    AnswerResponse,
    ExpandRequest,
    ExpansionView,
    GenerateRequest,
    PageContent,
    ProjectView,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def _emit(event: str, payload: dict[str, Any]) -> str:
    return f"event: {event}\ndata: {json.dumps(payload, ensure_ascii=False)}\n\n"


@router.post("/api/generate")
def generate(payload: GenerateRequest) -> ProjectView:
    meta = generate_learning_material(
        payload.topic,
        payload.depth,
        provider=runtime.llm_provider(),
        store=runtime.project_store(),
        status_sink=LoggingStatusSink("generation"),
    )
    return ProjectView.from_meta(meta)


@router.post("/api/generate/stream")
def generate_stream(payload: GenerateRequest) -> StreamingResponse:
    # resolve before streaming so configuration errors surface as a normal response
    provider = runtime.llm_provider()
    store = runtime.project_store()
    events: queue.Queue = queue.Queue()

    def _worker() -> None:
        try:
            meta = generate_learning_material(
                payload.topic,
                payload.depth,
                provider=provider,
                store=store,
                status_sink=QueueStatusSink(events),
            )
            events.put(("result", ProjectView.from_meta(meta).model_dump(mode="json")))
        except Exception as exc:
            logger.error("streamed generation failed: %s", exc, exc_info=True)
            events.put(("error", {"message": str(exc)}))

    def _iter_events() -> Iterator[str]:
        thread = threading.Thread(target=_worker, daemon=True)
        thread.start()
        while True:
            item = events.get()
            if isinstance(item, StatusEvent):
                yield _emit("status", asdict(item))
                continue
            kind, body = item
            yield _emit(kind, body)
            break

    return StreamingResponse(
        _iter_events(),
        media_type="text/event-stream",
        headers={"Cache-Control": "no-cache", "X-Accel-Buffering": "no"},
    )


@router.post("/api/projects/{project_id}/pages/{page_name}/expand")
def expand(project_id: str, page_name: str, payload: ExpandRequest) -> ExpansionView:
    result = expand_selection(
        project_id,
        page_name,
        payload.selection.to_range(),
        payload.question,
        provider=runtime.llm_provider(),
        store=runtime.project_store(),
    )
    return ExpansionView.from_result(result)


@router.delete("/api/projects/{project_id}/pages/{page_name}/expansions/{expansion_id}")
def delete_expansion(project_id: str, page_name: str, expansion_id: str) -> PageContent:
    content = remove_expansion(project_id, page_name, expansion_id, store=runtime.project_store())
    return PageContent(project_id=project_id, page_name=page_name, content=content)


@router.post("/api/answer")
def answer(payload: AnswerRequest) -> AnswerResponse:
    text = answer_question(payload.selection.to_range(), payload.question, provider=runtime.llm_provider())
    return AnswerResponse(answer=text)
