"""App module.

This module belongs to `liminal.web` in the liminal codebase.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from liminal.agents import ToolCallParseError
from liminal.llm import LLMProviderError, ProviderConfigError
from liminal.patch import PatchParseError
from liminal.storage import StoreError, StoreNotFoundError
from liminal.web.api.ai_flow import router as ai_router
from liminal.web.api.chat_flow import router as chat_router
from liminal.web.api.config_flow import router as config_router
from liminal.web.api.project_flow import router as project_router
from liminal.web.contracts import APIError, ErrorCode

logger = logging.getLogger(__name__)

app = FastAPI(title="Liminal")
app.include_router(config_router)
app.include_router(project_router)
app.include_router(ai_router)
app.include_router(chat_router)


def _error(status_code: int, code: ErrorCode, exc: Exception) -> JSONResponse:
    body = APIError(code=code, message=str(exc), details={"type": type(exc).__name__})
    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json"))


@app.exception_handler(StoreNotFoundError)
async def _not_found(request: Request, exc: StoreNotFoundError) -> JSONResponse:
    return _error(404, ErrorCode.NOT_FOUND, exc)


@app.exception_handler(StoreError)
async def _store_error(request: Request, exc: StoreError) -> JSONResponse:
    return _error(400, ErrorCode.BAD_REQUEST, exc)


@app.exception_handler(PatchParseError)
@app.exception_handler(ToolCallParseError)
async def _parse_error(request: Request, exc: ValueError) -> JSONResponse:
    return _error(422, ErrorCode.UNPROCESSABLE, exc)


@app.exception_handler(ProviderConfigError)
async def _provider_config_error(request: Request, exc: ProviderConfigError) -> JSONResponse:
    return _error(400, ErrorCode.BAD_REQUEST, exc)


@app.exception_handler(LLMProviderError)
async def _provider_error(request: Request, exc: LLMProviderError) -> JSONResponse:
    logger.error("model provider failed on %s: %s", request.url.path, exc)
    return _error(502, ErrorCode.UPSTREAM_ERROR, exc)
