"""Config Flow module.

This module belongs to `liminal.web.api` in the liminal codebase.
"""

from __future__ import annotations

from fastapi import APIRouter

from liminal.config import AppConfig
from liminal.web import runtime
from liminal.web.contracts import ConfigUpdateRequest, ConfigView

router = APIRouter()


def _view(config: AppConfig) -> ConfigView:
    return ConfigView(
        has_api_key=bool(config.api_key),
        base_url=config.base_url,
        model=config.model,
        theme=config.theme,
    )


@router.get("/api/config")
def get_config() -> ConfigView:
    return _view(runtime.config_store().load())


@router.put("/api/config")
def update_config(payload: ConfigUpdateRequest) -> ConfigView:
    config = runtime.config_store().update(**payload.model_dump(exclude_none=True))
    return _view(config)
