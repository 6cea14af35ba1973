"""Runtime accessors shared by the API flows.

Stores are rebuilt per call so the data directory follows `LIMINAL_DATA_DIR`.
"""

from __future__ import annotations

from liminal.config import ConfigStore, data_dir
from liminal.llm import LLMProvider, get_default_provider
from liminal.storage import ChatStore, ProjectStore


def project_store() -> ProjectStore:
    return ProjectStore(data_dir())


def chat_store() -> ChatStore:
    return ChatStore(project_store())


def config_store() -> ConfigStore:
    return ConfigStore()


def llm_provider() -> LLMProvider:
    return get_default_provider(config_store().load())
