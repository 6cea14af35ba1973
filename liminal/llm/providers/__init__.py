"""Init module.

This module belongs to `liminal.llm.providers` in the liminal codebase.
"""

from liminal.llm.providers.ollama_provider import OllamaProvider
from liminal.llm.providers.openai_compatible_provider import OpenAICompatibleProvider

__all__ = [
    "OllamaProvider",
    "OpenAICompatibleProvider",
]
