"""Generation module.

This module belongs to `liminal.agents` in the liminal codebase.
"""

from __future__ import annotations

import logging

from liminal.agents.loop import AgentLoop, ParseFailurePolicy, StatusSink
from liminal.agents.prompts import AGENT_SYSTEM_PROMPT, generation_prompt
from liminal.agents.tools import GENERATION_PROFILE, GenerationState, ToolExecutor
from liminal.llm.provider import LLMProvider, system_message, user_message
from liminal.models import ProjectMeta
from liminal.storage import ProjectStore

logger = logging.getLogger(__name__)

GENERATION_MAX_ITERATIONS = 30
AGENT_TEMPERATURE = 0.7

DEPTH_LEVELS = ("beginner", "intermediate", "advanced")


def generate_learning_material(
    topic: str,
    depth: str,
    *,
    provider: LLMProvider,
    store: ProjectStore,
    status_sink: StatusSink | None = None,
    max_iterations: int = GENERATION_MAX_ITERATIONS,
) -> ProjectMeta:
    """Create a project for `topic` and let the agent fill it chapter by chapter.

    The project exists before the first model call, so pages written by the
    agent survive a provider failure part way through.
    """
    project = store.create_project(topic, "")
    state = GenerationState(project_id=project.id, max_iterations=max_iterations)
    messages = [system_message(AGENT_SYSTEM_PROMPT), user_message(generation_prompt(topic, depth))]

    loop = AgentLoop(
        provider,
        ToolExecutor(store, GENERATION_PROFILE),
        policy=ParseFailurePolicy.RETRY,
        status_sink=status_sink,
        temperature=AGENT_TEMPERATURE,
        start_message="Starting content generation...",
        completion_message="Content generation complete!",
    )
    outcome = loop.run(messages, state)
    logger.info(
        "generation for %s finished after %d iterations (finished=%s, pages=%d)",
        project.id,
        outcome.iterations,
        state.is_finished,
        len(state.pages),
    )
    return store.load_project(project.id)
