"""Text-completion clients used for extraction and appeal letters."""

import logging
from typing import Annotated, Literal, Protocol

from llama_index.core.llms import LLM, ChatMessage, MessageRole
from workflows.resource import Resource, ResourceConfig

from .config import CONFIG_FILE, AppealSettings, ExtractionSettings

logger = logging.getLogger(__name__)

ResponseFormat = Literal["json", "text"]


class CompletionClient(Protocol):
    """Anything that turns instructions plus content into model text."""

    async def complete(
        self,
        system_instructions: str,
        user_content: str,
        response_format: ResponseFormat = "text",
    ) -> str: ...


class LLMCompletionClient:
    """CompletionClient backed by a llama-index chat LLM."""

    def __init__(self, llm: LLM):
        self.llm = llm

    async def complete(
        self,
        system_instructions: str,
        user_content: str,
        response_format: ResponseFormat = "text",
    ) -> str:
        messages = [
            ChatMessage(role=MessageRole.SYSTEM, content=system_instructions),
            ChatMessage(role=MessageRole.USER, content=user_content),
        ]
        kwargs = {}
        if response_format == "json":
            kwargs["response_format"] = {"type": "json_object"}

        response = await self.llm.achat(messages, **kwargs)
        return response.message.content or ""


def get_llm(settings: ExtractionSettings | AppealSettings) -> LLM:
    """OpenAI chat model configured for one step."""
    from llama_index.llms.openai import OpenAI

    return OpenAI(
        model=settings.model,
        temperature=settings.temperature,
        max_tokens=settings.max_tokens,
    )


def get_completion_client(
    settings: ExtractionSettings | AppealSettings,
) -> LLMCompletionClient:
    logger.debug("Creating completion client for %s", settings.model)
    return LLMCompletionClient(get_llm(settings))


# --- Workflow resources ---


def get_extraction_llm(
    settings: Annotated[
        ExtractionSettings,
        ResourceConfig(config_file=CONFIG_FILE, path_selector="extract"),
    ],
) -> LLM:
    return get_llm(settings)


def get_extraction_client(
    llm: Annotated[LLM, Resource(get_extraction_llm)],
) -> CompletionClient:
    """Extraction client wrapping the configured chat model."""
    return LLMCompletionClient(llm)
