"""Tests for the llama-index backed completion client."""

import pytest
from llama_index.core.llms import MockLLM

from eob_review.clients import LLMCompletionClient, get_extraction_client


@pytest.mark.asyncio
async def test_complete_returns_model_text() -> None:
    """The client sends system and user messages and returns the reply text."""
    client = LLMCompletionClient(MockLLM())
    reply = await client.complete("You extract EOB data.", "Claim Number: 123")
    assert "Claim Number: 123" in reply


def test_extraction_client_wraps_llm() -> None:
    """The workflow resource wraps the injected chat model."""
    llm = MockLLM()
    client = get_extraction_client(llm)
    assert isinstance(client, LLMCompletionClient)
    assert client.llm is llm
