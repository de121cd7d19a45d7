"""Tests for the EOB review workflow and the service entry points."""

import json
from pathlib import Path

import pytest
from workflows.resource import ResourceManager

from eob_review.clients import get_extraction_client
from eob_review.config import CONFIG_FILE, ExtractionSettings, load_config
from eob_review.errors import ExtractionFailed, UnsupportedDocument
from eob_review.process_file import (
    DocumentStartEvent,
    EOBReviewOutput,
    EOBReviewWorkflow,
)
from eob_review.schemas import IssueType
from eob_review.service import detect_eob, export_csv, extract_eob_data

from conftest import FakeCompletionClient

PROJECT_ROOT = Path(__file__).resolve().parent.parent


@pytest.fixture(autouse=True)
def project_root(monkeypatch: pytest.MonkeyPatch) -> None:
    """Workflow resource configs are read from configs/config.json."""
    monkeypatch.chdir(PROJECT_ROOT)


async def _make_workflow(
    client: FakeCompletionClient,
    extract_settings: ExtractionSettings | None = None,
) -> EOBReviewWorkflow:
    """Helper to build a workflow with its extraction client pre-resolved."""
    resources = ResourceManager()
    await resources.set(get_extraction_client.__qualname__, client)
    if extract_settings is not None:
        await resources.set(f"{CONFIG_FILE}.extract", extract_settings)
    return EOBReviewWorkflow(timeout=None, resource_manager=resources)


@pytest.mark.asyncio
async def test_workflow_extracts_eob(fake_client, eob_text) -> None:
    """An EOB passes the gate and comes back fully analyzed."""
    wf = await _make_workflow(fake_client)
    result = await wf.run(start_event=DocumentStartEvent(text=eob_text))

    assert isinstance(result, EOBReviewOutput)
    assert result.detection.is_eob is True
    assert result.record is not None
    assert result.record.claim_number == "CLM-2024-0001"
    assert result.record.issues[0].type == IssueType.DENIAL
    assert len(fake_client.calls) == 1


@pytest.mark.asyncio
async def test_workflow_stops_on_non_eob(fake_client) -> None:
    """Text that is not an EOB stops before any model call."""
    wf = await _make_workflow(fake_client)
    result = await wf.run(
        start_event=DocumentStartEvent(text="Dear tenant, your lease renews in May.")
    )

    assert result.detection.is_eob is False
    assert result.record is None
    assert fake_client.calls == []


@pytest.mark.asyncio
async def test_workflow_force_skips_gate(fake_client) -> None:
    wf = await _make_workflow(fake_client)
    result = await wf.run(
        start_event=DocumentStartEvent(text="scanned page, mostly unreadable", force=True)
    )

    assert result.detection.is_eob is False
    assert result.record is not None
    assert len(fake_client.calls) == 1


@pytest.mark.asyncio
async def test_workflow_propagates_extraction_failure(eob_text) -> None:
    """A malformed model response reaches the caller as ExtractionFailed."""
    wf = await _make_workflow(FakeCompletionClient("not json at all"))
    with pytest.raises(ExtractionFailed):
        await wf.run(start_event=DocumentStartEvent(text=eob_text))


@pytest.mark.asyncio
async def test_workflow_reads_budget_from_config_file(fake_client, eob_text) -> None:
    """Extraction settings come from the extract section of configs/config.json."""
    file_settings = json.loads((PROJECT_ROOT / CONFIG_FILE).read_text())["extract"]
    budget = file_settings["max_document_chars"]
    text = eob_text + "x" * budget + "TAIL_MARKER"

    wf = await _make_workflow(fake_client)
    await wf.run(start_event=DocumentStartEvent(text=text))

    assert "TAIL_MARKER" not in fake_client.calls[0]["user_content"]


@pytest.mark.asyncio
async def test_workflow_uses_injected_settings(fake_client, eob_text) -> None:
    wf = await _make_workflow(
        fake_client, extract_settings=ExtractionSettings(max_document_chars=20)
    )
    await wf.run(start_event=DocumentStartEvent(text=eob_text))

    assert eob_text[:20] in fake_client.calls[0]["user_content"]
    assert eob_text[:21] not in fake_client.calls[0]["user_content"]


# --- Service Tests ---


class TestService:
    """Tests for the entry points used by the surrounding application."""

    @pytest.mark.asyncio
    async def test_extract_and_export(self, fake_client, eob_text):
        record = await extract_eob_data(eob_text, client=fake_client)
        export = export_csv(record)
        assert export.content_type == "text/csv"
        assert "Comprehensive metabolic panel" in export.content

    @pytest.mark.asyncio
    async def test_require_eob_rejects_low_confidence(self, fake_client):
        with pytest.raises(UnsupportedDocument) as exc_info:
            await extract_eob_data("grocery list", client=fake_client, require_eob=True)
        assert exc_info.value.confidence < 50
        assert fake_client.calls == []

    @pytest.mark.asyncio
    async def test_gate_left_to_caller_by_default(self, fake_client):
        record = await extract_eob_data("grocery list", client=fake_client)
        assert record.payer_name == "Acme Health Plan"

    def test_detect_eob_exposed(self, eob_text):
        assert detect_eob(eob_text).is_eob is True


# --- Config Tests ---


class TestLoadConfig:
    """Tests for configuration loading."""

    def test_missing_file_uses_defaults(self, tmp_path):
        config = load_config(tmp_path / "absent.json")
        assert config.extract.max_document_chars == 12_000
        assert config.extract.model == "gpt-4o"
        assert config.appeal.temperature == 0.3

    def test_partial_file_overrides(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"extract": {"max_document_chars": 8000}}))
        config = load_config(path)
        assert config.extract.max_document_chars == 8000
        assert config.extract.temperature == 0.1
        assert config.appeal.max_tokens == 1500

    def test_env_var_path(self, tmp_path, monkeypatch):
        path = tmp_path / "custom.json"
        path.write_text(json.dumps({"appeal": {"model": "gpt-4o-mini"}}))
        monkeypatch.setenv("EOB_REVIEW_CONFIG", str(path))
        assert load_config().appeal.model == "gpt-4o-mini"
