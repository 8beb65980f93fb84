"""Tests for the run state file."""

import json

import pytest

from lead_intel.services.db.state_store import LeadStateStore


def test_save_then_load(tmp_path):
    store = LeadStateStore(tmp_path / "runs" / "campaign.json")
    leads = [{"name": "Jane Doe", "enrichment_state": "done"}]

    store.save_leads(leads, run_id="run_1")

    state = store.load()
    assert state["run_id"] == "run_1"
    assert state["leads"] == leads
    assert "updated_at" in state
    # No temp files left behind
    assert [p.name for p in (tmp_path / "runs").iterdir()] == ["campaign.json"]


def test_save_leads_keeps_other_keys(tmp_path):
    path = tmp_path / "campaign.json"
    path.write_text(json.dumps({"run_id": "run_7", "client": "acme", "leads": []}), encoding="utf-8")
    store = LeadStateStore(path)

    store.save_leads([{"name": "John Roe"}])

    state = store.load()
    assert state["client"] == "acme"
    assert state["run_id"] == "run_7"
    assert store.load_leads() == [{"name": "John Roe"}]


def test_run_id_defaults_to_file_name(tmp_path):
    path = tmp_path / "march.json"
    path.write_text(json.dumps({"leads": []}), encoding="utf-8")
    assert LeadStateStore(path).load()["run_id"] == "march"


def test_failed_write_keeps_previous_state(tmp_path):
    store = LeadStateStore(tmp_path / "campaign.json")
    store.save_leads([{"name": "Jane Doe"}], run_id="run_1")

    with pytest.raises(TypeError):
        store.save_leads([{"name": "Bad", "blob": object()}])

    assert store.load_leads() == [{"name": "Jane Doe"}]
    assert [p.name for p in tmp_path.iterdir()] == ["campaign.json"]


@pytest.mark.parametrize("content", ['["not", "a", "dict"]', '{"leads": {"a": 1}}'])
def test_malformed_state_rejected(tmp_path, content):
    path = tmp_path / "bad.json"
    path.write_text(content, encoding="utf-8")
    with pytest.raises(ValueError):
        LeadStateStore(path).load()


def test_missing_file(tmp_path):
    store = LeadStateStore(tmp_path / "missing.json")
    assert store.exists() is False
    with pytest.raises(FileNotFoundError):
        store.load()
