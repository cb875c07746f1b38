import json

import pytest

from app.core.errors import NotFoundError, ValidationError
from app.models.stress_result import SaveResultRequest
from app.services.results_store import ResultsStore


def _request(**overrides):
    body = {
        "owner": "octo",
        "repo": "game",
        "branchName": "stress-1",
        "grade": "A",
        "timeMs": 120000,
        "bugCount": 2,
        "stressLevel": "medium",
        "startCommitSha": "aaa",
        "completeCommitSha": "bbb",
        "symptoms": ["Names are blank"],
        "filesBuggered": ["src/a.ts"],
        "changes": ["Typo in property name"],
    }
    body.update(overrides)
    return SaveResultRequest.model_validate(body)


@pytest.fixture
def store(tmp_path):
    return ResultsStore(str(tmp_path / "results"))


def test_save_and_get(store):
    record = store.save(_request())
    loaded = store.get(record.id)
    assert loaded.owner == "octo"
    assert loaded.branch_name == "stress-1"
    assert loaded.analysis_is_perfect is False
    assert loaded.created_at


def test_persisted_with_camel_case_keys(store):
    store.save(_request())
    with open(store.path, encoding="utf-8") as f:
        data = json.load(f)
    assert data[0]["branchName"] == "stress-1"
    assert data[0]["filesBuggered"] == ["src/a.ts"]


@pytest.mark.parametrize("missing", ["owner", "grade", "timeMs", "completeCommitSha"])
def test_missing_required_field(store, missing):
    with pytest.raises(ValidationError, match=f"Missing required field: {missing}"):
        store.save(_request(**{missing: None}))


def test_first_missing_field_reported(store):
    with pytest.raises(ValidationError, match="Missing required field: branchName"):
        store.save(_request(branchName=None, grade=None))


def test_list_newest_first_with_pagination(store):
    ids = [store.save(_request(grade=g)).id for g in "ABCDE"]

    page, total = store.list(limit=2, offset=0)
    assert total == 5
    assert [r.id for r in page] == [ids[4], ids[3]]

    page, _ = store.list(limit=2, offset=4)
    assert [r.id for r in page] == [ids[0]]


def test_list_empty_store(store):
    assert store.list() == ([], 0)


def test_unknown_id(store):
    with pytest.raises(NotFoundError):
        store.get("missing")


def test_survives_new_instance(store):
    record = store.save(_request())
    assert ResultsStore(store.directory).get(record.id).id == record.id
