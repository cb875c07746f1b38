"""
Results Store
=============
File-backed persistence for completed debugging challenges.

Layout:
    <RESULTS_DIR>/results.json  — JSON array of StressResultRecord dicts,
                                  in save order (oldest first)

Listing returns newest first with limit / offset pagination.
Writes go through a temp file + os.replace so a crash never leaves a
half-written array behind.
"""
import json
import logging
import os
import threading
import uuid
from datetime import datetime, timezone
from typing import List, Optional, Tuple

from app.core.config import RESULTS_DIR
from app.core.errors import NotFoundError, ValidationError
from app.models.stress_result import (
    REQUIRED_RESULT_FIELDS,
    SaveResultRequest,
    StressResultRecord,
)

logger = logging.getLogger(__name__)

RESULTS_FILENAME = "results.json"


class ResultsStore:
    """
    Usage:
        store = ResultsStore("results")
        record = store.save(request)
        page, total = store.list(limit=20, offset=0)
    """

    def __init__(self, directory: str = RESULTS_DIR) -> None:
        self.directory = directory
        self.path = os.path.join(directory, RESULTS_FILENAME)
        self._lock = threading.Lock()

    # -------------------------------------------------------------------
    # Internal file access
    # -------------------------------------------------------------------
    def _load(self) -> List[dict]:
        if not os.path.exists(self.path):
            return []
        with open(self.path, "r", encoding="utf-8") as f:
            data = json.load(f)
        if not isinstance(data, list):
            logger.error("Results file %s does not hold a list, ignoring it", self.path)
            return []
        return data

    def _write(self, records: List[dict]) -> None:
        os.makedirs(self.directory, exist_ok=True)
        tmp_path = self.path + ".tmp"
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump(records, f, indent=2)
        os.replace(tmp_path, self.path)

    # -------------------------------------------------------------------
    # Public API
    # -------------------------------------------------------------------
    @staticmethod
    def validate(request: SaveResultRequest) -> None:
        """Raise ValidationError naming the first missing required field."""
        payload = request.model_dump(by_alias=True)
        for field_name in REQUIRED_RESULT_FIELDS:
            if payload.get(field_name) is None:
                raise ValidationError(f"Missing required field: {field_name}")

    def save(self, request: SaveResultRequest) -> StressResultRecord:
        self.validate(request)
        record = StressResultRecord(
            **request.model_dump(),
            id=uuid.uuid4().hex,
            created_at=datetime.now(timezone.utc).isoformat(),
        )
        with self._lock:
            records = self._load()
            records.append(record.model_dump(by_alias=True))
            self._write(records)

        logger.info(
            "Saved result %s for %s/%s@%s (grade %s)",
            record.id, record.owner, record.repo, record.branch_name, record.grade,
        )
        return record

    def list(self, limit: int = 20, offset: int = 0) -> Tuple[List[StressResultRecord], int]:
        """
        Returns
        -------
        tuple[list[StressResultRecord], int]
            (page of records newest first, total record count)
        """
        limit = max(limit, 0)
        offset = max(offset, 0)
        with self._lock:
            records = self._load()
        newest_first = list(reversed(records))
        page = newest_first[offset:offset + limit]
        return [StressResultRecord.model_validate(r) for r in page], len(records)

    def get(self, result_id: str) -> StressResultRecord:
        with self._lock:
            records = self._load()
        for raw in records:
            if raw.get("id") == result_id:
                return StressResultRecord.model_validate(raw)
        raise NotFoundError("Result not found")


_store: Optional[ResultsStore] = None


def get_results_store() -> ResultsStore:
    """FastAPI dependency: process-wide store rooted at RESULTS_DIR."""
    global _store
    if _store is None:
        _store = ResultsStore(RESULTS_DIR)
    return _store
