"""
/api/results
============
Persist and read back completed debugging challenges.

    POST /api/results              → {success, resultId}
    GET  /api/results?limit&offset → {results, total, limit, offset} (newest first)
    GET  /api/results/{result_id}  → {result} (404 if unknown)
"""
import logging

from fastapi import APIRouter, Depends

from app.api.deps import get_access_token
from app.models.stress_result import SaveResultRequest
from app.services.results_store import ResultsStore, get_results_store

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/results", tags=["Results"], dependencies=[Depends(get_access_token)])


@router.post("")
async def save_result(
    body: SaveResultRequest,
    store: ResultsStore = Depends(get_results_store),
):
    record = store.save(body)
    return {"success": True, "resultId": record.id}


@router.get("")
async def list_results(
    limit: int = 20,
    offset: int = 0,
    store: ResultsStore = Depends(get_results_store),
):
    records, total = store.list(limit=limit, offset=offset)
    return {
        "results": [r.model_dump(by_alias=True) for r in records],
        "total": total,
        "limit": limit,
        "offset": offset,
    }


@router.get("/{result_id}")
async def get_result(
    result_id: str,
    store: ResultsStore = Depends(get_results_store),
):
    record = store.get(result_id)
    return {"result": record.model_dump(by_alias=True)}
