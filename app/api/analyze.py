"""
POST /api/github/analyze
========================
Reviews the player's fix commit and returns feedback + verdict.

Response shape: {feedback: [...], summary, isPerfect}
"""
import logging

from fastapi import APIRouter, Depends

from app.agents.diff_analyzer import analyze_commit
from app.api.deps import get_github_service
from app.core.errors import NotFoundError, StressEngineError, ValidationError
from app.models.analysis import AnalyzeRequest, AnalyzeResponse
from app.services.github_service import GitHubService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/github", tags=["Analysis"])


@router.post(
    "/analyze",
    response_model=AnalyzeResponse,
    response_model_by_alias=True,
    response_model_exclude_none=True,
)
async def analyze_fix(
    body: AnalyzeRequest,
    github: GitHubService = Depends(get_github_service),
):
    if not body.owner or not body.repo or not body.sha:
        raise ValidationError("Missing owner, repo, or sha parameter")

    try:
        files = await github.fetch_commit_files(body.owner, body.repo, body.sha)
        return analyze_commit(files)
    except NotFoundError:
        raise
    except Exception as e:
        logger.error("Error analyzing commit %s on %s/%s: %s", body.sha, body.owner, body.repo, e, exc_info=True)
        raise StressEngineError("Failed to analyze commit") from e
