"""
GET /api/github/branches, GET /api/github/repos
Listing endpoints used by the branch picker. Payloads are passed through
from the source-control API unchanged.
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends

from app.api.deps import get_github_service
from app.core.errors import StressEngineError, ValidationError
from app.services.github_service import GitHubService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/github", tags=["Repositories"])


@router.get("/branches")
async def list_branches(
    owner: Optional[str] = None,
    repo: Optional[str] = None,
    github: GitHubService = Depends(get_github_service),
):
    if not owner or not repo:
        raise ValidationError("Missing owner or repo parameter")
    try:
        return await github.fetch_repo_branches(owner, repo)
    except Exception as e:
        logger.error("Error fetching branches for %s/%s: %s", owner, repo, e)
        raise StressEngineError("Failed to fetch branches") from e


@router.get("/repos")
async def list_repos(github: GitHubService = Depends(get_github_service)):
    try:
        return await github.fetch_user_repos()
    except Exception as e:
        logger.error("Error fetching repositories: %s", e)
        raise StressEngineError("Failed to fetch repositories") from e
