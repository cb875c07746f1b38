"""
POST /api/github/stress
=======================
Picks ONE of the caller's files, injects bugs into it and commits the
result back to the branch.

Flow:
    1. Validate body (owner, repo, branch, files[])
    2. Coerce difficulty, truncate context, sample the bug count once
    3. FileSelector → one CandidateFile (others recorded as skipped)
    4. StressAgent → GeneratedStress (generator or deterministic fallback)
    5. Write back only when changes exist and the content differs
    6. Deduplicate symptoms, summarise
"""
import logging
from typing import List

from fastapi import APIRouter, Depends

from app.agents.file_selector import FileSelector
from app.agents.stress_agent import StressAgent
from app.api.deps import get_github_service, get_rng, get_stress_agent
from app.core.config import CONTEXT_MAX_CHARS
from app.core.constants import COMMIT_MESSAGE, NO_CHANGES_MADE, NO_PROCESSABLE_FILES, STRESS_SUMMARY
from app.core.errors import ValidationError
from app.core.stress_levels import coerce_level, sample_bug_count
from app.models.stress import FileResult, StressRequest, StressResponse
from app.services.github_service import GitHubService
from app.utils.random_source import RandomSource

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/github", tags=["Stress"])


def _dedupe(items: List[str]) -> List[str]:
    seen = set()
    unique = []
    for item in items:
        if item not in seen:
            seen.add(item)
            unique.append(item)
    return unique


@router.post("/stress", response_model=StressResponse, response_model_exclude_none=True)
async def stress_files(
    body: StressRequest,
    github: GitHubService = Depends(get_github_service),
    agent: StressAgent = Depends(get_stress_agent),
    rng: RandomSource = Depends(get_rng),
):
    if not body.owner or not body.repo or not body.branch or body.files is None:
        raise ValidationError("Missing required fields: owner, repo, branch, files")

    context = body.context[:CONTEXT_MAX_CHARS] if isinstance(body.context, str) else None
    level = coerce_level(body.difficulty)
    bug_count = sample_bug_count(level, rng)
    logger.info(
        "Stress request for %s/%s@%s: %d file(s), level=%s, bugs=%d",
        body.owner, body.repo, body.branch, len(body.files), level.value, bug_count,
    )

    selector = FileSelector(github, rng)
    selection = await selector.select(body.files, body.owner, body.repo, body.branch)
    if selection.selected is None:
        return StressResponse(message=NO_PROCESSABLE_FILES, results=selection.results, symptoms=[])

    results = selection.results
    all_symptoms: List[str] = []
    selected = selection.selected
    try:
        stressed = await agent.generate(
            selected.content,
            selected.path,
            context=context,
            stress_level=level,
            target_bug_count=bug_count,
        )
        if stressed.changes and stressed.content != selected.content:
            await github.update_file(
                body.owner,
                body.repo,
                selected.path,
                stressed.content,
                COMMIT_MESSAGE.format(path=selected.path),
                selected.sha,
                body.branch,
            )
            results.append(FileResult(
                file=selected.path,
                success=True,
                changes=stressed.changes,
                symptoms=stressed.symptoms,
            ))
            all_symptoms.extend(stressed.symptoms)
        else:
            results.append(FileResult(file=selected.path, success=False, error=NO_CHANGES_MADE))
    except Exception as e:
        logger.warning("Stressing %s failed: %s", selected.path, e, exc_info=True)
        results.append(FileResult(file=selected.path, success=False, error=str(e) or "Unknown error"))

    success_count = sum(1 for r in results if r.success)
    return StressResponse(
        message=STRESS_SUMMARY.format(success_count=success_count, total=len(body.files)),
        results=results,
        symptoms=_dedupe(all_symptoms),
    )
