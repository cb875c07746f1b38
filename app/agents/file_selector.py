"""
File Selector
=============
Filters the caller's candidate paths and picks exactly ONE file to stress.

Filtering (per path, in caller order):
    1. Extension outside ALLOWED_EXTENSIONS → "Skipped non-code file" (no fetch)
    2. Fetch content + sha from the source-control collaborator
       (fetch failure → recorded on that path, other paths continue)
    3. Line count (newline split) above MAX_FILE_LINES_SINGLE → size skip

Selection:
    One index drawn uniformly from the eligible files. Every other eligible
    file is marked "Not selected for stress testing" and is never fetched
    again or mutated.

Size Ceiling:
    Exactly one file is ever mutated per request, so the single-file
    ceiling applies no matter how many candidates were supplied.
    MAX_FILE_LINES_MULTIPLE exists in configuration and is not consulted.

Side Effects:
    Read-only fetches. Nothing is written here.
"""
import logging
from dataclasses import dataclass, field
from typing import List, Optional, Protocol, Sequence, Tuple

from app.core.config import MAX_FILE_LINES_SINGLE
from app.core.constants import NOT_SELECTED, SKIPPED_NON_CODE, SKIPPED_TOO_LARGE
from app.models.stress import CandidateFile, FileResult
from app.utils.path_utils import is_code_file
from app.utils.random_source import RandomSource

logger = logging.getLogger(__name__)


class FileFetcher(Protocol):
    async def fetch_file_content(
        self, owner: str, repo: str, path: str, ref: str
    ) -> Tuple[str, str]:
        ...


@dataclass
class SelectionResult:
    """Outcome of filtering + choosing."""
    selected: Optional[CandidateFile] = None
    results: List[FileResult] = field(default_factory=list)
    eligible_count: int = 0


class FileSelector:
    """
    Parameters
    ----------
    fetcher : FileFetcher
        Source-control collaborator (GitHubService in production).
    rng : RandomSource or None
        Randomness for the single uniform pick.
    max_file_lines : int
        Per-file line ceiling (defaults to MAX_FILE_LINES_SINGLE).
    """

    def __init__(
        self,
        fetcher: FileFetcher,
        rng: Optional[RandomSource] = None,
        max_file_lines: int = MAX_FILE_LINES_SINGLE,
    ) -> None:
        self.fetcher = fetcher
        self.rng = rng or RandomSource()
        self.max_file_lines = max_file_lines

    async def collect_candidates(
        self,
        files: Sequence[str],
        owner: str,
        repo: str,
        branch: str,
    ) -> Tuple[List[CandidateFile], List[FileResult]]:
        """Fetch and filter every path. Returns (eligible, skip results)."""
        eligible: List[CandidateFile] = []
        results: List[FileResult] = []

        for path in files:
            if not is_code_file(path):
                results.append(FileResult(file=path, success=False, error=SKIPPED_NON_CODE))
                continue

            try:
                content, sha = await self.fetcher.fetch_file_content(owner, repo, path, branch)
            except Exception as e:
                logger.warning("Could not fetch %s from %s/%s@%s: %s", path, owner, repo, branch, e)
                results.append(FileResult(file=path, success=False, error=str(e) or "Unknown error"))
                continue

            line_count = len(content.split("\n"))
            if line_count > self.max_file_lines:
                logger.info("Skipping %s: %d lines exceeds %d", path, line_count, self.max_file_lines)
                results.append(FileResult(
                    file=path,
                    success=False,
                    error=SKIPPED_TOO_LARGE.format(line_count=line_count, max_lines=self.max_file_lines),
                ))
                continue

            eligible.append(CandidateFile(path=path, content=content, sha=sha, line_count=line_count))

        return eligible, results

    async def select(
        self,
        files: Sequence[str],
        owner: str,
        repo: str,
        branch: str,
    ) -> SelectionResult:
        """
        Filter candidates and choose one.

        Returns
        -------
        SelectionResult
            selected is None when nothing was eligible; results holds one
            entry for every path that was NOT selected.
        """
        eligible, results = await self.collect_candidates(files, owner, repo, branch)
        if not eligible:
            logger.info("No processable files among %d candidate(s)", len(files))
            return SelectionResult(selected=None, results=results, eligible_count=0)

        chosen = self.rng.next_int(len(eligible))
        for index, candidate in enumerate(eligible):
            if index != chosen:
                results.append(FileResult(file=candidate.path, success=False, error=NOT_SELECTED))

        selected = eligible[chosen]
        logger.info(
            "Selected %s (%d lines) out of %d eligible file(s)",
            selected.path, selected.line_count, len(eligible),
        )
        return SelectionResult(selected=selected, results=results, eligible_count=len(eligible))
