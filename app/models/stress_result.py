"""
Stress Result Model
===================
A completed debugging challenge, saved after the player submits a fix.

Required on save:
    owner, repo, branch_name, grade, time_ms, bug_count, stress_level,
    start_commit_sha, complete_commit_sha

Wire names are camelCase (branchName, timeMs, ...) to match the frontend.
"""
from typing import List, Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from app.models.analysis import AnalysisFeedback

REQUIRED_RESULT_FIELDS = (
    "owner", "repo", "branchName", "grade", "timeMs",
    "bugCount", "stressLevel", "startCommitSha", "completeCommitSha",
)


class SaveResultRequest(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    owner: Optional[str] = None
    repo: Optional[str] = None
    branch_name: Optional[str] = None
    grade: Optional[str] = None
    time_ms: Optional[int] = None
    bug_count: Optional[int] = None
    stress_level: Optional[str] = None
    start_commit_sha: Optional[str] = None
    complete_commit_sha: Optional[str] = None

    symptoms: List[str] = []
    files_buggered: List[str] = []
    changes: List[str] = []

    analysis_summary: Optional[str] = None
    analysis_is_perfect: bool = False
    analysis_feedback: Optional[List[AnalysisFeedback]] = None


class StressResultRecord(SaveResultRequest):
    id: str
    created_at: str
