"""
Analysis Models
===============
Pydantic models for the fix-review phase.

Fields (AnalysisFeedback):
    type     — "success" | "warning" | "info" | "hint"
    title    — short heading shown on the feedback card
    message  — explanation for the player
    file     — source file the observation came from (absent on the synthetic success item)

Verdict:
    is_perfect is True when no warning and no hint is present; info items
    never disqualify a fix. Serialised as "isPerfect".
"""
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

FeedbackType = Literal["success", "warning", "info", "hint"]


class AnalysisFeedback(BaseModel):
    type: FeedbackType
    title: str
    message: str
    file: Optional[str] = None


class CommitFile(BaseModel):
    """One file of a commit as returned by the source-control API."""
    filename: str
    patch: Optional[str] = None


class AnalyzeRequest(BaseModel):
    owner: Optional[str] = None
    repo: Optional[str] = None
    sha: Optional[str] = None


class AnalyzeResponse(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    feedback: List[AnalysisFeedback] = []
    summary: str
    is_perfect: bool
