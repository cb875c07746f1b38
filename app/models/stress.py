"""
Stress Models
=============
Pydantic models for the mutation phase.

Fields (GeneratedStress):
    content   — full source text after mutation
    changes   — technical description of each injected bug (never shown to the player)
    symptoms  — QA-style bug reports describing what the player will observe

Fields (CandidateFile):
    path, content, sha, line_count — a fetched file that passed the
    extension and size checks; lives only for one request

Fields (FileResult):
    file     — path as supplied by the caller
    success  — True only for the one file that was mutated and written back
    changes / symptoms — set on success
    error    — skip reason or failure message otherwise
"""
from typing import Any, List, Optional

from pydantic import BaseModel


class GeneratedStress(BaseModel):
    content: str
    changes: List[str] = []
    symptoms: List[str] = []


class CandidateFile(BaseModel):
    path: str
    content: str
    sha: str
    line_count: int


class FileResult(BaseModel):
    file: str
    success: bool
    changes: Optional[List[str]] = None
    symptoms: Optional[List[str]] = None
    error: Optional[str] = None


class StressRequest(BaseModel):
    owner: Optional[str] = None
    repo: Optional[str] = None
    branch: Optional[str] = None
    files: Optional[List[str]] = None
    context: Optional[Any] = None
    difficulty: Optional[Any] = None


class StressResponse(BaseModel):
    message: str
    results: List[FileResult] = []
    symptoms: List[str] = []
