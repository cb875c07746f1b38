"""
Path Utils
==========
Helpers for repository file paths supplied by the caller.

Responsibilities:
    - Extract the lower-cased extension of a repo-relative path
    - Decide whether a path is a source file eligible for stress testing
"""
from app.core.constants import ALLOWED_EXTENSIONS


def file_extension(path: str) -> str:
    """Lower-cased extension without the dot ('' when there is none)."""
    base = path.replace("\\", "/").rsplit("/", 1)[-1]
    if "." not in base:
        return ""
    return base.rsplit(".", 1)[-1].lower()


def is_code_file(path: str) -> bool:
    """True when the path has one of the allowed source-code extensions."""
    return file_extension(path) in ALLOWED_EXTENSIONS
