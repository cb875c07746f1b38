"""
Diff Analyzer
=============
Reviews the player's fix commit for anti-patterns left behind.

NO LLM AND NO RANDOMNESS HERE. Identical patches always produce identical
feedback and the same verdict.

Per file with a non-empty patch:
    added   = lines starting with "+" (not "+++"), prefix stripped
    removed = lines starting with "-" (not "---"), prefix stripped
Detectors, in order, over the joined added text:
    1. Pass-through function / arrow (body is just `return <param>`) → warning
    2. Empty function / arrow body                                  → warning
    3. Removed function still called in added text                  → hint
    4. console.log left behind                                      → info
    5. TODO / FIXME comment                                         → info
    6. Commented-out statement                                      → hint

Verdict:
    is_perfect = no warning and no hint (info never disqualifies).
    When perfect, a "Clean fix!" success item is prepended.
"""
import logging
import re
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Tuple

from app.models.analysis import AnalysisFeedback, AnalyzeResponse, CommitFile

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Detector patterns
# ---------------------------------------------------------------------------
_PASS_THROUGH_FUNCTION_RE = re.compile(r"function\s+(\w+)\s*\(([^)]*)\)\s*{\s*return\s+(\w+)\s*;?\s*}")
_PASS_THROUGH_ARROW_RE = re.compile(
    r"const\s+(\w+)\s*=\s*\(([^)]*)\)\s*=>\s*(\w+)\s*;?\s*$", re.MULTILINE
)
_EMPTY_FUNCTION_RE = re.compile(r"function\s+(\w+)\s*\([^)]*\)\s*{\s*}")
_EMPTY_ARROW_RE = re.compile(r"const\s+(\w+)\s*=\s*\([^)]*\)\s*=>\s*{\s*}")
_REMOVED_FUNCTION_RE = re.compile(r"function\s+(\w+)")
_TODO_RE = re.compile(r"//\s*(TODO|FIXME)", re.IGNORECASE)
_COMMENTED_CODE_RE = re.compile(r"//\s*(const|let|var|function|return|if|for|while)")


# ---------------------------------------------------------------------------
# Summary decision table
# ---------------------------------------------------------------------------
SUMMARY_CLEAN = "Excellent work! Your fix looks clean and complete."
SUMMARY_MINOR_NOTES = "Good job! Your fix is solid with just a few minor notes."
SUMMARY_WARNINGS = "Your fix works, but there are some issues to consider."
SUMMARY_SUGGESTIONS = "Your fix is complete with some suggestions for improvement."

CLEAN_FIX_FEEDBACK = AnalysisFeedback(
    type="success",
    title="Clean fix!",
    message="Your code changes look good. No unnecessary code or common issues detected.",
)


@dataclass
class PatchLines:
    """Added / removed lines of one unified-diff fragment, prefixes stripped."""
    added: List[str] = field(default_factory=list)
    removed: List[str] = field(default_factory=list)

    @property
    def added_code(self) -> str:
        return "\n".join(self.added)

    @property
    def removed_code(self) -> str:
        return "\n".join(self.removed)


def split_patch(patch: str) -> PatchLines:
    """Separate a patch into added and removed lines."""
    lines = PatchLines()
    for line in patch.split("\n"):
        if line.startswith("+") and not line.startswith("+++"):
            lines.added.append(line[1:])
        elif line.startswith("-") and not line.startswith("---"):
            lines.removed.append(line[1:])
    return lines


def _pass_through_message(name: str) -> str:
    return (
        f"The function '{name}' appears to just return its input without doing anything. "
        "Consider removing it entirely if it's not needed."
    )


def _empty_function_message(name: str) -> str:
    return f"The function '{name}' has an empty body. Did you mean to implement it or remove it?"


def _find_pass_through(pattern: re.Pattern, code: str) -> Optional[str]:
    """Name of the first function whose body only returns one of its own parameters."""
    for match in pattern.finditer(code):
        name, params, returned = match.groups()
        param_names = [p.strip().split("=")[0].strip() for p in params.split(",")]
        if returned in param_names:
            return name
    return None


def analyze_file_patch(file: CommitFile) -> List[AnalysisFeedback]:
    """
    Run every detector over one file's patch.

    Parameters
    ----------
    file : CommitFile
        Filename plus unified-diff fragment (None / empty → no feedback).

    Returns
    -------
    List[AnalysisFeedback]
        Feedback items in detector order, each tagged with the filename.
    """
    feedback: List[AnalysisFeedback] = []
    if not file.patch:
        return feedback

    lines = split_patch(file.patch)
    added_code = lines.added_code

    def add(kind: str, title: str, message: str) -> None:
        feedback.append(AnalysisFeedback(type=kind, title=title, message=message, file=file.filename))

    # 1. Pass-through functions (arrow form only reported without a function form)
    pass_through = _find_pass_through(_PASS_THROUGH_FUNCTION_RE, added_code)
    if pass_through is None:
        pass_through = _find_pass_through(_PASS_THROUGH_ARROW_RE, added_code)
    if pass_through is not None:
        add("warning", "Pass-through function detected", _pass_through_message(pass_through))

    # 2. Empty bodies
    empty_function = _EMPTY_FUNCTION_RE.search(added_code)
    if empty_function:
        add("warning", "Empty function", _empty_function_message(empty_function.group(1)))
    empty_arrow = _EMPTY_ARROW_RE.search(added_code)
    if empty_arrow:
        add("warning", "Empty function", _empty_function_message(empty_arrow.group(1)))

    # 3. Orphaned calls to removed functions
    for match in _REMOVED_FUNCTION_RE.finditer(lines.removed_code):
        func_name = match.group(1)
        if re.search(r"\b" + re.escape(func_name) + r"\s*\(", added_code):
            add(
                "hint",
                "Function call may be orphaned",
                f"You removed the '{func_name}' function but it appears to still be called. "
                "Make sure all references are updated.",
            )

    # 4. Debug statements
    if "console.log" in added_code:
        add(
            "info",
            "Debug statement found",
            "You left console.log statements in your code. Consider removing them for production code.",
        )

    # 5. TODO / FIXME
    if _TODO_RE.search(added_code):
        add(
            "info",
            "TODO/FIXME comment found",
            "You have TODO or FIXME comments in your code. Make sure these are intentional.",
        )

    # 6. Commented-out code
    if _COMMENTED_CODE_RE.search(added_code):
        add(
            "hint",
            "Commented out code",
            "It looks like you left some code commented out. Consider removing it if it's not needed.",
        )

    return feedback


def summarize(feedback: List[AnalysisFeedback]) -> Tuple[str, bool]:
    """Pick the summary line and verdict for accumulated feedback."""
    has_warnings = any(item.type == "warning" for item in feedback)
    has_hints = any(item.type == "hint" for item in feedback)
    is_perfect = not has_warnings and not has_hints

    if is_perfect and not feedback:
        summary = SUMMARY_CLEAN
    elif is_perfect:
        summary = SUMMARY_MINOR_NOTES
    elif has_warnings:
        summary = SUMMARY_WARNINGS
    else:
        summary = SUMMARY_SUGGESTIONS
    return summary, is_perfect


def analyze_commit(files: Iterable[CommitFile]) -> AnalyzeResponse:
    """
    Analyze every file of a commit and render the verdict.

    Returns
    -------
    AnalyzeResponse
        feedback (success item first when perfect), summary, is_perfect.
    """
    feedback: List[AnalysisFeedback] = []
    file_count = 0
    for file in files:
        file_count += 1
        feedback.extend(analyze_file_patch(file))

    summary, is_perfect = summarize(feedback)
    if is_perfect:
        feedback.insert(0, CLEAN_FIX_FEEDBACK.model_copy())

    logger.info(
        "Analyzed %d file(s): %d feedback item(s), perfect=%s",
        file_count, len(feedback), is_perfect,
    )
    return AnalyzeResponse(feedback=feedback, summary=summary, is_perfect=is_perfect)
