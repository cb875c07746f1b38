"""
Stress Levels
=============
Difficulty policy: stress level → bug-count range and tone guidance.

Leniency:
    Unknown or malformed level values are coerced to "medium" instead of
    raising. Request bodies come from the browser and are not trusted to
    carry a valid enum.

Bug Count:
    sample_bug_count() is the single source of "how many bugs". The stress
    route samples once and passes the number down to the generator and to
    the fallback planner, so both paths honour the same target.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from app.utils.random_source import RandomSource


class StressLevel(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


@dataclass(frozen=True)
class StressConfig:
    """Closed policy tuple for one stress level."""
    bug_count_min: int
    bug_count_max: int
    subtlety: str
    description: str


STRESS_CONFIGS: dict[StressLevel, StressConfig] = {
    StressLevel.LOW: StressConfig(
        bug_count_min=1,
        bug_count_max=2,
        subtlety="relatively obvious",
        description=(
            "The bugs should be somewhat noticeable - things like obvious operator "
            "mistakes, clear logic inversions, or simple typos in variable names. "
            "A junior developer should be able to spot them with careful review. "
            "Keep the code structure simple and don't add extra abstraction layers."
        ),
    ),
    StressLevel.MEDIUM: StressConfig(
        bug_count_min=2,
        bug_count_max=3,
        subtlety="subtle but findable",
        description=(
            "The bugs should require careful code review to find - off-by-one errors, "
            "missing awaits that cause Promise objects to be used as values, edge case "
            "failures. A mid-level developer should need to trace through the logic to "
            "find them. You SHOULD add 1-2 'data layer' helper functions that data "
            "passes through before being used - mimicking technical debt where someone "
            "added abstraction layers 'for future flexibility'. The bug can be hidden "
            "in these intermediate functions. All bugs must be deterministic and "
            "reproducible."
        ),
    ),
    StressLevel.HIGH: StressConfig(
        bug_count_min=2,
        bug_count_max=3,
        subtlety="deviously subtle",
        description=(
            "The bugs should be very hard to find but ALWAYS reproducible - subtle "
            "state mutations, edge cases with specific inputs, cascading errors where "
            "one bug masks another. Even senior developers should need debugging tools "
            "and careful analysis. You MUST add multiple 'data layer' functions that "
            "pipe data through 2-4 transformation steps before it reaches its "
            "destination - realistic 'legacy code' technical debt where data flows "
            "through normalizers, formatters, validators, mappers, etc. Hide bugs deep "
            "in these pipelines where a developer must trace the entire data flow to "
            "find them. This should mimic real legacy codebases with accumulated "
            "abstractions. IMPORTANT: All bugs must be 100% deterministic - no race "
            "conditions or timing-dependent issues."
        ),
    ),
}


def coerce_level(value: Any) -> StressLevel:
    """Map any input onto a StressLevel, defaulting to MEDIUM."""
    if isinstance(value, StressLevel):
        return value
    try:
        return StressLevel(value)
    except ValueError:
        return StressLevel.MEDIUM


def config_for(level: Any) -> StressConfig:
    """Return the policy tuple for a level (invalid levels → medium)."""
    return STRESS_CONFIGS[coerce_level(level)]


def sample_bug_count(
    level: Any,
    rng: Optional[RandomSource] = None,
    override: Optional[int] = None,
) -> int:
    """
    Decide how many bugs to introduce.

    Parameters
    ----------
    level : StressLevel or str
        Difficulty; invalid values behave like "medium".
    rng : RandomSource or None
        Source of randomness (fresh unseeded source if omitted).
    override : int or None
        Explicit target supplied by the caller, raised to at least 1.

    Returns
    -------
    int
        A count drawn uniformly from [bug_count_min, bug_count_max], or the override.
    """
    if override is not None:
        return max(1, override)
    config = config_for(level)
    rng = rng or RandomSource()
    return rng.randint(config.bug_count_min, config.bug_count_max)
