"""
Mutation Planner
================
Deterministic, dependency-free bug injection. This is the fallback path
behind the stress agent and must never fail.

Selection (greedy, order-randomised, re-validated):
    1. Filter the file's rule registry to rules whose predicate holds.
    2. Shuffle the candidates (Fisher-Yates via the injected RandomSource).
    3. Walk the shuffled list. Re-check each rule against the CURRENT text;
       apply it if it still holds and the result actually differs, record
       its description, stop once the target count is reached.
    4. If nothing applied, record the "no automatic changes" sentinel and
       return the content untouched.

Rules never roll back. A transform that would restore the original file
(e.g. true→false followed by false→true) is skipped, so the returned
content always differs from the input whenever a real change is listed.

Exhaustion:
    When fewer rules apply than the target count, fewer changes are
    returned. No error, no re-sampling.
"""
import logging
from typing import Any, List, Optional

from app.agents.mutation_catalog import RuleRegistry, rules_for
from app.agents.symptom_bank import FallbackSymptomBank
from app.core.constants import NO_MUTATION_SENTINEL
from app.core.stress_levels import StressLevel, sample_bug_count
from app.models.stress import GeneratedStress
from app.utils.random_source import RandomSource

logger = logging.getLogger(__name__)


class MutationPlanner:
    """
    Applies catalog rules to a single file.

    Parameters
    ----------
    rng : RandomSource or None
        Randomness for bug-count sampling, rule order and symptom choice.
    symptom_bank : FallbackSymptomBank or None
        Symptom source (shares rng when auto-created).
    registry : RuleRegistry or None
        Force a specific registry instead of choosing by file extension.
    """

    def __init__(
        self,
        rng: Optional[RandomSource] = None,
        symptom_bank: Optional[FallbackSymptomBank] = None,
        registry: Optional[RuleRegistry] = None,
    ) -> None:
        self.rng = rng or RandomSource()
        self.symptom_bank = symptom_bank or FallbackSymptomBank(self.rng)
        self.registry = registry

    def plan(
        self,
        content: str,
        filename: str,
        context: Optional[str] = None,
        stress_level: Any = StressLevel.MEDIUM,
        target_bug_count: Optional[int] = None,
    ) -> GeneratedStress:
        """
        Inject up to target_bug_count bugs into content.

        Parameters
        ----------
        content : str
            Original file content.
        filename : str
            Path of the file; its extension picks the rule registry.
        context : str or None
            Player focus hint. Accepted for parity with the generator, unused.
        stress_level : StressLevel or str
            Difficulty used to sample the bug count when no target is given.
        target_bug_count : int or None
            Explicit number of bugs (overrides the stress level range).

        Returns
        -------
        GeneratedStress
            Mutated content, applied change descriptions and fallback symptoms.
        """
        registry = self.registry or rules_for(filename)
        bug_count = sample_bug_count(stress_level, self.rng, override=target_bug_count)

        candidates = registry.applicable(content)
        self.rng.shuffle(candidates)

        changes: List[str] = []
        modified = content
        for rule in candidates:
            if len(changes) >= bug_count:
                break
            # Content may have changed since the candidate list was built
            if not rule.is_applicable(modified):
                continue
            new_content = rule.apply(modified)
            if new_content == modified or new_content == content:
                continue
            modified = new_content
            changes.append(rule.description)
            logger.debug("Applied mutation %s to %s", rule.name, filename)

        if not changes:
            logger.info("No catalog rule applied to %s (%s rules)", filename, registry.name)
            changes.append(NO_MUTATION_SENTINEL)
        else:
            logger.info(
                "Fallback planner applied %d/%d mutation(s) to %s",
                len(changes), bug_count, filename,
            )

        return GeneratedStress(
            content=modified,
            changes=changes,
            symptoms=self.symptom_bank.synthesize(changes),
        )
