"""
Stress Agent
============
Produces the stressed version of one file.

Primary Path:
    Build the generation prompt (policy narrative, distinct categories,
    determinism, anti-disclosure, data-layer pipeline for medium/high),
    make exactly ONE generator call, parse the JSON reply.

Fallback Path:
    Any failure on the primary path (no generator configured, timeout,
    HTTP / transport error, unparseable or incomplete reply) degrades to
    the MutationPlanner with the same file, level and target count. The
    caller cannot tell which path produced the result.

Symptoms:
    A generator reply without symptoms gets FallbackSymptomBank templates.

The StressAgent does NOT:
    - Pick the file (that's file_selector's job)
    - Write anything back to the repository (that's the stress route's job)
"""
import logging
from typing import Any, Optional

from app.agents.mutation_planner import MutationPlanner
from app.agents.symptom_bank import FallbackSymptomBank
from app.core.config import CONTEXT_MAX_CHARS
from app.core.errors import GenerationResponseError, GenerationUnavailable
from app.core.stress_levels import StressLevel, coerce_level, sample_bug_count
from app.llm.client import GenerationClient, parse_generation_response
from app.llm.prompts import build_stress_prompt
from app.llm.router import get_generation_client
from app.models.stress import GeneratedStress
from app.utils.random_source import RandomSource

logger = logging.getLogger(__name__)


class StressAgent:
    """
    Injects bugs into a file, preferring the external generator.

    Parameters
    ----------
    client : GenerationClient or None
        Generator (auto-selected from configuration if not provided).
    planner : MutationPlanner or None
        Deterministic fallback (shares rng when auto-created).
    rng : RandomSource or None
        Randomness for bug count, prompt seed and symptoms.
    """

    def __init__(
        self,
        client: Optional[GenerationClient] = None,
        planner: Optional[MutationPlanner] = None,
        rng: Optional[RandomSource] = None,
    ) -> None:
        self.rng = rng or RandomSource()
        self.client = client or get_generation_client()
        self.symptom_bank = FallbackSymptomBank(self.rng)
        self.planner = planner or MutationPlanner(self.rng, self.symptom_bank)

    async def generate(
        self,
        content: str,
        filename: str,
        context: Optional[str] = None,
        stress_level: Any = StressLevel.MEDIUM,
        target_bug_count: Optional[int] = None,
    ) -> GeneratedStress:
        """
        Introduce bugs into one file.

        Parameters
        ----------
        content : str
            Original file content.
        filename : str
            Path of the file.
        context : str or None
            Player focus hint; truncated to CONTEXT_MAX_CHARS.
        stress_level : StressLevel or str
            Difficulty; invalid values behave like "medium".
        target_bug_count : int or None
            Explicit bug count (overrides the level's range).

        Returns
        -------
        GeneratedStress
            Never raises for generator problems.
        """
        level = coerce_level(stress_level)
        if context:
            context = context[:CONTEXT_MAX_CHARS]

        if not self.client.available:
            logger.info("Generator unavailable, using fallback stress for %s", filename)
            return self._fallback(content, filename, context, level, target_bug_count)

        bug_count = sample_bug_count(level, self.rng, override=target_bug_count)
        prompt = build_stress_prompt(
            content=content,
            filename=filename,
            bug_count=bug_count,
            seed=self.rng.token(),
            context=context,
            stress_level=level,
        )

        try:
            raw = await self.client.generate_text(prompt)
            result = parse_generation_response(raw)
            if result.content == content:
                raise GenerationResponseError("Generator returned the file unchanged")
        except GenerationUnavailable as e:
            logger.warning("AI stress generation failed for %s: %s", filename, e)
            return self._fallback(content, filename, context, level, target_bug_count)
        except Exception as e:
            logger.warning(
                "AI stress generation raised unexpectedly for %s: %s", filename, e,
                exc_info=True,
            )
            return self._fallback(content, filename, context, level, target_bug_count)

        if not result.symptoms:
            result.symptoms = self.symptom_bank.synthesize(result.changes)

        logger.info(
            "Generator introduced %d change(s) into %s (%s)",
            len(result.changes), filename, level.value,
        )
        return result

    def _fallback(
        self,
        content: str,
        filename: str,
        context: Optional[str],
        level: StressLevel,
        target_bug_count: Optional[int],
    ) -> GeneratedStress:
        return self.planner.plan(
            content,
            filename,
            context=context,
            stress_level=level,
            target_bug_count=target_bug_count,
        )

    async def close(self) -> None:
        await self.client.close()
