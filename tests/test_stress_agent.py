"""
Stress Agent Tests
==================
Primary generator path vs deterministic fallback.
Generator clients are mocked; randomness is seeded.
"""
import asyncio
import json
from unittest.mock import AsyncMock, MagicMock

import pytest

from app.agents.mutation_planner import MutationPlanner
from app.agents.stress_agent import StressAgent
from app.agents.symptom_bank import SYMPTOM_TEMPLATES
from app.core.errors import GenerationUnavailable
from app.llm.client import NullGenerationClient
from app.llm.prompts import build_stress_prompt
from app.utils.random_source import RandomSource

SOURCE = """export async function loadUsers(api) {
  const users = await api.fetchUsers();
  return users.map((u) => ({ id: u.id, name: u.name }));
}
"""


def _run(coro):
    return asyncio.run(coro)


def _mock_client(reply=None, error=None):
    client = MagicMock()
    client.available = True
    client.generate_text = AsyncMock(return_value=reply, side_effect=error)
    client.close = AsyncMock()
    return client


class TestFallbackPath:
    def test_null_client_matches_planner_exactly(self):
        agent = StressAgent(client=NullGenerationClient(), rng=RandomSource(seed=21))
        result = _run(agent.generate(SOURCE, "users.ts", stress_level="medium", target_bug_count=2))

        expected = MutationPlanner(RandomSource(seed=21)).plan(SOURCE, "users.ts", target_bug_count=2)
        assert result == expected

    @pytest.mark.parametrize("error", [
        GenerationUnavailable("timed out"),
        RuntimeError("unexpected"),
        ValueError("bad"),
    ])
    def test_throwing_client_falls_back(self, error):
        client = _mock_client(error=error)
        agent = StressAgent(client=client, rng=RandomSource(seed=3))
        result = _run(agent.generate(SOURCE, "users.ts", target_bug_count=2))

        client.generate_text.assert_awaited_once()
        assert 1 <= len(result.changes) <= 2
        assert result.content != SOURCE
        assert 1 <= len(result.symptoms) <= 3
        assert all(s in SYMPTOM_TEMPLATES for s in result.symptoms)

    @pytest.mark.parametrize("reply", [
        "I can't help with that.",
        json.dumps({"modifiedCode": "x"}),
        json.dumps({"modifiedCode": "x", "changes": []}),
    ])
    def test_unusable_reply_falls_back(self, reply):
        agent = StressAgent(client=_mock_client(reply=reply), rng=RandomSource(seed=3))
        result = _run(agent.generate(SOURCE, "users.ts", target_bug_count=1))
        assert result.content != "x"
        assert len(result.changes) == 1

    def test_unchanged_reply_falls_back(self):
        reply = json.dumps({"modifiedCode": SOURCE, "changes": ["Changed nothing"]})
        agent = StressAgent(client=_mock_client(reply=reply), rng=RandomSource(seed=3))
        result = _run(agent.generate(SOURCE, "users.ts", target_bug_count=1))
        assert result.content != SOURCE
        assert result.changes != ["Changed nothing"]
        assert len(result.changes) == 1

    def test_fallback_for_file_with_no_rules_returns_sentinel(self):
        agent = StressAgent(client=NullGenerationClient(), rng=RandomSource(seed=3))
        result = _run(agent.generate("x = 1\n", "calc.py"))
        assert result.content == "x = 1\n"
        assert result.changes == ["No automatic changes could be applied - file may need manual review"]


class TestGeneratorPath:
    def test_valid_reply_is_used(self):
        reply = json.dumps({
            "modifiedCode": "BROKEN",
            "changes": ["one", "two"],
            "symptoms": ["Users list shows one user fewer than expected."],
        })
        agent = StressAgent(client=_mock_client(reply=reply), rng=RandomSource(seed=3))
        result = _run(agent.generate(SOURCE, "users.ts", target_bug_count=2))

        assert result.content == "BROKEN"
        assert result.changes == ["one", "two"]
        assert result.symptoms == ["Users list shows one user fewer than expected."]

    def test_missing_symptoms_filled_from_bank(self):
        reply = "```json\n" + json.dumps({"modifiedCode": "BROKEN", "changes": ["a", "b"]}) + "\n```"
        agent = StressAgent(client=_mock_client(reply=reply), rng=RandomSource(seed=3))
        result = _run(agent.generate(SOURCE, "users.ts"))

        assert result.content == "BROKEN"
        assert len(result.symptoms) == 2
        assert all(s in SYMPTOM_TEMPLATES for s in result.symptoms)

    def test_prompt_carries_target_count_and_truncated_context(self):
        client = _mock_client(reply=json.dumps({"modifiedCode": "B", "changes": ["a"], "symptoms": ["s"]}))
        agent = StressAgent(client=client, rng=RandomSource(seed=3))
        _run(agent.generate(SOURCE, "users.ts", context="c" * 250, stress_level="high", target_bug_count=3))

        prompt = client.generate_text.await_args.args[0]
        assert "Number of bugs to introduce: 3 (stress level: high)" in prompt
        assert 'specifically test: "' + "c" * 200 + '"' in prompt
        assert "c" * 201 not in prompt
        assert "FILENAME: users.ts" in prompt

    def test_exactly_one_generator_call(self):
        client = _mock_client(reply=json.dumps({"modifiedCode": "B", "changes": ["a"], "symptoms": ["s"]}))
        agent = StressAgent(client=client, rng=RandomSource(seed=3))
        _run(agent.generate(SOURCE, "users.ts"))
        assert client.generate_text.await_count == 1

    def test_close_closes_client(self):
        client = _mock_client(reply="{}")
        _run(StressAgent(client=client).close())
        client.close.assert_awaited_once()


class TestPrompt:
    def test_low_level_has_no_data_layer_section(self):
        prompt = build_stress_prompt(SOURCE, "a.ts", bug_count=1, seed="abc", stress_level="low")
        assert "DATA LAYER" not in prompt
        assert "relatively obvious" in prompt

    @pytest.mark.parametrize("level", ["medium", "high"])
    def test_medium_and_high_add_data_layer(self, level):
        prompt = build_stress_prompt(SOURCE, "a.ts", bug_count=2, seed="abc", stress_level=level)
        assert "DATA LAYER" in prompt
        assert "1-4 chained data-layer" in prompt

    def test_no_focus_without_context(self):
        prompt = build_stress_prompt(SOURCE, "a.ts", bug_count=2, seed="abc")
        assert "FOCUS AREA" not in prompt
        assert "DO NOT REVEAL BUG LOCATIONS" in prompt
        assert "DETERMINISTIC" in prompt
        assert '"modifiedCode"' in prompt
