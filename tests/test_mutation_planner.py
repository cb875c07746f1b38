"""
Mutation Planner Tests
======================
Greedy, shuffled, re-validated rule application with a best-effort bug count.
All randomness injected through seeded RandomSource instances.
"""
import pytest

from app.agents.mutation_catalog import MutationRule, RuleRegistry
from app.agents.mutation_planner import MutationPlanner
from app.agents.symptom_bank import SYMPTOM_TEMPLATES
from app.core.constants import NO_MUTATION_SENTINEL
from app.utils.random_source import RandomSource

COMPONENT = """import React from "react";

export function CartList({ items, user }) {
  const count = items.length;
  const first = items[0];
  return (
    <div>
      {user?.isAdmin && <AdminBar />}
      {items.map((item) => <li key={item.id}>{item.name}</li>)}
    </div>
  );
}
"""


@pytest.fixture
def planner():
    return MutationPlanner(RandomSource(seed=1234))


def test_scenario_low_level_single_bug(planner):
    result = planner.plan(COMPONENT, "src/CartList.tsx", stress_level="low", target_bug_count=1)
    assert len(result.changes) == 1
    assert result.content != COMPONENT
    assert len(result.symptoms) == 1


@pytest.mark.parametrize("seed", range(25))
def test_applicable_text_always_changes(seed):
    result = MutationPlanner(RandomSource(seed=seed)).plan(COMPONENT, "CartList.jsx", target_bug_count=3)
    assert 1 <= len(result.changes) <= 3
    assert NO_MUTATION_SENTINEL not in result.changes
    assert result.content != COMPONENT


@pytest.mark.parametrize("level", ["low", "medium", "high"])
def test_sampled_count_never_exceeds_level_max(level):
    maximum = {"low": 2, "medium": 3, "high": 3}[level]
    for seed in range(20):
        result = MutationPlanner(RandomSource(seed=seed)).plan(COMPONENT, "a.ts", stress_level=level)
        assert 1 <= len(result.changes) <= maximum


def test_no_applicable_rule_returns_sentinel(planner):
    content = "x = 1\ny = x + 2\n"
    result = planner.plan(content, "calc.py", target_bug_count=2)
    assert result.changes == [NO_MUTATION_SENTINEL]
    assert result.content == content
    assert len(result.symptoms) == 1
    assert result.symptoms[0] in SYMPTOM_TEMPLATES


def test_exhaustion_returns_fewer_changes(planner):
    content = "enabled = true\n"
    result = planner.plan(content, "flags.py", target_bug_count=3)
    assert result.changes == ["Changed 'true' to 'false' - affects visibility/display logic"]
    assert result.content == "enabled = false\n"


@pytest.mark.parametrize("seed", range(20))
def test_mutations_never_restore_original(seed):
    content = "a = true\nb = false\n"
    result = MutationPlanner(RandomSource(seed=seed)).plan(content, "flags.go", target_bug_count=2)
    assert result.content != content
    assert 1 <= len(result.changes) <= 2


def test_context_is_ignored():
    with_context = MutationPlanner(RandomSource(seed=5)).plan(COMPONENT, "a.tsx", context="the cart", target_bug_count=2)
    without_context = MutationPlanner(RandomSource(seed=5)).plan(COMPONENT, "a.tsx", target_bug_count=2)
    assert with_context == without_context


def test_seeded_runs_are_reproducible():
    first = MutationPlanner(RandomSource(seed=77)).plan(COMPONENT, "a.tsx", stress_level="high")
    second = MutationPlanner(RandomSource(seed=77)).plan(COMPONENT, "a.tsx", stress_level="high")
    assert first == second


def test_noop_rule_does_not_count_towards_target():
    noop = MutationRule("noop", "does nothing", lambda c: True, lambda c: c)
    real = MutationRule("append", "appends a marker", lambda c: True, lambda c: c + "!")
    registry = RuleRegistry("custom", [noop, real])
    for seed in range(10):
        result = MutationPlanner(RandomSource(seed=seed), registry=registry).plan("text", "f.py", target_bug_count=1)
        assert result.changes == ["appends a marker"]
        assert result.content == "text!"


def test_rule_is_revalidated_against_current_text():
    # "consume" removes the token "needs" relies on
    consume = MutationRule("consume", "removed token", lambda c: "TOKEN" in c, lambda c: c.replace("TOKEN", ""))
    needs = MutationRule("needs", "used token", lambda c: "TOKEN" in c, lambda c: c.replace("TOKEN", "T0KEN!"))
    registry = RuleRegistry("custom", [consume, needs])
    for seed in range(10):
        result = MutationPlanner(RandomSource(seed=seed), registry=registry).plan("a TOKEN b", "f.py", target_bug_count=2)
        assert len(result.changes) == 1


def test_symptoms_capped_at_three():
    rules = [
        MutationRule(f"r{i}", f"change {i}", lambda c: True, lambda c, i=i: c + str(i))
        for i in range(5)
    ]
    result = MutationPlanner(RandomSource(seed=2), registry=RuleRegistry("many", rules)).plan(
        "base", "f.py", target_bug_count=5
    )
    assert len(result.changes) == 5
    assert len(result.symptoms) == 3
    assert len(set(result.symptoms)) == 3
