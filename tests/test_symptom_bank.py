from app.agents.symptom_bank import MAX_FALLBACK_SYMPTOMS, SYMPTOM_TEMPLATES, FallbackSymptomBank
from app.utils.random_source import RandomSource


def test_template_pool():
    assert len(SYMPTOM_TEMPLATES) == 10
    assert len(set(SYMPTOM_TEMPLATES)) == 10


def test_one_symptom_per_change_up_to_cap():
    bank = FallbackSymptomBank(RandomSource(seed=4))
    assert len(bank.synthesize(["a"])) == 1
    assert len(bank.synthesize(["a", "b"])) == 2
    assert len(bank.synthesize(["a", "b", "c", "d", "e"])) == MAX_FALLBACK_SYMPTOMS


def test_no_changes_no_symptoms():
    assert FallbackSymptomBank(RandomSource(seed=4)).synthesize([]) == []


def test_symptoms_are_distinct_templates():
    symptoms = FallbackSymptomBank(RandomSource(seed=10)).synthesize(["x"] * 3)
    assert len(set(symptoms)) == 3
    assert all(s in SYMPTOM_TEMPLATES for s in symptoms)


def test_symptoms_never_mention_change_text():
    change = "Changed .map() to .forEach() - returns undefined instead of array"
    for seed in range(10):
        for symptom in FallbackSymptomBank(RandomSource(seed=seed)).synthesize([change]):
            assert change not in symptom


def test_template_pool_is_not_mutated():
    bank = FallbackSymptomBank(RandomSource(seed=1))
    bank.synthesize(["a", "b", "c"])
    assert bank.templates == SYMPTOM_TEMPLATES


def test_seeded_choice_is_reproducible():
    a = FallbackSymptomBank(RandomSource(seed=6)).synthesize(["a", "b"])
    b = FallbackSymptomBank(RandomSource(seed=6)).synthesize(["a", "b"])
    assert a == b
