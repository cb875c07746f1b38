"""
Symptom Bank
============
Canned QA-style bug reports used when no generator-written symptom exists.

Symptoms are never derived from the technical change text: they describe
what a tester sees in the UI (action → expectation → actual) so the
player gets no hint about where the bug lives.
"""
from typing import List, Optional, Sequence

from app.utils.random_source import RandomSource

SYMPTOM_TEMPLATES: tuple[str, ...] = (
    "On the main list page: The last 2 items are completely missing. We have 10 items but only 8 show up on screen.",
    "In the search bar: The first letter of every search is being cut off. Typing 'Apple' searches for 'pple' instead.",
    "On the cards/list view: Every single item shows the same ID number. All 50 items display 'ID: 1001' even though they should be unique.",
    "In the user profile section: All names are showing as 'undefined'. The other fields load fine but names are blank.",
    "After loading the page: App crashes with white screen. Console shows 'Cannot read property of null' error.",
    "On the dashboard: All totals and prices show $0.00. We have items worth hundreds of dollars but everything displays as zero.",
    "In the item grid: Half the items are completely blank. Every other card (items 2, 4, 6, 8...) shows as empty.",
    "When viewing the list: Items that should be visible are hidden, and hidden items are showing. The display logic is completely inverted.",
    "On the counter display: Shows '3 items' but there are clearly 5 items on screen. The count is always 2 less than actual.",
    "In the text fields: The last few characters are cut off from every label. 'Description' shows as 'Descript', 'Username' shows as 'Userna'.",
)

MAX_FALLBACK_SYMPTOMS = 3


class FallbackSymptomBank:
    """Picks distinct templates by shuffling the pool and truncating."""

    def __init__(
        self,
        rng: Optional[RandomSource] = None,
        templates: Sequence[str] = SYMPTOM_TEMPLATES,
    ) -> None:
        self.rng = rng or RandomSource()
        self.templates = tuple(templates)

    def synthesize(self, changes: Sequence[str]) -> List[str]:
        """Return min(len(changes), 3) distinct templates."""
        count = min(len(changes), MAX_FALLBACK_SYMPTOMS)
        pool = list(self.templates)
        self.rng.shuffle(pool)
        return pool[:count]
