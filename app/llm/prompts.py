"""
LLM Prompts
===========
Prompt construction for the stress agent's bug generator.

Prompt Design Rules:
    - Narrative guidance and subtlety come from the stress level policy
    - N bugs → N DIFFERENT bug categories, never two from one family
    - Determinism: no timing / race-dependent defects, every bug reproduces
    - Anti-disclosure: no comments or naming that point at a bug
    - MEDIUM / HIGH: route data through 1-4 chained "data layer" helpers
      and hide a bug inside one stage
    - Reply is ONE JSON object: modifiedCode, changes, symptoms
    - Symptoms read like tester bug reports and never name code
"""
from typing import Any, Optional

from app.core.stress_levels import StressLevel, coerce_level, config_for


# ---------------------------------------------------------------------------
# Static sections
# ---------------------------------------------------------------------------
ANTI_DISCLOSURE_RULES = """CRITICAL - DO NOT REVEAL BUG LOCATIONS:
- Do NOT add comments near bugs like "// bug here" or "// TODO: fix this"
- Do NOT add comments that hint at what was changed
- Do NOT make the bugs obvious through naming or comments
- You MAY add realistic developer comments (like normal code would have), but these must NOT reveal the bug location
- The goal is for the developer to FIND the bugs through debugging, not through reading comments"""

SCENARIO = """THE SCENARIO - A careless developer:
This is for a learning game. Imagine the code was written by a careless, sloppy developer who:
- Never writes tests or double-checks their work
- Copies and pastes code without understanding it
- Makes "quick fixes" that break other things
- Over-engineers simple solutions
- Leaves half-finished refactors
- Doesn't handle edge cases
- Gets confused by their own code
- Makes typos and doesn't proofread

The bugs can be somewhat over-the-top - this is a game after all! Just keep a small thread of plausibility.
Think: "a bad developer COULD have done this" rather than "a good developer might accidentally do this\""""

DETERMINISM_RULES = """CRITICAL - BUGS MUST BE DETERMINISTIC:
- Every bug MUST reproduce 100% of the time under the same conditions
- NO race conditions, timing-dependent bugs, or intermittent failures
- NO bugs that "sometimes" happen or depend on execution speed
- The bug should fail the SAME way every time the code runs with the same input
- Users need to be able to reliably reproduce and debug the issue"""

BUG_CATEGORY_MENU = """=== HIGHEST PRIORITY: DATA VISIBILITY BUGS (pick from these first!) ===
These bugs cause OBVIOUS, VISIBLE problems that users notice immediately:

STRING/TEXT CORRUPTION (use MAX 1 per file):
- Reverse string order, wrong casing, removed or replaced spaces
- Wrong string method, wrong interpolated variable, wrong separator
- Truncate strings at the wrong position (not just start/end)

DATA DISAPPEARING (use MAX 1 per file):
- Slice / splice / filter that drops items (including from the middle)
- Reduce with wrong accumulator or initial value, find with wrong comparison
- Return empty array/undefined/null for certain conditions

ALL ITEMS SHOW SAME VALUE (use MAX 1 per file):
- Every item uses the first item's value, loop variable misuse
- Value cached outside a loop, shared default parameter, wrong closure capture

DATA SHOWING AS UNDEFINED/NULL (use MAX 1 per file):
- Property typo (USE SPARINGLY), wrong destructuring, returning undefined
- Optional chaining or nullish coalescing used incorrectly

PROPERTY DELETION/NULL POINTER (use MAX 1 per file):
- Delete / null out a property or reassign an object before use
- Clear an array before iterating, overwrite a parameter before using it

=== SECONDARY: OTHER IMPACTFUL BUGS ===

CALCULATION/DISPLAY BUGS (use MAX 1 per file):
- Off-by-one, wrong length, wrong math operation, wrong rounding
- Reversed min/max, wrong comparison operators, wrong date arithmetic

RENDERING BUGS (use MAX 1 per file):
- Inverted conditional rendering, wrong list index, wrong sort comparator
- Broken unique filter, grouping or pagination logic

FORM/INPUT BUGS (use MAX 1 per file):
- Input truncated, reset or sent with wrong fields
- Inverted validation, wrong default value

=== LOWER PRIORITY: SUBTLE BUGS (use sparingly, MAX 1 per file) ===
ASYNC/PROMISE BUGS: missing await causing [object Promise] or undefined in UI (must still be deterministic)
LOGIC BUGS: inverted boolean, wrong ternary branch, && vs ||, missing break
TYPE COERCION: string + number, NaN from parsing, wrong radix

AVOID THESE - THEY RARELY HAVE VISIBLE IMPACT:
- Operator swaps in values that are never displayed
- Changes to error handling, logging, comments or type annotations
- Performance-only changes"""

DATA_LAYER_GUIDANCE = """=== TECHNICAL DEBT / DATA LAYER COMPLEXITY ===
Simulate legacy technical debt by adding "data layer" functions that data must pass through
before it is used. This makes bugs MUCH harder to trace because developers must follow the
data flow through multiple transformations.

FOR MEDIUM STRESS - Add 1-2 intermediate functions:
- A "normalizer", "formatter" or "validator" that data flows through
- The bug should be in one of these intermediate functions, not the main code

FOR HIGH STRESS - Add 2-4 chained transformation functions (data pipeline):
- raw → validate → normalize → format → display
- Each function should look "reasonable" but one contains the bug
- Function names must look purposeful

Make sure the existing code actually CALLS the new functions so the bug manifests."""

RESPONSE_FORMAT = """Respond with ONLY a JSON object in this exact format (no markdown, no explanation):
{
  "modifiedCode": "the complete modified code with bugs introduced",
  "changes": ["technical description of bug 1", "technical description of bug 2"],
  "symptoms": ["Detailed bug report 1", "Detailed bug report 2"]
}

IMPORTANT about "symptoms": These should be written like DETAILED bug reports from a QA tester or team member. Each symptom should be a mini bug report that gives enough context to reproduce and investigate the issue. Include:
- What action was being performed
- What was expected to happen
- What actually happened instead
- Any relevant context (e.g., specific data, conditions, or state)

Format each symptom as: "[Action/Context]: [What went wrong]. Expected [X] but got [Y]."

Examples of GOOD detailed symptoms:
- "In the search bar: The first letter of my search is being cut off. I typed 'Apple' but it searches for 'pple'. Every search term loses its first character."
- "On the product list page: The last 2 items are completely missing. We have 10 products but only 8 show up."
- "On the pricing page: All prices show $0.00. We have items ranging from $10-$500 but every single one displays as $0.00."

Do NOT mention specific variable names, function names, or line numbers. Describe from a tester's perspective who can see the UI and behavior but not the code.

IMPORTANT: Symptoms must describe REPRODUCIBLE issues - bugs that happen every single time under the described conditions. Do NOT write symptoms like "sometimes works" or "intermittently fails".

The modifiedCode must be the COMPLETE file content with your bugs inserted. Do not truncate or summarize.
You CAN add new functions, helpers, or code - not just modify existing code. If you add a helper function, make sure to actually USE it somewhere in the existing code so the bug manifests."""


# ---------------------------------------------------------------------------
# Builders
# ---------------------------------------------------------------------------
def build_focus_instruction(context: Optional[str]) -> str:
    """Optional focus-area paragraph from the player's hint."""
    if not context:
        return ""
    return (
        f'FOCUS AREA: The user wants to specifically test: "{context}"\n'
        "Prioritize bugs related to this focus area when possible, but still be unpredictable."
    )


def build_variety_rules(bug_count: int, seed: str) -> str:
    return (
        "CRITICAL VARIETY REQUIREMENT - READ THIS FIRST:\n"
        f"You MUST use COMPLETELY DIFFERENT bug types for each bug. If you introduce {bug_count} bugs, "
        f"they MUST be {bug_count} DIFFERENT bug categories/patterns.\n\n"
        "FORBIDDEN: Repeating the same bug pattern (e.g., multiple .slice() bugs, multiple property name typos, etc.)\n"
        "REQUIRED: Each bug must use a DIFFERENT mechanism/approach. Mix string bugs, array bugs, "
        "object bugs, logic bugs, calculation bugs, etc.\n\n"
        f"The random seed {seed} should influence which bug types you choose - use it to ensure "
        "variety across different runs."
    )


def build_stress_prompt(
    content: str,
    filename: str,
    bug_count: int,
    seed: str,
    context: Optional[str] = None,
    stress_level: Any = StressLevel.MEDIUM,
) -> str:
    """
    Build the full generation prompt for one file.

    Parameters
    ----------
    content : str
        Original file content.
    filename : str
        Path of the file (shown to the generator).
    bug_count : int
        Exact number of bugs requested.
    seed : str
        Variety token so repeated runs pick different categories.
    context : str or None
        Player focus hint (already truncated by the caller).
    stress_level : StressLevel or str
        Difficulty; invalid values behave like "medium".

    Returns
    -------
    str
        Complete prompt text.
    """
    level = coerce_level(stress_level)
    config = config_for(level)

    sections = [
        f"You are a stress engineer tasked with introducing {config.subtlety} breaking bugs into code.",
        f"STRESS LEVEL: {level.value.upper()}\n{config.description}",
        build_variety_rules(bug_count, seed),
    ]
    focus = build_focus_instruction(context)
    if focus:
        sections.append(focus)
    sections += [
        ANTI_DISCLOSURE_RULES,
        SCENARIO,
        "Your goal is to make changes that:\n"
        "1. Will cause the code to fail or behave incorrectly\n"
        "2. Could plausibly be written by a careless/incompetent developer\n"
        f"3. Match the {level.value} stress level described above\n"
        "4. Are NOT obvious syntax errors that an IDE would immediately catch\n"
        f"5. Are MAXIMALLY VARIED - {bug_count} bugs means {bug_count} COMPLETELY DIFFERENT bug types. NO REPEATS.\n"
        "6. Do NOT leave any hints in comments about where bugs are located",
        DETERMINISM_RULES,
        f"Random seed for this session: {seed}\n"
        f"Number of bugs to introduce: {bug_count} (stress level: {level.value})",
        f"Choose {bug_count} bugs RANDOMLY from this list - YOU MUST PICK {bug_count} DIFFERENT CATEGORIES:\n\n"
        + BUG_CATEGORY_MENU,
    ]
    if level in (StressLevel.MEDIUM, StressLevel.HIGH):
        sections.append(
            DATA_LAYER_GUIDANCE
            + f"\n\nThis is {level.value.upper()} stress: introduce 1-4 chained data-layer "
            "transformation functions and hide at least one bug inside one stage."
        )
    sections += [
        f"Here is the code to modify:\n\nFILENAME: {filename}\n```\n{content}\n```",
        RESPONSE_FORMAT,
    ]
    return "\n\n".join(sections)
