"""
Mutation Catalog
================
Ordered registry of deterministic mutation rules used when the external
bug generator is unavailable.

Rule Contract:
    - is_applicable(text) is a structural text predicate (regex / substring),
      never a parse. It is re-checked by the planner before every apply
      because earlier rules change the text.
    - apply(text) is a pure function of its input and returns the new text.
      Returning the input unchanged means "nothing to do here".
    - Each rule targets one visible-impact category: string truncation,
      item disappearance, identical values, undefined/null data, null
      dereference crashes, miscalculation, inverted rendering, missing
      await, or generic boolean / return-value flips.

Registries:
    JS_RULES       — applied to .ts / .tsx / .js / .jsx files
    GENERIC_RULES  — applied to every other allowed source extension

The registry order is the catalog order; the planner shuffles a copy,
so order here only matters for reproducibility under a seeded source.
"""
import re
from dataclasses import dataclass
from typing import Callable, Iterator, List, Optional, Sequence

from app.core.constants import JS_EXTENSIONS
from app.utils.path_utils import file_extension


# ---------------------------------------------------------------------------
# Rule Strategy
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class MutationRule:
    """A named, self-describing text mutation."""
    name: str
    description: str
    predicate: Callable[[str], bool]
    transform: Callable[[str], str]

    def is_applicable(self, text: str) -> bool:
        return bool(self.predicate(text))

    def apply(self, text: str) -> str:
        return self.transform(text)


class RuleRegistry:
    """
    Ordered collection of MutationRule objects.

    Usage:
        registry = RuleRegistry("js", [rule_a, rule_b])
        candidates = registry.applicable(source_text)
    """

    def __init__(self, name: str, rules: Sequence[MutationRule] = ()) -> None:
        self.name = name
        self._rules: List[MutationRule] = []
        for rule in rules:
            self.register(rule)

    def register(self, rule: MutationRule) -> None:
        if any(existing.name == rule.name for existing in self._rules):
            raise ValueError(f"Duplicate mutation rule: {rule.name}")
        self._rules.append(rule)

    def get(self, name: str) -> Optional[MutationRule]:
        for rule in self._rules:
            if rule.name == name:
                return rule
        return None

    def applicable(self, text: str) -> List[MutationRule]:
        """Rules whose predicate holds for text, in registry order."""
        return [rule for rule in self._rules if rule.is_applicable(text)]

    def __iter__(self) -> Iterator[MutationRule]:
        return iter(self._rules)

    def __len__(self) -> int:
        return len(self._rules)


# ---------------------------------------------------------------------------
# Shared patterns
# ---------------------------------------------------------------------------
_MAP_CALL_RE = re.compile(r"\.map\s*\(")
_PROPERTY_END_RE = re.compile(r"\.\w+\s*[,)}]")
_OBJECT_LITERAL_RE = re.compile(r"const\s+(\w+)\s*=\s*\{")


def _replace_first(text: str, old: str, new: str) -> str:
    return text.replace(old, new, 1)


# ---------------------------------------------------------------------------
# String / text corruption
# ---------------------------------------------------------------------------
_FIRST_CHAR_FIELD_RE = re.compile(
    r"(\.\w*(name|title|label|text|value|query|search|input)\w*)", re.IGNORECASE
)
_LAST_CHARS_FIELD_RE = re.compile(
    r"(\.\w*(name|title|label|text|description)\w*)", re.IGNORECASE
)


def _slice_off_first_char(text: str) -> str:
    match = _FIRST_CHAR_FIELD_RE.search(text)
    if not match:
        return text
    return _replace_first(text, match.group(1), match.group(1) + ".slice(1)")


def _slice_off_last_chars(text: str) -> str:
    match = _LAST_CHARS_FIELD_RE.search(text)
    if not match:
        return text
    return _replace_first(text, match.group(1), match.group(1) + ".slice(0, -3)")


# ---------------------------------------------------------------------------
# Data disappearing / identical values
# ---------------------------------------------------------------------------
_RETURN_MAP_RE = re.compile(r"return\s+(\w+)\.map\s*\(")
_MAP_ITEM_VAR_RE = re.compile(r"\.map\s*\(\s*\(\s*(\w+)")
_MAPPED_ARRAY_RE = re.compile(r"(\w+)\.map\s*\(")


def _use_first_id_for_all(text: str) -> str:
    item_match = _MAP_ITEM_VAR_RE.search(text)
    array_match = _MAPPED_ARRAY_RE.search(text)
    if not item_match or not array_match:
        return text
    item_var = item_match.group(1)
    array_name = array_match.group(1)
    return re.sub(re.escape(item_var) + r"\.id", f"{array_name}[0].id", text)


# ---------------------------------------------------------------------------
# Undefined / null data
# ---------------------------------------------------------------------------
_TYPO_PROPERTIES = ("name", "title", "email", "username")
_TYPO_PROPERTY_RE = re.compile(r"\.(name|title|email|username)\b")
_NULLABLE_FIELD_RE = re.compile(r"(const\s+\w+\s*=\s*\{[^}]*)(name|title|value|data):\s*[^,}]+")


def _wrong_property_name(text: str) -> str:
    for prop in _TYPO_PROPERTIES:
        pattern = re.compile(r"\." + prop + r"\b")
        if pattern.search(text):
            return pattern.sub("." + prop[:-1], text, count=1)
    return text


def _set_property_to_null(text: str) -> str:
    match = _NULLABLE_FIELD_RE.search(text)
    if not match:
        return text
    return _replace_first(text, match.group(0), match.group(1) + match.group(2) + ": null")


# ---------------------------------------------------------------------------
# Null pointer / crash
# ---------------------------------------------------------------------------
def _delete_property_before_use(text: str) -> str:
    match = _OBJECT_LITERAL_RE.search(text)
    if not match:
        return text
    obj_name = match.group(1)
    declaration = re.compile(r"(const\s+" + re.escape(obj_name) + r"\s*=\s*\{[^}]+\};?)")
    return declaration.sub(lambda m: m.group(1) + f"\ndelete {obj_name}.data;", text, count=1)


# ---------------------------------------------------------------------------
# Calculation / display
# ---------------------------------------------------------------------------
_PRICE_WORD_RE = re.compile(r"price|total|amount|cost|sum", re.IGNORECASE)
_RETURN_PRICE_RE = re.compile(r"return\s+(\w*(price|total|amount|cost|sum)\w*)", re.IGNORECASE)


def _return_zero_price(text: str) -> str:
    match = _RETURN_PRICE_RE.search(text)
    if not match:
        return text
    return _replace_first(text, match.group(0), "return 0")


# ---------------------------------------------------------------------------
# Rendering / logic
# ---------------------------------------------------------------------------
_TERNARY_JSX_RE = re.compile(r"(\w+)\s*\?\s*<")
_AND_JSX_RE = re.compile(r"(\w+)\s*&&\s*<")
_FUNCTION_HEAD_RE = re.compile(r"function\s+\w+|const\s+\w+\s*=\s*\([^)]*\)\s*=>")
_FUNCTION_OPEN_RE = re.compile(r"(function\s+\w+[^{]*\{|const\s+\w+\s*=\s*\([^)]*\)\s*=>\s*\{)")
_FOR_LESS_THAN_RE = re.compile(r"(for\s*\([^;]+;\s*\w+\s*)<(\s*\w+)")


def _invert_conditional_display(text: str) -> str:
    if _TERNARY_JSX_RE.search(text):
        return _TERNARY_JSX_RE.sub(r"!\1 ? <", text, count=1)
    if _AND_JSX_RE.search(text):
        return _AND_JSX_RE.sub(r"!\1 && <", text, count=1)
    return text


def _return_undefined_from_function(text: str) -> str:
    match = _FUNCTION_OPEN_RE.search(text)
    if not match:
        return text
    return _replace_first(text, match.group(0), match.group(0) + "\n  return undefined;")


# ---------------------------------------------------------------------------
# JS / TS catalog
# ---------------------------------------------------------------------------
JS_RULES = RuleRegistry("js", [
    # String / text corruption
    MutationRule(
        name="sliceOffFirstChar",
        description="Added .slice(1) to a text field, cutting off the first character",
        predicate=lambda c: bool(_PROPERTY_END_RE.search(c))
        and bool(re.search(r"name|title|label|text|value|query|search|input", c, re.IGNORECASE)),
        transform=_slice_off_first_char,
    ),
    MutationRule(
        name="sliceOffLastChars",
        description="Added .slice(0, -3) to a text field, cutting off the last 3 characters",
        predicate=lambda c: bool(_PROPERTY_END_RE.search(c))
        and bool(re.search(r"name|title|label|text|description", c, re.IGNORECASE)),
        transform=_slice_off_last_chars,
    ),

    # Data disappearing
    MutationRule(
        name="hideLastItems",
        description="Added .slice(0, -2) before .map(), hiding the last 2 items",
        predicate=lambda c: bool(_MAP_CALL_RE.search(c)),
        transform=lambda c: _MAP_CALL_RE.sub(".slice(0, -2).map(", c, count=1),
    ),
    MutationRule(
        name="filterOutHalfItems",
        description="Added filter that only shows every other item (even indices)",
        predicate=lambda c: bool(_MAP_CALL_RE.search(c)) and not re.search(r"\.filter\s*\(", c),
        transform=lambda c: _MAP_CALL_RE.sub(".filter((_, i) => i % 2 === 0).map(", c, count=1),
    ),
    MutationRule(
        name="returnEmptyArray",
        description="Return empty array before the actual mapped data",
        predicate=lambda c: bool(_RETURN_MAP_RE.search(c)),
        transform=lambda c: _RETURN_MAP_RE.sub(r"return []; \1.map(", c, count=1),
    ),

    # All items same value
    MutationRule(
        name="useFirstIdForAll",
        description="Changed to use first item's ID for all items (all IDs now identical)",
        predicate=lambda c: bool(_MAP_ITEM_VAR_RE.search(c))
        and bool(re.search(r"\.id|\.key|\.uuid", c, re.IGNORECASE)),
        transform=_use_first_id_for_all,
    ),

    # Data showing as undefined
    MutationRule(
        name="wrongPropertyName",
        description="Typo in property name causes undefined (e.g., .name → .nam)",
        predicate=lambda c: bool(_TYPO_PROPERTY_RE.search(c)),
        transform=_wrong_property_name,
    ),
    MutationRule(
        name="setPropertyToNull",
        description="Set a key property to null, causing undefined display",
        predicate=lambda c: bool(_OBJECT_LITERAL_RE.search(c)),
        transform=_set_property_to_null,
    ),

    # Null pointer / crash
    MutationRule(
        name="removeOptionalChaining",
        description="Removed all optional chaining (?. → .) causing null pointer crashes",
        predicate=lambda c: "?." in c,
        transform=lambda c: c.replace("?.", "."),
    ),
    MutationRule(
        name="deletePropertyBeforeUse",
        description="Deleted a property from object before it's accessed",
        predicate=lambda c: bool(_OBJECT_LITERAL_RE.search(c))
        and bool(re.search(r"\.name|\.data|\.items", c)),
        transform=_delete_property_before_use,
    ),

    # Calculation / count
    MutationRule(
        name="wrongLengthCount",
        description="Changed .length to .length - 2, showing wrong item count",
        predicate=lambda c: bool(re.search(r"\.length\b", c)) and not re.search(r"\.length\s*[-+]", c),
        transform=lambda c: re.sub(r"\.length\b", ".length - 2", c, count=1),
    ),
    MutationRule(
        name="returnZeroPrice",
        description="Return 0 instead of calculated price/total",
        predicate=lambda c: bool(_PRICE_WORD_RE.search(c)) and bool(re.search(r"return\s+\w+", c)),
        transform=_return_zero_price,
    ),

    # map / forEach swap
    MutationRule(
        name="mapToForEach",
        description="Changed .map() to .forEach() - returns undefined instead of array",
        predicate=lambda c: bool(_MAP_CALL_RE.search(c)) and bool(re.search(r"return.*\.map", c)),
        transform=lambda c: _MAP_CALL_RE.sub(".forEach(", c, count=1),
    ),

    # Conditional / logic
    MutationRule(
        name="invertConditionalDisplay",
        description="Inverted conditional rendering - shows when should hide, hides when should show",
        predicate=lambda c: bool(re.search(r"\?\s*<", c)) or bool(re.search(r"&&\s*<", c)),
        transform=_invert_conditional_display,
    ),
    MutationRule(
        name="returnUndefinedFromFunction",
        description="Added early return undefined, function returns nothing",
        predicate=lambda c: bool(_FUNCTION_HEAD_RE.search(c)),
        transform=_return_undefined_from_function,
    ),

    # Operator bugs
    MutationRule(
        name="offByOneLessThan",
        description="Changed loop boundary from < to <= (off-by-one, may process extra item)",
        predicate=lambda c: bool(_FOR_LESS_THAN_RE.search(c)),
        transform=lambda c: _FOR_LESS_THAN_RE.sub(r"\1<=\2", c, count=1),
    ),
    MutationRule(
        name="zeroToOne",
        description="Changed array index from [0] to [1], skipping first item",
        predicate=lambda c: bool(re.search(r"\[\s*0\s*\]", c)),
        transform=lambda c: re.sub(r"\[\s*0\s*\]", "[1]", c, count=1),
    ),
    MutationRule(
        name="removeAwait",
        description="Removed 'await' keyword - data shows as [object Promise] or undefined",
        predicate=lambda c: bool(re.search(r"await\s+\w+\(", c)),
        transform=lambda c: re.sub(r"await\s+(\w+\()", r"\1", c, count=1),
    ),
])


# ---------------------------------------------------------------------------
# Generic catalog (any other language)
# ---------------------------------------------------------------------------
GENERIC_RULES = RuleRegistry("generic", [
    MutationRule(
        name="genericReturnNull",
        description="Changed return value to null - data shows as null/empty",
        predicate=lambda c: bool(re.search(r"return\s+\w+", c)),
        transform=lambda c: re.sub(r"return\s+\w+", "return null", c, count=1),
    ),
    MutationRule(
        name="genericReturnEmptyString",
        description="Changed return value to empty string - text displays as blank",
        predicate=lambda c: bool(re.search(r"return\s+[\"'`]", c)),
        transform=lambda c: re.sub(r"return\s+[\"'`][^\"'`]*[\"'`]", 'return ""', c, count=1),
    ),
    MutationRule(
        name="genericTrueToFalse",
        description="Changed 'true' to 'false' - affects visibility/display logic",
        predicate=lambda c: "true" in c,
        transform=lambda c: c.replace("true", "false", 1),
    ),
    MutationRule(
        name="genericFalseToTrue",
        description="Changed 'false' to 'true' - affects visibility/display logic",
        predicate=lambda c: "false" in c,
        transform=lambda c: c.replace("false", "true", 1),
    ),
])


def rules_for(filename: str) -> RuleRegistry:
    """Pick the rule registry for a file by its extension."""
    if file_extension(filename) in JS_EXTENSIONS:
        return JS_RULES
    return GENERIC_RULES
