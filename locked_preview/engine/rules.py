# locked_preview/engine/rules.py

"""Replacement functions, one per rule kind.

Every function takes the source value, the rule from the table and a
callback that redacts a nested mapping against a named schema. None of
them ever returns a value derived from the source beyond its shape.
"""

from typing import Any, Callable, Dict, Mapping

from locked_preview.core.definitions import RuleKind
from locked_preview.core.domain import ReplacementRule

SchemaRedactor = Callable[[Mapping[str, Any], str], Dict[str, Any]]


def is_empty(value: Any) -> bool:
    """True for None, blank strings, zero, False and empty containers."""
    if value is None or value is False:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (int, float)):
        return value == 0
    if isinstance(value, (list, tuple, dict)):
        return len(value) == 0
    return False


def redact_generic(value: Any, token: str) -> Any:
    """Redacts a value with no entry in the table, keeping only its shape."""
    if value is None:
        return None
    if isinstance(value, bool):
        return False
    if isinstance(value, (int, float)):
        return 0
    if isinstance(value, str):
        return token if value.strip() else ""
    if isinstance(value, Mapping):
        return {str(k): redact_generic(v, token) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [redact_generic(item, token) for item in value]
    return None


def empty_form(rule: ReplacementRule) -> Any:
    """The value a rule produces for a missing or empty source."""
    if rule.kind in (RuleKind.TOKENS, RuleKind.RECORDS):
        return []
    if rule.kind == RuleKind.RECORD:
        return {}
    if rule.kind == RuleKind.CLEAR:
        return None
    if rule.kind == RuleKind.RESET:
        return rule.value
    return ""


def _mask(value: Any, rule: ReplacementRule, recurse: SchemaRedactor) -> Any:
    if isinstance(value, (list, tuple)):
        return [_mask(item, rule, recurse) for item in value]
    if isinstance(value, Mapping):
        return redact_generic(value, rule.value)
    return "" if is_empty(value) else rule.value


def _blank(value: Any, rule: ReplacementRule, recurse: SchemaRedactor) -> Any:
    return ""


def _clear(value: Any, rule: ReplacementRule, recurse: SchemaRedactor) -> Any:
    return None


def _reset(value: Any, rule: ReplacementRule, recurse: SchemaRedactor) -> Any:
    return rule.value


def _tokens(value: Any, rule: ReplacementRule, recurse: SchemaRedactor) -> Any:
    if not isinstance(value, (list, tuple)):
        return []
    return [
        redact_generic(item, rule.value)
        if isinstance(item, (Mapping, list, tuple))
        else ("" if is_empty(item) else rule.value)
        for item in value
    ]


def _record(value: Any, rule: ReplacementRule, recurse: SchemaRedactor) -> Any:
    if not isinstance(value, Mapping):
        return {}
    return recurse(value, rule.schema)


def _records(value: Any, rule: ReplacementRule, recurse: SchemaRedactor) -> Any:
    if not isinstance(value, (list, tuple)):
        return []
    return [
        recurse(item, rule.schema)
        if isinstance(item, Mapping)
        else redact_generic(item, "")
        for item in value
    ]


RULES: Dict[str, Callable[[Any, ReplacementRule, SchemaRedactor], Any]] = {
    RuleKind.MASK: _mask,
    RuleKind.BLANK: _blank,
    RuleKind.CLEAR: _clear,
    RuleKind.RESET: _reset,
    RuleKind.TOKENS: _tokens,
    RuleKind.RECORD: _record,
    RuleKind.RECORDS: _records,
}


def apply_rule(value: Any, rule: ReplacementRule, recurse: SchemaRedactor) -> Any:
    """Dispatches to the replacement function for the rule's kind."""
    return RULES[rule.kind](value, rule, recurse)
