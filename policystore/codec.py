"""Conversion between policy rules and stored rule records."""

from __future__ import annotations

from itertools import takewhile
from typing import Any, Dict, Iterable, Iterator, List, Sequence, Tuple

from .models import FIELD_COUNT, FIELD_NAMES, Assertion, RuleRecord

SAVED_SECTIONS = ("p", "g")


def encode_rule(ptype: str, rule: Sequence[str]) -> RuleRecord:
    """Build the record stored for ``rule``.

    Values fill ``v0`` onwards in order and unused positions stay empty.
    Trailing empty strings are kept as literal values, but an empty value
    followed by a non-empty one is rejected because the record could not be
    read back in full.
    """

    if len(rule) > FIELD_COUNT:
        raise ValueError(
            f"Policy rule has {len(rule)} values, at most {FIELD_COUNT} are supported"
        )
    gap = False
    for value in rule:
        if not value:
            gap = True
        elif gap:
            raise ValueError(
                f"Policy rule {list(rule)!r} has an empty value before a non-empty one"
            )
    return RuleRecord(ptype=ptype, **dict(zip(FIELD_NAMES, rule)))


def decode_rule(record: RuleRecord) -> List[str]:
    """Return the rule values of ``record``.

    Reading stops at the first empty position, so a record with a gap such as
    ``v0="alice", v1="", v2="read"`` decodes to ``["alice"]``.
    """

    return list(takewhile(bool, record.fields))


def rule_selector(record: RuleRecord) -> Dict[str, str]:
    """Selector matching documents equal to ``record`` on every column."""
    return record.to_document()


def _sections(model: Any) -> Dict[str, Dict[str, Any]]:
    # Casbin's Model keeps the section mapping on ``.model``
    return getattr(model, "model", model)


def load_policy_line(record: RuleRecord, model: Any) -> None:
    """Append the decoded rule to ``model[section][ptype].policy``."""
    types = _sections(model).setdefault(record.section, {})
    assertion = types.get(record.ptype)
    if assertion is None:
        assertion = types[record.ptype] = Assertion(key=record.ptype)
    assertion.policy.append(decode_rule(record))


def iter_model_rules(
    model: Any, sections: Iterable[str] = SAVED_SECTIONS
) -> Iterator[Tuple[str, List[str]]]:
    """Yield ``(ptype, rule)`` for every rule in the given sections."""
    model_sections = _sections(model)
    for section in sections:
        for ptype, assertion in model_sections.get(section, {}).items():
            for rule in assertion.policy:
                yield ptype, rule
