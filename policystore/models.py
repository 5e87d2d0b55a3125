"""Data models for stored policy rules and the in-memory policy model."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, field_validator

FIELD_COUNT = 6
FIELD_NAMES = tuple(f"v{i}" for i in range(FIELD_COUNT))


class RuleRecord(BaseModel):
    """One persisted policy rule.

    Documents use the Casbin column names: ``ptype`` for the policy type and
    ``v0`` .. ``v5`` for the positional values. An empty value means the
    position is absent.
    """

    ptype: str = Field(min_length=1)
    v0: str = ""
    v1: str = ""
    v2: str = ""
    v3: str = ""
    v4: str = ""
    v5: str = ""

    @field_validator(*FIELD_NAMES, mode="before")
    @classmethod
    def _null_as_empty(cls, value: Any) -> Any:
        # other Casbin adapters store absent positions as null
        return "" if value is None else value

    @property
    def section(self) -> str:
        return self.ptype[:1]

    @property
    def fields(self) -> tuple[str, ...]:
        return tuple(getattr(self, name) for name in FIELD_NAMES)

    @classmethod
    def from_document(cls, document: Dict[str, Any]) -> "RuleRecord":
        """Validate a stored document; unknown keys such as ``_id`` are ignored."""
        return cls.model_validate(document)

    def to_document(self) -> Dict[str, str]:
        return self.model_dump()


class Assertion(BaseModel):
    """Rules of a single policy type, e.g. every ``p`` or every ``g2`` rule."""

    key: str
    policy: List[List[str]] = Field(default_factory=list)


class PolicyModel(BaseModel):
    """Minimal policy model: section letter -> policy type -> assertion.

    The enforcement engine normally supplies its own model. The adapter only
    needs ``model[section][ptype].policy`` to be an appendable list, so this
    class also serves tests and command line tooling.
    """

    model: Dict[str, Dict[str, Assertion]] = Field(default_factory=dict)

    def __getitem__(self, section: str) -> Dict[str, Assertion]:
        return self.model[section]

    def assertion(self, section: str, ptype: str) -> Assertion:
        """Return the assertion for ``ptype``, creating it on first use."""
        types = self.model.setdefault(section, {})
        if ptype not in types:
            types[ptype] = Assertion(key=ptype)
        return types[ptype]

    def add_policy(self, section: str, ptype: str, rule: List[str]) -> None:
        self.assertion(section, ptype).policy.append(list(rule))

    def get_policy(self, section: str, ptype: Optional[str] = None) -> List[List[str]]:
        """Return the rules of one policy type, or of the whole section."""
        types = self.model.get(section, {})
        if ptype is not None:
            assertion = types.get(ptype)
            return list(assertion.policy) if assertion else []
        return [rule for assertion in types.values() for rule in assertion.policy]
