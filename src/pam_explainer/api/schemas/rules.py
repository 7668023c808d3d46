"""Rule parsing and evaluation API schemas."""

from __future__ import annotations

__all__ = [
    "EvaluateRequest",
    "EvaluateResponse",
    "ParseRequest",
    "ParseResponse",
]

from typing import Literal

from pydantic import BaseModel, Field, field_validator

from pam_explainer.pdp.records import RuleRecord, RuleSetRecord
from pam_explainer.utils.validation import normalize_rule_hash


class ParseRequest(BaseModel):
    """Request body for parsing a policy.

    Attributes:
        data: Policy text, one rule per line.
        results: Stored outcomes to pre-seed matching rules.
    """

    data: str
    results: list[RuleRecord] = Field(default_factory=list)


class ParseResponse(BaseModel):
    """Parsed rules in input order."""

    parsed: list[RuleRecord]


class EvaluateRequest(BaseModel):
    """Request body for evaluating a policy.

    Attributes:
        data: Policy text, one rule per line.
        results: Stored outcomes to pre-seed matching rules.
        overrides: Outcome per rule_hash (true = success), applied after
            stored outcomes.
        default_outcome: Outcome for rules still unknown. Defaults to the
            server's configured default ("failure").
    """

    data: str
    results: list[RuleRecord] = Field(default_factory=list)
    overrides: dict[str, bool] = Field(default_factory=dict)
    default_outcome: Literal["success", "failure"] | None = None

    @field_validator("overrides")
    @classmethod
    def validate_override_hashes(cls, value: dict[str, bool]) -> dict[str, bool]:
        """Override keys must be SHA-256 rule hashes; normalized to lowercase."""
        normalized: dict[str, bool] = {}
        for rule_hash, outcome in value.items():
            key = normalize_rule_hash(rule_hash)
            if key is None:
                raise ValueError(f"Override key is not a rule hash: {rule_hash!r}")
            normalized[key] = outcome
        return normalized


class EvaluateResponse(BaseModel):
    """Evaluated facilities in canonical order."""

    rulesets: list[RuleSetRecord]
