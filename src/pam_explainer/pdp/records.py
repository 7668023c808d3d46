"""Serialized rule records - historical outcomes in, produced results out.

A RuleRecord is the JSON form of a Rule:

    {
      "facility": "auth",
      "control": "required",
      "module": "pam_unix.so",
      "arguments": ["nullok", "try_first_pass"],
      "final_result": "Success",
      "rule_order": 0,
      "rule_hash": "9f2c..."
    }

Facility and control are stored as their raw tokens so Invalid values
survive a round trip. For compatibility with older results files,
`arguments` may also be a single space-joined string and
`final_result` may be a boolean.
"""

from __future__ import annotations

__all__ = [
    "RuleRecord",
    "RuleResultRecord",
    "RuleSetRecord",
]

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from pam_explainer.pdp.engine import RuleSet
from pam_explainer.pdp.explain import explain_rule
from pam_explainer.pdp.rule import Rule, RuleIdentity
from pam_explainer.pdp.vocabulary import Control, Facility, FinalResult


class RuleRecord(BaseModel):
    """One stored rule with its outcome.

    Attributes:
        facility: Facility token as written in the policy.
        control: Control token as written in the policy.
        module: Module name.
        arguments: Module arguments, order-significant.
        final_result: Recorded outcome, or None if never resolved.
        rule_order: Position in the source policy (ignored for matching).
        rule_hash: Content address (ignored for matching).
    """

    facility: str
    control: str
    module: str
    arguments: list[str] = Field(default_factory=list)
    final_result: FinalResult | None = None
    rule_order: int | None = Field(default=None, ge=0)
    rule_hash: str | None = None

    model_config = ConfigDict(extra="ignore")

    @field_validator("facility", "control", mode="before")
    @classmethod
    def unwrap_invalid_token(cls, value: Any) -> Any:
        """Accept {"invalid": "<token>"} as written by older versions."""
        if isinstance(value, dict) and len(value) == 1 and "invalid" in value:
            return value["invalid"]
        return value

    @field_validator("arguments", mode="before")
    @classmethod
    def split_joined_arguments(cls, value: Any) -> Any:
        """Accept arguments stored as one space-joined string."""
        if value is None:
            return []
        if isinstance(value, str):
            return value.split()
        return value

    @field_validator("final_result", mode="before")
    @classmethod
    def coerce_bool_result(cls, value: Any) -> Any:
        if isinstance(value, bool):
            return FinalResult.from_bool(value)
        return value

    def identity(self) -> RuleIdentity:
        return (
            Facility.parse(self.facility),
            Control.parse(self.control),
            self.module,
            tuple(self.arguments),
        )

    @classmethod
    def from_rule(cls, rule: Rule, final_result: FinalResult | None = None) -> RuleRecord:
        """Build a record from a Rule.

        Args:
            rule: Source rule.
            final_result: Outcome to record instead of rule.final_result
                (e.g. one resolved during evaluation).
        """
        return cls(
            facility=rule.facility.token,
            control=rule.control.token,
            module=rule.module,
            arguments=list(rule.arguments),
            final_result=final_result if final_result is not None else rule.final_result,
            rule_order=rule.rule_order,
            rule_hash=rule.rule_hash,
        )


class RuleResultRecord(RuleRecord):
    """A rule record as produced by an evaluation, with its explanation.

    Attributes:
        explanation: What the rule's outcome means for its facility.
    """

    explanation: str


class RuleSetRecord(BaseModel):
    """Evaluated facility.

    Attributes:
        facility: Rendered facility (diagnostic text for invalid facilities).
        is_valid: False for unrecognized facilities.
        result: Facility verdict.
        rules_run: Rules actually evaluated.
        rules: The facility's rules in evaluation order.
    """

    facility: str
    is_valid: bool
    result: FinalResult
    rules_run: int
    rules: list[RuleResultRecord]

    @classmethod
    def from_ruleset(cls, ruleset: RuleSet, result: FinalResult) -> RuleSetRecord:
        """Build the record of an evaluated RuleSet.

        Outcomes resolved during evaluation are reported alongside the
        rules' own outcomes.
        """
        rules = []
        for index, rule in enumerate(ruleset.rules):
            outcome = ruleset.outcome_at(index)
            base = RuleRecord.from_rule(rule, outcome)
            rules.append(
                RuleResultRecord(
                    **base.model_dump(),
                    explanation=explain_rule(rule, first_in_facility=index == 0, outcome=outcome),
                )
            )
        return cls(
            facility=ruleset.facility.render(),
            is_valid=not ruleset.facility.is_invalid,
            result=result,
            rules_run=ruleset.rules_run,
            rules=rules,
        )
