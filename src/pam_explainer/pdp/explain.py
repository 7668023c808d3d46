"""Human-readable explanations of what a rule's outcome means."""

from __future__ import annotations

__all__ = ["explain_rule"]

from pam_explainer.pdp.rule import Rule
from pam_explainer.pdp.vocabulary import ControlKind, FinalResult

_EXPLANATIONS: dict[ControlKind, dict[FinalResult, str]] = {
    ControlKind.REQUIRED: {
        FinalResult.SUCCESS: "Required rule succeeded",
        FinalResult.FAILURE: "Required rule failed - other rules will run but the event will fail.",
    },
    ControlKind.REQUISITE: {
        FinalResult.SUCCESS: "Requisite rule continues.",
        FinalResult.FAILURE: "Instant failure of this facility!",
    },
    ControlKind.SUFFICIENT: {
        FinalResult.SUCCESS: "This'll allow further 'sufficient' rules to be skipped.",
        FinalResult.FAILURE: "'sufficient' rule failed, but other rules will run.",
    },
    ControlKind.OPTIONAL: {
        FinalResult.SUCCESS: "Optional rule succeeded, as it's the only rule the facility succeeds.",
        FinalResult.FAILURE: "Optional rule failed, and thus the facility fails.",
    },
}


def explain_rule(rule: Rule, first_in_facility: bool, outcome: FinalResult | None = None) -> str:
    """Explain the effect of a rule's outcome on its facility.

    Args:
        rule: The rule to explain.
        first_in_facility: Whether the rule is first in its facility's
            ordered stack (the only position where optional matters).
        outcome: Outcome to explain; defaults to rule.final_result.

    Returns:
        One-line explanation.
    """
    if rule.control.is_invalid:
        return f"Invalid control configuration: {rule.control.token}"

    outcome = outcome if outcome is not None else rule.final_result
    if outcome is None:
        return "Final result not set, can't determine state!"

    if rule.control.kind is ControlKind.OPTIONAL and not first_in_facility:
        return "Result is irrelevant as it's not the only rule"

    return _EXPLANATIONS[rule.control.kind][outcome]
