"""Outcome resolvers - supply a result for rules with no known outcome.

The evaluator never decides on its own what an unknown module returned.
It asks an injected resolver:

- DefaultOutcomeResolver: fixed answer, fail-closed (Failure) unless told
  otherwise. Used by the HTTP API and non-interactive CLI runs.
- InteractiveResolver: asks the operator on the terminal.

Resolvers signal that they could not answer by raising
OutcomeResolutionError; the evaluator then treats the rule as failed.
"""

from __future__ import annotations

__all__ = [
    "DefaultOutcomeResolver",
    "InteractiveResolver",
    "OutcomeResolver",
    "resolver_for_default",
]

import logging
from typing import TYPE_CHECKING, Literal, Protocol

import click

from pam_explainer.exceptions import OutcomeResolutionError
from pam_explainer.pdp.vocabulary import FinalResult

if TYPE_CHECKING:
    from pam_explainer.pdp.rule import Rule

logger = logging.getLogger(__name__)


class OutcomeResolver(Protocol):
    """Strategy producing an outcome for a rule whose final_result is None."""

    def resolve(self, rule: "Rule") -> FinalResult:
        """Return the outcome of the rule's module.

        Raises:
            OutcomeResolutionError: If no outcome can be produced.
        """
        ...


class DefaultOutcomeResolver:
    """Resolve every unknown rule to the same fixed outcome.

    Attributes:
        default: Outcome to return (Failure unless configured otherwise).
    """

    def __init__(self, default: FinalResult = FinalResult.FAILURE) -> None:
        self.default = default

    def resolve(self, rule: "Rule") -> FinalResult:
        logger.debug("No outcome for %s %s, using %s", rule.facility, rule.short_string(), self.default.value)
        return self.default


class InteractiveResolver:
    """Ask the operator whether each unknown module succeeded.

    Aborting the prompt (Ctrl-C, closed stdin) raises OutcomeResolutionError.
    """

    def resolve(self, rule: "Rule") -> FinalResult:
        prompt = f"Did this succeed: {rule.facility} {rule.short_string()}"
        try:
            answer = click.confirm(prompt, default=False, err=True)
        except (click.Abort, EOFError) as e:
            raise OutcomeResolutionError(f"No answer for rule #{rule.rule_order}: {rule.short_string()}") from e
        return FinalResult.from_bool(answer)


def resolver_for_default(default_outcome: Literal["success", "failure"]) -> DefaultOutcomeResolver:
    """Build a DefaultOutcomeResolver from a config/CLI outcome name."""
    return DefaultOutcomeResolver(FinalResult.SUCCESS if default_outcome == "success" else FinalResult.FAILURE)
