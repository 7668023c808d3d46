"""Stack evaluation engine - fold one facility's rules into a verdict.

This module provides the RuleSet class, the per-facility state machine that
replays PAM stacking over rules sorted by rule_order.

Per-rule dispatch on the control verb:
1. invalid    -> warn, skip (not counted)
2. required   -> skipped once the facility already failed; a failure dooms
                 the facility but later rules still run
3. requisite  -> a failure ends the facility immediately
4. sufficient -> skipped after an earlier sufficient success; a success only
                 suppresses later sufficient rules, it never sets the verdict
5. optional   -> a failure of the first rule in the facility fails it
                 immediately; anywhere else it has no effect

Design principles:
1. Rules are read-only here; only the accumulator fields are written
2. Each run starts from a fresh accumulator, so runs are repeatable
3. Each rule is resolved at most once per run
4. A resolver that cannot answer counts as Failure (fail-closed)
"""

from __future__ import annotations

__all__ = ["RuleSet"]

import logging
from dataclasses import dataclass, field

from pam_explainer.exceptions import OutcomeResolutionError
from pam_explainer.pdp.resolver import DefaultOutcomeResolver, OutcomeResolver
from pam_explainer.pdp.rule import Rule
from pam_explainer.pdp.vocabulary import ControlKind, Facility, FinalResult

logger = logging.getLogger(__name__)


@dataclass
class RuleSet:
    """Evaluation context for the rules of one facility.

    Attributes:
        facility: The facility all rules belong to.
        rules: Rules sorted ascending by rule_order.
        aggregate: Running verdict (starts as Success).
        had_sufficient: A sufficient rule already succeeded.
        rules_run: Rules actually evaluated (skips are not counted).
        outcomes: Outcomes resolved during the last run, keyed by position
            in rules.
    """

    facility: Facility
    rules: list[Rule] = field(default_factory=list)
    aggregate: FinalResult = FinalResult.SUCCESS
    had_sufficient: bool = False
    rules_run: int = 0
    outcomes: dict[int, FinalResult] = field(default_factory=dict)

    def _reset(self) -> None:
        self.aggregate = FinalResult.SUCCESS
        self.had_sufficient = False
        self.rules_run = 0
        self.outcomes = {}

    def resolve(self, index: int, resolver: OutcomeResolver) -> FinalResult:
        """Get the outcome of the rule at index, asking the resolver at most once per run.

        Args:
            index: Position of the rule in rules.
            resolver: Strategy used when the rule has no known outcome.

        Returns:
            The known, memoized or freshly resolved outcome.
        """
        rule = self.rules[index]
        if rule.final_result is not None:
            return rule.final_result

        cached = self.outcomes.get(index)
        if cached is not None:
            return cached

        try:
            outcome = resolver.resolve(rule)
        except OutcomeResolutionError as e:
            logger.warning("Could not resolve rule #%d, treating it as failed: %s", rule.rule_order, e)
            outcome = FinalResult.FAILURE

        self.outcomes[index] = outcome
        return outcome

    def outcome_at(self, index: int) -> FinalResult | None:
        """Known or last-run resolved outcome of the rule at index, if any."""
        rule = self.rules[index]
        if rule.final_result is not None:
            return rule.final_result
        return self.outcomes.get(index)

    def evaluate(self, resolver: OutcomeResolver | None = None) -> FinalResult:
        """Run the stack and return the facility's verdict.

        Args:
            resolver: Strategy for rules without a known outcome.
                Defaults to a fail-closed DefaultOutcomeResolver.

        Returns:
            FinalResult for the facility. rules_run, had_sufficient and
            outcomes describe the run afterwards.
        """
        resolver = resolver or DefaultOutcomeResolver()
        self._reset()

        for index, rule in enumerate(self.rules):
            kind = rule.control.kind

            if kind is ControlKind.INVALID:
                logger.warning("Invalid control: %s", rule.control.token)
                continue

            if kind is ControlKind.REQUIRED:
                if self.aggregate is FinalResult.FAILURE:
                    logger.info(
                        'Don\'t have to process "%s" because we already failed, and this won\'t change the state.',
                        rule.short_string(),
                    )
                    continue
                outcome = self.resolve(index, resolver)
                self.rules_run += 1
                if not outcome:
                    self.aggregate = FinalResult.FAILURE
                    logger.warning("Rule #%d was required, so %s will fail!", rule.rule_order, self.facility)

            elif kind is ControlKind.REQUISITE:
                outcome = self.resolve(index, resolver)
                self.rules_run += 1
                if not outcome:
                    logger.warning(
                        "Rule #%d was requisite, so %s will fail regardless!", rule.rule_order, self.facility
                    )
                    self.aggregate = FinalResult.FAILURE
                    return FinalResult.FAILURE

            elif kind is ControlKind.SUFFICIENT:
                if self.had_sufficient:
                    logger.info(
                        "Don't have to process %s because we already had a 'sufficient' rule",
                        rule.short_string(),
                    )
                    continue
                outcome = self.resolve(index, resolver)
                self.rules_run += 1
                if outcome:
                    self.had_sufficient = True

            elif kind is ControlKind.OPTIONAL:
                outcome = self.resolve(index, resolver)
                if not outcome:
                    self.rules_run += 1
                    # first in the facility, not necessarily the first rule of the file
                    if index == 0:
                        self.aggregate = FinalResult.FAILURE
                        return FinalResult.FAILURE
                    logger.info(
                        "Optional rule #%d failed, but wasn't the first rule, so we'll continue", rule.rule_order
                    )

        return self.aggregate
