"""Unit tests for the per-facility stack evaluator.

Tests use the AAA pattern (Arrange-Act-Assert) for clarity.
"""

import logging

import pytest

from pam_explainer.exceptions import OutcomeResolutionError
from pam_explainer.pdp.engine import RuleSet
from pam_explainer.pdp.grouping import group_and_evaluate
from pam_explainer.pdp.parser import parse_policy_text
from pam_explainer.pdp.resolver import DefaultOutcomeResolver
from pam_explainer.pdp.rule import Rule
from pam_explainer.pdp.vocabulary import Control, Facility, FinalResult

S = FinalResult.SUCCESS
F = FinalResult.FAILURE


def make_ruleset(*rules: tuple[str, FinalResult | None], facility: str = "auth") -> RuleSet:
    """Build a RuleSet from (control, outcome) pairs in stack order."""
    return RuleSet(
        facility=Facility.parse(facility),
        rules=[
            Rule(
                facility=Facility.parse(facility),
                control=Control.parse(control),
                module=f"pam_{index}.so",
                rule_order=index,
                final_result=outcome,
            )
            for index, (control, outcome) in enumerate(rules)
        ],
    )


class CountingResolver:
    """Resolver returning a fixed outcome and recording every call."""

    def __init__(self, outcome: FinalResult = S) -> None:
        self.outcome = outcome
        self.calls: list[int] = []

    def resolve(self, rule: Rule) -> FinalResult:
        self.calls.append(rule.rule_order)
        return self.outcome


class FailingResolver:
    def resolve(self, rule: Rule) -> FinalResult:
        raise OutcomeResolutionError("no answer")


class TestRequired:
    """Tests for required rules."""

    def test_all_required_succeed(self):
        # Arrange
        ruleset = make_ruleset(("required", S), ("required", S))

        # Act
        verdict = ruleset.evaluate()

        # Assert
        assert verdict is S
        assert ruleset.rules_run == 2

    def test_required_failure_fails_and_skips_later_required(self):
        # Arrange
        ruleset = make_ruleset(("required", S), ("required", F), ("required", S))

        # Act
        verdict = ruleset.evaluate()

        # Assert
        assert verdict is F
        assert ruleset.rules_run == 2

    def test_required_failure_still_runs_other_controls(self):
        # Arrange
        ruleset = make_ruleset(("required", F), ("sufficient", S), ("requisite", S))

        # Act
        verdict = ruleset.evaluate()

        # Assert
        assert verdict is F
        assert ruleset.rules_run == 3
        assert ruleset.had_sufficient is True


class TestRequisite:
    """Tests for requisite rules."""

    def test_requisite_failure_returns_immediately(self):
        # Arrange
        ruleset = make_ruleset(("required", S), ("requisite", F), ("required", S))

        # Act
        verdict = ruleset.evaluate()

        # Assert
        assert verdict is F
        assert ruleset.rules_run == 2
        assert ruleset.aggregate is F

    def test_requisite_success_continues(self):
        ruleset = make_ruleset(("requisite", S), ("required", S))

        assert ruleset.evaluate() is S
        assert ruleset.rules_run == 2


class TestSufficient:
    """Tests for sufficient rules."""

    def test_sufficient_success_skips_later_sufficient(self):
        # Arrange
        ruleset = make_ruleset(("sufficient", S), ("sufficient", S), ("required", S))

        # Act
        verdict = ruleset.evaluate()

        # Assert
        assert verdict is S
        assert ruleset.rules_run == 2
        assert ruleset.had_sufficient is True

    def test_sufficient_success_does_not_skip_required(self):
        # Arrange
        ruleset = make_ruleset(("sufficient", S), ("required", F))

        # Act
        verdict = ruleset.evaluate()

        # Assert
        assert verdict is F
        assert ruleset.rules_run == 2

    def test_sufficient_success_does_not_rescue_earlier_failure(self):
        ruleset = make_ruleset(("required", F), ("sufficient", S))

        assert ruleset.evaluate() is F

    def test_sufficient_failure_is_not_fatal(self):
        # Arrange
        ruleset = make_ruleset(("sufficient", F), ("sufficient", S), ("required", S))

        # Act
        verdict = ruleset.evaluate()

        # Assert
        assert verdict is S
        assert ruleset.rules_run == 3


class TestOptional:
    """Tests for optional rules."""

    def test_first_optional_failure_fails_facility(self):
        # Arrange
        ruleset = make_ruleset(("optional", F), ("required", S))

        # Act
        verdict = ruleset.evaluate()

        # Assert
        assert verdict is F
        assert ruleset.rules_run == 1

    def test_later_optional_failure_is_ignored(self):
        # Arrange
        ruleset = make_ruleset(("required", S), ("optional", F))

        # Act
        verdict = ruleset.evaluate()

        # Assert
        assert verdict is S
        assert ruleset.rules_run == 2

    def test_optional_success_is_not_counted(self):
        ruleset = make_ruleset(("optional", S), ("required", S))

        assert ruleset.evaluate() is S
        assert ruleset.rules_run == 1


class TestInvalidControl:
    """Tests for rules with unrecognized control tokens."""

    def test_invalid_control_is_skipped_with_warning(self, caplog):
        # Arrange
        ruleset = make_ruleset(("[default=die]", F), ("required", S))

        # Act
        with caplog.at_level(logging.WARNING, logger="pam_explainer"):
            verdict = ruleset.evaluate()

        # Assert
        assert verdict is S
        assert ruleset.rules_run == 1
        assert "Invalid control: [default=die]" in caplog.text

    def test_invalid_control_in_first_position_does_not_shift_optional(self):
        # Optional is the second rule in the stack, so its failure is ignored
        ruleset = make_ruleset(("bogus", None), ("optional", F))

        assert ruleset.evaluate() is S


class TestEvaluation:
    """Tests for general evaluation behavior."""

    def test_empty_ruleset_succeeds(self):
        ruleset = make_ruleset()

        assert ruleset.evaluate() is S
        assert ruleset.rules_run == 0

    def test_evaluate_is_repeatable(self):
        # Arrange
        ruleset = make_ruleset(("sufficient", S), ("required", F), ("optional", F))

        # Act
        first = (ruleset.evaluate(), ruleset.rules_run, ruleset.had_sufficient)
        second = (ruleset.evaluate(), ruleset.rules_run, ruleset.had_sufficient)

        # Assert
        assert first == second

    def test_unknown_outcome_defaults_to_failure(self):
        # Arrange
        ruleset = make_ruleset(("required", None))

        # Act
        verdict = ruleset.evaluate()

        # Assert
        assert verdict is F
        assert ruleset.outcomes == {0: F}

    def test_resolver_supplies_unknown_outcomes(self):
        # Arrange
        ruleset = make_ruleset(("required", None), ("required", S), ("sufficient", None))
        resolver = CountingResolver(S)

        # Act
        verdict = ruleset.evaluate(resolver)

        # Assert
        assert verdict is S
        assert resolver.calls == [0, 2]

    def test_known_outcomes_do_not_reach_resolver(self):
        ruleset = make_ruleset(("required", F))
        resolver = CountingResolver(S)

        assert ruleset.evaluate(resolver) is F
        assert resolver.calls == []

    def test_resolve_memoizes_within_run(self):
        # Arrange
        ruleset = make_ruleset(("required", None))
        resolver = CountingResolver(S)
        # Act
        ruleset.resolve(0, resolver)
        ruleset.resolve(0, resolver)

        # Assert
        assert resolver.calls == [0]

    def test_resolution_error_fails_closed(self, caplog):
        # Arrange
        ruleset = make_ruleset(("sufficient", None), ("required", S))

        # Act
        with caplog.at_level(logging.WARNING, logger="pam_explainer"):
            verdict = ruleset.evaluate(FailingResolver())

        # Assert
        assert verdict is S
        assert ruleset.had_sufficient is False
        assert ruleset.outcomes == {0: F}
        assert "treating it as failed" in caplog.text

    @pytest.mark.parametrize("default", [S, F])
    def test_default_resolver_outcome(self, default: FinalResult):
        ruleset = make_ruleset(("required", None))

        assert ruleset.evaluate(DefaultOutcomeResolver(default)) is default


class TestScenarios:
    """End-to-end stacks from policy text."""

    @staticmethod
    def run(text: str, outcomes: list[FinalResult | None]):
        rules = parse_policy_text(text)
        for rule, outcome in zip(rules, outcomes):
            rule.final_result = outcome
        ruleset, verdict = group_and_evaluate(rules)[rules[0].facility]
        return verdict, ruleset.rules_run

    def test_single_required_fails_closed(self):
        assert self.run("auth required pam_unix.so", [None]) == (F, 1)

    def test_required_chain_with_final_failure(self):
        text = "auth required pam_env.so\nauth required pam_unix.so\nauth required pam_deny.so"

        assert self.run(text, [S, S, F]) == (F, 3)

    def test_required_after_sufficient_success_still_runs(self):
        text = "auth required pam_env.so\nauth sufficient pam_unix.so\nauth required pam_deny.so"

        assert self.run(text, [S, S, F]) == (F, 3)

    def test_requisite_failure_stops_stack(self):
        text = "account requisite pam_deny.so\naccount required pam_permit.so"

        assert self.run(text, [F, S]) == (F, 1)

    def test_lone_optional_failure(self):
        assert self.run("session optional pam_mail.so", [F]) == (F, 1)


class ModuleResolver:
    """Resolver answering per module name."""

    def __init__(self, answers: dict[str, FinalResult]) -> None:
        self.answers = answers
        self.asked: list[str] = []

    def resolve(self, rule: Rule) -> FinalResult:
        self.asked.append(rule.module)
        return self.answers[rule.module]


class TestRulesSharingOrder:
    """Rules built without an explicit rule_order all default to 0."""

    def test_each_rule_is_resolved_separately(self):
        # Arrange
        auth = Facility.parse("auth")
        required = Control.parse("required")
        ruleset = RuleSet(facility=auth, rules=[Rule(auth, required, "pam_a.so"), Rule(auth, required, "pam_b.so")])
        resolver = ModuleResolver({"pam_a.so": S, "pam_b.so": F})

        # Act
        verdict = ruleset.evaluate(resolver)

        # Assert
        assert resolver.asked == ["pam_a.so", "pam_b.so"]
        assert verdict is F
        assert ruleset.outcomes == {0: S, 1: F}
        assert [ruleset.outcome_at(i) for i in range(2)] == [S, F]
