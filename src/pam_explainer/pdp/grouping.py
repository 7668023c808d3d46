"""Group parsed rules by facility and evaluate each facility's stack.

Facilities are independent: evaluation of one never looks at another.
Results are keyed in canonical facility order (account, auth, password,
session, then invalid facilities) purely for stable presentation.

A caller that changes an outcome re-runs group_and_evaluate from scratch;
there is no incremental re-evaluation.
"""

from __future__ import annotations

__all__ = [
    "FacilityResults",
    "apply_override",
    "group_and_evaluate",
    "group_by_facility",
]

import logging
from typing import Iterable

from pam_explainer.pdp.engine import RuleSet
from pam_explainer.pdp.resolver import OutcomeResolver
from pam_explainer.pdp.rule import Rule
from pam_explainer.pdp.vocabulary import Facility, FinalResult

logger = logging.getLogger(__name__)

FacilityResults = dict[Facility, tuple[RuleSet, FinalResult]]


def group_by_facility(rules: Iterable[Rule]) -> dict[Facility, RuleSet]:
    """Partition rules into one fresh RuleSet per facility observed.

    Rules within a facility are stable-sorted by rule_order.
    """
    partitions: dict[Facility, list[Rule]] = {}
    for rule in rules:
        partitions.setdefault(rule.facility, []).append(rule)

    return {
        facility: RuleSet(facility=facility, rules=sorted(partitions[facility], key=lambda r: r.rule_order))
        for facility in sorted(partitions)
    }


def group_and_evaluate(rules: Iterable[Rule], resolver: OutcomeResolver | None = None) -> FacilityResults:
    """Group rules by facility and evaluate every facility.

    Args:
        rules: Parsed rules (any order).
        resolver: Strategy for rules without a known outcome. Defaults to
            fail-closed.

    Returns:
        Mapping facility -> (evaluated RuleSet, verdict), in canonical order.
    """
    results: FacilityResults = {}
    for facility, ruleset in group_by_facility(rules).items():
        verdict = ruleset.evaluate(resolver)
        logger.info("%s -> %s (Ran %d rules)", facility, verdict.value, ruleset.rules_run)
        results[facility] = (ruleset, verdict)
    return results


def apply_override(rules: Iterable[Rule], rule_hash: str, final_result: FinalResult | bool) -> int:
    """Set final_result on every rule carrying rule_hash.

    Identical lines share a hash, so one override updates all of them.

    Returns:
        Number of rules updated.
    """
    outcome = final_result if isinstance(final_result, FinalResult) else FinalResult.from_bool(final_result)
    updated = 0
    for rule in rules:
        if rule.rule_hash == rule_hash:
            rule.final_result = outcome
            updated += 1
    if not updated:
        logger.debug("Override for unknown rule hash %s ignored", rule_hash)
    return updated
