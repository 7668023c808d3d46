"""Policy Decision Point (PDP) - PAM stack evaluation engine.

This package replays how a PAM stack combines module outcomes, without
executing anything. The whole flow is pure and side-effect free apart from
the outcome resolver boundary:

    raw text -> parser -> Rules -> grouped by facility -> RuleSet per facility
             -> evaluate -> (verdict, rules_run)

Structure:
    vocabulary.py     - Facility, Control (with Invalid variants), FinalResult
    rule.py           - Rule entity, content hash, single-line parsing
    parser.py         - Policy text to ordered Rules
    resolver.py       - Outcome resolvers (default fail-closed, interactive)
    engine.py         - RuleSet state machine for one facility
    grouping.py       - Facility grouping, evaluation driver, overrides
    explain.py        - Human explanations of rule outcomes
    records.py        - JSON records for historical and produced results

Results file I/O is in utils/results.py.
"""

from pam_explainer.pdp.engine import RuleSet
from pam_explainer.pdp.explain import explain_rule
from pam_explainer.pdp.grouping import (
    FacilityResults,
    apply_override,
    group_and_evaluate,
    group_by_facility,
)
from pam_explainer.pdp.parser import iter_policy_lines, parse_policy, parse_policy_text, split_policy_text
from pam_explainer.pdp.records import RuleRecord, RuleResultRecord, RuleSetRecord
from pam_explainer.pdp.resolver import (
    DefaultOutcomeResolver,
    InteractiveResolver,
    OutcomeResolver,
    resolver_for_default,
)
from pam_explainer.pdp.rule import Rule, compute_rule_hash, find_matching_outcome, parse_line
from pam_explainer.pdp.vocabulary import Control, ControlKind, Facility, FacilityKind, FinalResult

__all__ = [
    # Vocabulary
    "Control",
    "ControlKind",
    "Facility",
    "FacilityKind",
    "FinalResult",
    # Rules
    "Rule",
    "RuleRecord",
    "RuleResultRecord",
    "RuleSetRecord",
    "compute_rule_hash",
    "find_matching_outcome",
    "parse_line",
    # Parsing
    "iter_policy_lines",
    "parse_policy",
    "parse_policy_text",
    "split_policy_text",
    # Resolvers
    "OutcomeResolver",
    "DefaultOutcomeResolver",
    "InteractiveResolver",
    "resolver_for_default",
    # Evaluation
    "RuleSet",
    "FacilityResults",
    "apply_override",
    "group_and_evaluate",
    "group_by_facility",
    "explain_rule",
]
