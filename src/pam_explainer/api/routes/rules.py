"""Policy parsing and evaluation API endpoints.

Provides:
- POST /api/parse - Parse policy text into rules
- POST /api/evaluate - Evaluate policy text, applying per-rule overrides

Every call re-parses and re-evaluates from scratch: a front end that toggles
one rule's outcome sends the full text plus its overrides again.

Routes mounted at: /api
"""

from __future__ import annotations

__all__ = ["router"]

import logging

from fastapi import APIRouter

from pam_explainer.api.deps import ConfigDep
from pam_explainer.api.schemas import EvaluateRequest, EvaluateResponse, ParseRequest, ParseResponse
from pam_explainer.pdp import (
    RuleRecord,
    RuleSetRecord,
    apply_override,
    group_and_evaluate,
    parse_policy_text,
    resolver_for_default,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/parse")
async def parse_rules(body: ParseRequest) -> ParseResponse:
    """Parse policy text.

    Blank lines, comments and lines with fewer than three fields are
    dropped. Unknown facilities/controls are kept as-is.
    """
    rules = parse_policy_text(body.data, body.results)
    return ParseResponse(parsed=[RuleRecord.from_rule(rule) for rule in rules])


@router.post("/evaluate")
async def evaluate_rules(body: EvaluateRequest, config: ConfigDep) -> EvaluateResponse:
    """Evaluate policy text.

    Outcome precedence per rule: override by rule_hash, then stored result,
    then the default outcome (request value, else server config).
    """
    rules = parse_policy_text(body.data, body.results)

    for rule_hash, outcome in body.overrides.items():
        apply_override(rules, rule_hash, outcome)

    resolver = resolver_for_default(body.default_outcome or config.evaluation.default_outcome)
    results = group_and_evaluate(rules, resolver)
    logger.debug("Evaluated %d rule(s) across %d facilities", len(rules), len(results))

    return EvaluateResponse(
        rulesets=[RuleSetRecord.from_ruleset(ruleset, verdict) for ruleset, verdict in results.values()]
    )
