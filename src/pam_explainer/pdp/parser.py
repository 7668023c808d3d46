"""Policy parser - raw text lines to an ordered Rule sequence.

Best-effort by design: blank lines, comments and lines too short to be a
rule are dropped without raising, so one bad line never hides the rest of
the policy.
"""

from __future__ import annotations

__all__ = [
    "iter_policy_lines",
    "split_policy_text",
    "parse_policy",
    "parse_policy_text",
]

import logging
from typing import Iterable, Iterator

from pam_explainer.constants import COMMENT_PREFIX
from pam_explainer.pdp.rule import OutcomeRecord, Rule, parse_line

logger = logging.getLogger(__name__)


def split_policy_text(text: str) -> list[str]:
    """Split text into lines at LF only, dropping a trailing CR from each.

    Form feeds and other Unicode line boundaries stay inside their line,
    where they separate tokens like any other whitespace.
    """
    return [line.removesuffix("\r") for line in text.split("\n")]


def iter_policy_lines(raw_lines: Iterable[str]) -> Iterator[str]:
    """Yield stripped lines, skipping blanks and comments."""
    for line in raw_lines:
        line = line.strip()
        if not line:
            continue
        if line.startswith(COMMENT_PREFIX):
            logger.debug("Skipping comment: %s", line)
            continue
        yield line


def parse_policy(
    raw_lines: Iterable[str],
    historical_outcomes: Iterable[OutcomeRecord] = (),
) -> list[Rule]:
    """Parse policy lines into Rules in input order.

    rule_order counts accepted rules only, so dropped lines leave no gaps.

    Args:
        raw_lines: Policy text, one rule per line.
        historical_outcomes: Previously produced records used to pre-seed
            each rule's final_result by exact identity match.

    Returns:
        Parsed rules, ordered by rule_order.
    """
    known = list(historical_outcomes)
    rules: list[Rule] = []
    for line in iter_policy_lines(raw_lines):
        logger.debug("Handling line: %r", line)
        rule = parse_line(line, len(rules), known)
        if rule is not None:
            rules.append(rule)
    logger.debug("Parsed %d rule(s)", len(rules))
    return rules


def parse_policy_text(text: str, historical_outcomes: Iterable[OutcomeRecord] = ()) -> list[Rule]:
    """Parse a whole policy document (e.g. a request body)."""
    return parse_policy(split_policy_text(text), historical_outcomes)
