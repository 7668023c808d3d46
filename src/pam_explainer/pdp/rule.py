"""Rule entity - one parsed policy line and its content hash.

A policy line is `facility control module [arg...]`, whitespace-delimited.
The rule hash is a content address over the identity fields
(facility, control, module, arguments) and never covers the outcome or the
position, so the same line hashes identically across re-parses.
"""

from __future__ import annotations

__all__ = [
    "OutcomeRecord",
    "Rule",
    "RuleIdentity",
    "compute_rule_hash",
    "find_matching_outcome",
    "parse_line",
]

import hashlib
import logging
from dataclasses import dataclass, field
from typing import Iterable, Protocol

from pam_explainer.constants import MIN_RULE_TOKENS
from pam_explainer.pdp.vocabulary import Control, Facility, FinalResult

logger = logging.getLogger(__name__)

RuleIdentity = tuple[Facility, Control, str, tuple[str, ...]]


class OutcomeRecord(Protocol):
    """Anything that can pre-seed a rule's outcome (a Rule or a stored record)."""

    final_result: FinalResult | None

    def identity(self) -> RuleIdentity: ...


def compute_rule_hash(facility: Facility, control: Control, module: str, arguments: Iterable[str]) -> str:
    """Compute the SHA-256 content address of a rule's identity fields.

    Args:
        facility: Rule facility (rendered form is hashed).
        control: Rule control (rendered form is hashed).
        module: Module name, verbatim.
        arguments: Module arguments, order-significant.

    Returns:
        Lowercase hex digest.
    """
    hash_input = facility.render() + control.render() + module + " ".join(arguments)
    return hashlib.sha256(hash_input.encode("utf-8")).hexdigest()


@dataclass
class Rule:
    """One PAM policy line.

    Only final_result is mutable after parsing: it is seeded from historical
    outcomes and may be overwritten by a caller-supplied override.

    Attributes:
        facility: Facility the rule belongs to.
        control: Control verb governing how the outcome combines.
        module: Opaque module identifier (never validated).
        arguments: Module arguments, order preserved.
        rule_order: Zero-based position in the input stream.
        final_result: Known outcome, or None until resolved.
        rule_hash: Content address of (facility, control, module, arguments).
    """

    facility: Facility
    control: Control
    module: str
    arguments: list[str] = field(default_factory=list)
    rule_order: int = 0
    final_result: FinalResult | None = None
    rule_hash: str = field(init=False)

    def __post_init__(self) -> None:
        if self.rule_order < 0:
            raise ValueError(f"rule_order must be non-negative, got {self.rule_order}")
        self.rule_hash = compute_rule_hash(self.facility, self.control, self.module, self.arguments)

    def identity(self) -> RuleIdentity:
        return (self.facility, self.control, self.module, tuple(self.arguments))

    def short_string(self) -> str:
        """Render as `control module args` for log lines and prompts."""
        return " ".join([self.control.render(), self.module, *self.arguments])


def find_matching_outcome(known_outcomes: Iterable[OutcomeRecord], rule: Rule) -> FinalResult | None:
    """Find a previously recorded outcome for a rule.

    Matches on the exact identity tuple (arguments compared in order).
    Records without an outcome never match.

    Returns:
        The first matching record's final_result, or None.
    """
    identity = rule.identity()
    for record in known_outcomes:
        if record.final_result is not None and record.identity() == identity:
            return record.final_result
    return None


def parse_line(
    text: str,
    order_index: int,
    known_outcomes: Iterable[OutcomeRecord] = (),
) -> Rule | None:
    """Parse one policy line into a Rule.

    Lines with fewer than three tokens (including empty and whitespace-only
    lines) are dropped. Unknown facility/control tokens become Invalid.

    Args:
        text: Raw policy line.
        order_index: Position to record as rule_order.
        known_outcomes: Historical records used to pre-seed final_result.

    Returns:
        Parsed Rule, or None if the line was dropped.
    """
    parts = text.split()
    if len(parts) < MIN_RULE_TOKENS:
        logger.debug("Dropping line with %d token(s): %r", len(parts), text)
        return None

    facility_token, control_token, module, *arguments = parts
    rule = Rule(
        facility=Facility.parse(facility_token),
        control=Control.parse(control_token),
        module=module,
        arguments=arguments,
        rule_order=order_index,
    )
    rule.final_result = find_matching_outcome(known_outcomes, rule)
    return rule
