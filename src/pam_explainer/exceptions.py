"""Exceptions for pam-explainer.

Unrecognized facility or control tokens are NOT errors: they are carried
as Invalid values on the parsed rule. Exceptions here cover I/O boundaries
and the outcome resolver.
"""

from __future__ import annotations

__all__ = [
    "PamExplainerError",
    "PolicyInputError",
    "OutcomeResolutionError",
]


class PamExplainerError(Exception):
    """Base class for all pam-explainer errors."""


class PolicyInputError(PamExplainerError):
    """The primary policy text could not be obtained.

    Raised before any parsing begins (missing or unreadable policy file).
    """


class OutcomeResolutionError(PamExplainerError):
    """An outcome resolver could not produce a result for a rule.

    The evaluator treats this as a Failure outcome (fail-closed) and keeps
    evaluating the remaining rules.
    """
