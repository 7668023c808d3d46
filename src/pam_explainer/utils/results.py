"""Policy and results file I/O.

- read_policy_lines: primary input, a PAM policy text file (required)
- load_results: historical outcomes, a JSON array of RuleRecord (optional)
- save_results: write outcomes so they can be replayed on the next run
"""

from __future__ import annotations

__all__ = [
    "load_results",
    "read_policy_lines",
    "records_for_rulesets",
    "save_results",
]

import logging
from pathlib import Path
from typing import Iterable

from pydantic import TypeAdapter

from pam_explainer.constants import RESULTS_TEMP_PREFIX
from pam_explainer.exceptions import PolicyInputError
from pam_explainer.pdp.engine import RuleSet
from pam_explainer.pdp.parser import split_policy_text
from pam_explainer.pdp.records import RuleRecord
from pam_explainer.utils.file_helpers import atomic_write_json, load_validated_json

logger = logging.getLogger(__name__)

_RECORDS_ADAPTER: TypeAdapter[list[RuleRecord]] = TypeAdapter(list[RuleRecord])


def read_policy_lines(path: Path) -> list[str]:
    """Read a policy file as raw lines.

    Args:
        path: Policy text file (UTF-8).

    Returns:
        Raw lines, unfiltered (the parser drops blanks and comments).

    Raises:
        PolicyInputError: If the file is missing or unreadable.
    """
    logger.info("Loading file: %s", path)
    try:
        return split_policy_text(path.read_bytes().decode("utf-8"))
    except (OSError, UnicodeDecodeError) as e:
        raise PolicyInputError(f"Failed to read {path}: {e}") from e


def load_results(path: Path | None) -> list[RuleRecord]:
    """Load historical outcomes.

    A missing results file is not an error: it yields no outcomes.

    Args:
        path: Results JSON file, or None if none was given.

    Returns:
        Stored records, in file order.

    Raises:
        ValueError: If the file exists but is not a valid results file.
    """
    if path is None:
        logger.debug("No results file given")
        return []

    if not path.exists():
        logger.warning("Results file %s does not exist, continuing without stored outcomes", path)
        return []

    records = load_validated_json(
        path,
        _RECORDS_ADAPTER,
        file_type="results",
        recovery_hint="Fix or remove the results file and run again.",
    )
    logger.debug("Loaded %d stored outcome(s) from %s", len(records), path)
    return records


def records_for_rulesets(rulesets: Iterable[RuleSet]) -> list[RuleRecord]:
    """Build records for every rule, including outcomes resolved during evaluation.

    Returns:
        Records sorted by rule_order.
    """
    records = [
        RuleRecord.from_rule(rule, ruleset.outcome_at(index))
        for ruleset in rulesets
        for index, rule in enumerate(ruleset.rules)
    ]
    return sorted(records, key=lambda r: r.rule_order or 0)


def save_results(records: Iterable[RuleRecord], path: Path) -> None:
    """Save records as a JSON array (atomic write)."""
    data = [record.model_dump(mode="json") for record in records]
    atomic_write_json(path, data, temp_prefix=RESULTS_TEMP_PREFIX)
    logger.info("Saved %d outcome(s) to %s", len(data), path)
