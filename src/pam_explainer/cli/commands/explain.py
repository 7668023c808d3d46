"""Explain command for pam-explainer CLI.

Parses a PAM policy file, evaluates every facility and prints the verdicts.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path

import click

from pam_explainer.config import AppConfig, load_config
from pam_explainer.exceptions import PolicyInputError
from pam_explainer.pdp import (
    FacilityResults,
    InteractiveResolver,
    OutcomeResolver,
    Rule,
    RuleSetRecord,
    apply_override,
    group_and_evaluate,
    parse_policy,
    resolver_for_default,
)
from pam_explainer.pdp.vocabulary import FinalResult
from pam_explainer.utils.logging import setup_logging
from pam_explainer.utils.results import load_results, read_policy_lines, records_for_rulesets
from pam_explainer.utils.results import save_results as write_results
from pam_explainer.utils.validation import normalize_rule_hash

_OUTCOME_NAMES = {"success": FinalResult.SUCCESS, "failure": FinalResult.FAILURE}


def parse_override(value: str) -> tuple[str, FinalResult]:
    """Parse a HASH=success|failure override.

    Raises:
        click.BadParameter: If the hash or outcome is malformed.
    """
    rule_hash, sep, outcome_name = value.partition("=")
    normalized = normalize_rule_hash(rule_hash)
    if not sep or normalized is None:
        raise click.BadParameter(f"expected <sha256 rule hash>=success|failure, got {value!r}", param_hint="--override")
    outcome = _OUTCOME_NAMES.get(outcome_name.strip().lower())
    if outcome is None:
        raise click.BadParameter(f"outcome must be 'success' or 'failure', got {outcome_name!r}", param_hint="--override")
    return normalized, outcome


def _build_resolver(interactive: bool | None, default_outcome: str | None, config: AppConfig) -> OutcomeResolver:
    if interactive is None:
        interactive = sys.stdin.isatty()
    if interactive:
        return InteractiveResolver()
    return resolver_for_default(default_outcome or config.evaluation.default_outcome)  # type: ignore[arg-type]


def _echo_results(results: FacilityResults) -> None:
    """Print each facility's verdict followed by one line per rule."""
    if not results:
        click.echo("No rules found.")
        return

    for facility, (ruleset, verdict) in results.items():
        record = RuleSetRecord.from_ruleset(ruleset, verdict)
        marker = "✓" if verdict is FinalResult.SUCCESS else "✗"
        click.echo(f"{marker} {facility} -> {verdict.value} (Ran {ruleset.rules_run} rules)")
        for rule in record.rules:
            outcome = rule.final_result.value if rule.final_result is not None else "-"
            line = " ".join([rule.control, rule.module, *rule.arguments])
            click.echo(f"  #{rule.rule_order} {line} [{outcome}] {rule.explanation}")


def _echo_json(results: FacilityResults) -> None:
    payload = {
        "rulesets": [
            RuleSetRecord.from_ruleset(ruleset, verdict).model_dump(mode="json")
            for ruleset, verdict in results.values()
        ]
    }
    click.echo(json.dumps(payload, indent=2))


def _apply_overrides(rules: list[Rule], overrides: tuple[str, ...]) -> None:
    for value in overrides:
        rule_hash, outcome = parse_override(value)
        if not apply_override(rules, rule_hash, outcome):
            click.echo(f"Warning: no rule with hash {rule_hash}", err=True)


@click.command()
@click.argument("policy_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("results_file", required=False, type=click.Path(dir_okay=False, path_type=Path))
@click.option(
    "--interactive/--no-interactive",
    default=None,
    help="Prompt for unknown module outcomes (default: only when stdin is a terminal)",
)
@click.option(
    "--default-outcome",
    type=click.Choice(["success", "failure"]),
    default=None,
    help="Outcome assumed for unknown modules when not prompting (default: from config, 'failure')",
)
@click.option(
    "--override",
    "overrides",
    multiple=True,
    metavar="HASH=RESULT",
    help="Force the outcome of a rule by hash (repeatable)",
)
@click.option(
    "--save-results",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Write every rule's outcome to a results file for replay",
)
@click.option("--json", "as_json", is_flag=True, help="Print results as JSON")
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Path to config file (default: OS config location)",
)
def explain(
    policy_file: Path,
    results_file: Path | None,
    interactive: bool | None,
    default_outcome: str | None,
    overrides: tuple[str, ...],
    save_results: Path | None,
    as_json: bool,
    config_path: Path | None,
) -> None:
    """Explain what a PAM policy file will decide.

    POLICY_FILE is a PAM service file (facility control module [args...]
    per line). RESULTS_FILE optionally holds outcomes from an earlier run
    (--save-results); matching rules reuse those outcomes.

    Exit codes:
        0: Policy evaluated
        1: Config, policy or results file could not be loaded
    """
    try:
        app_config = load_config(config_path)
    except (FileNotFoundError, ValueError) as e:
        click.echo(f"✗ {e}", err=True)
        sys.exit(1)

    setup_logging(app_config.logging.log_level)

    try:
        raw_lines = read_policy_lines(policy_file)
        historical = load_results(results_file)
    except (PolicyInputError, ValueError) as e:
        click.echo(f"✗ {e}", err=True)
        sys.exit(1)

    rules = parse_policy(raw_lines, historical)
    _apply_overrides(rules, overrides)

    resolver = _build_resolver(interactive, default_outcome, app_config)
    results = group_and_evaluate(rules, resolver)

    if save_results is not None:
        records = records_for_rulesets(ruleset for ruleset, _ in results.values())
        try:
            write_results(records, save_results)
        except OSError as e:
            click.echo(f"✗ Could not save results to {save_results}: {e}", err=True)
            sys.exit(1)

    if as_json:
        _echo_json(results)
    else:
        _echo_results(results)

