"""Unit tests for the explain command and CLI entry point.

Tests use the AAA pattern (Arrange-Act-Assert) for clarity.
"""

import json

import click
import pytest
from click.testing import CliRunner

from pam_explainer import __version__
from pam_explainer.cli import cli
from pam_explainer.cli.commands.explain import parse_override
from pam_explainer.pdp.rule import parse_line
from pam_explainer.pdp.vocabulary import FinalResult

POLICY = """\
# sshd
auth     required    pam_env.so
auth     sufficient  pam_unix.so nullok
account  required    pam_nologin.so
"""


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def policy_file(tmp_path):
    path = tmp_path / "sshd"
    path.write_text(POLICY, encoding="utf-8")
    return path


def rule_hash(line: str) -> str:
    rule = parse_line(line, 0)
    assert rule is not None
    return rule.rule_hash


def run_json(runner: CliRunner, *args: str, **kwargs):
    result = runner.invoke(cli, ["explain", *args, "--json"], **kwargs)
    assert result.exit_code == 0, result.output
    # prompt answers are echoed to stdout ahead of the JSON document
    stdout = result.stdout
    payload = json.loads(stdout[stdout.index("{") :])
    return {rs["facility"]: rs for rs in payload["rulesets"]}


class TestCli:
    """Tests for the top-level group."""

    def test_version(self, runner):
        result = runner.invoke(cli, ["--version"])

        assert result.exit_code == 0
        assert __version__ in result.output

    def test_no_command_shows_help(self, runner):
        result = runner.invoke(cli, [])

        assert result.exit_code == 0
        assert "explain" in result.output
        assert "Quick Start" in result.output


@pytest.mark.usefixtures("no_config_file")
class TestExplainCommand:
    """Tests for explain."""

    def test_missing_policy_file_is_usage_error(self, runner, tmp_path):
        result = runner.invoke(cli, ["explain", str(tmp_path / "nope")])

        assert result.exit_code == 2

    def test_non_interactive_fails_closed(self, runner, policy_file):
        # Act
        rulesets = run_json(runner, str(policy_file), "--no-interactive")

        # Assert
        assert list(rulesets) == ["account", "auth"]
        assert rulesets["auth"]["result"] == "Failure"
        assert rulesets["auth"]["rules_run"] == 2
        assert rulesets["account"]["result"] == "Failure"

    def test_default_outcome_option(self, runner, policy_file):
        rulesets = run_json(runner, str(policy_file), "--no-interactive", "--default-outcome", "success")

        assert rulesets["auth"]["result"] == "Success"
        assert rulesets["auth"]["rules"][1]["explanation"] == "This'll allow further 'sufficient' rules to be skipped."

    def test_default_outcome_from_config(self, runner, policy_file, tmp_path):
        # Arrange
        config_path = tmp_path / "config.json"
        config_path.write_text(json.dumps({"evaluation": {"default_outcome": "success"}}), encoding="utf-8")

        # Act
        rulesets = run_json(runner, str(policy_file), "--no-interactive", "--config", str(config_path))

        # Assert
        assert rulesets["account"]["result"] == "Success"

    def test_invalid_config_exits_1(self, runner, policy_file, tmp_path):
        config_path = tmp_path / "config.json"
        config_path.write_text("{", encoding="utf-8")

        result = runner.invoke(cli, ["explain", str(policy_file), "--config", str(config_path)])

        assert result.exit_code == 1
        assert "Invalid JSON" in result.stderr

    def test_text_output(self, runner, policy_file):
        # Act
        result = runner.invoke(cli, ["explain", str(policy_file), "--no-interactive", "--default-outcome", "success"])

        # Assert
        assert result.exit_code == 0
        lines = result.stdout.splitlines()
        assert lines[0] == "✓ account -> Success (Ran 1 rules)"
        assert lines[1] == "  #2 required pam_nologin.so [Success] Required rule succeeded"
        assert lines[2] == "✓ auth -> Success (Ran 2 rules)"

    def test_empty_policy(self, runner, tmp_path):
        path = tmp_path / "empty"
        path.write_text("# nothing\n\n", encoding="utf-8")

        result = runner.invoke(cli, ["explain", str(path), "--no-interactive"])

        assert result.exit_code == 0
        assert result.stdout.strip() == "No rules found."

    def test_interactive_prompts_for_unknown_outcomes(self, runner, policy_file):
        # Act - account is evaluated first, then auth in stack order
        rulesets = run_json(runner, str(policy_file), "--interactive", input="y\nn\ny\n")

        # Assert
        assert rulesets["account"]["result"] == "Success"
        auth_outcomes = [r["final_result"] for r in rulesets["auth"]["rules"]]
        assert auth_outcomes == ["Failure", "Success"]
        assert rulesets["auth"]["result"] == "Failure"

    def test_save_and_replay_results(self, runner, policy_file, tmp_path):
        # Arrange
        results_path = tmp_path / "results.json"
        run_json(
            runner,
            str(policy_file),
            "--no-interactive",
            "--default-outcome",
            "success",
            "--save-results",
            str(results_path),
        )

        # Act
        rulesets = run_json(runner, str(policy_file), str(results_path), "--no-interactive")

        # Assert
        assert rulesets["auth"]["result"] == "Success"
        assert rulesets["account"]["result"] == "Success"
        saved = json.loads(results_path.read_text(encoding="utf-8"))
        assert [r["rule_order"] for r in saved] == [0, 1, 2]

    def test_missing_results_file_is_not_an_error(self, runner, policy_file, tmp_path):
        rulesets = run_json(runner, str(policy_file), str(tmp_path / "none.json"), "--no-interactive")

        assert rulesets["auth"]["result"] == "Failure"

    def test_corrupt_results_file_exits_1(self, runner, policy_file, tmp_path):
        results_path = tmp_path / "results.json"
        results_path.write_text('{"not": "a list"}', encoding="utf-8")

        result = runner.invoke(cli, ["explain", str(policy_file), str(results_path), "--no-interactive"])

        assert result.exit_code == 1
        assert "Invalid results" in result.stderr

    def test_override_changes_one_rule(self, runner, policy_file):
        # Arrange
        target = rule_hash("account required pam_nologin.so")

        # Act
        rulesets = run_json(runner, str(policy_file), "--no-interactive", "--override", f"{target}=success")

        # Assert
        assert rulesets["account"]["result"] == "Success"
        assert rulesets["auth"]["result"] == "Failure"

    def test_override_for_unknown_hash_warns(self, runner, policy_file):
        # Act
        result = runner.invoke(
            cli, ["explain", str(policy_file), "--no-interactive", "--override", f"{'a' * 64}=failure"]
        )

        # Assert
        assert result.exit_code == 0
        assert "no rule with hash" in result.stderr

    def test_malformed_override_is_usage_error(self, runner, policy_file):
        result = runner.invoke(cli, ["explain", str(policy_file), "--no-interactive", "--override", "abc=yes"])

        assert result.exit_code == 2


class TestParseOverride:
    """Tests for parse_override."""

    def test_normalizes_hash_and_outcome(self):
        value = f"{'AB' * 32}=Success"

        assert parse_override(value) == ("ab" * 32, FinalResult.SUCCESS)

    @pytest.mark.parametrize("value", ["", "a" * 64, f"{'a' * 64}=maybe", "zz=success"])
    def test_rejects_malformed(self, value):
        with pytest.raises(click.BadParameter):
            parse_override(value)
