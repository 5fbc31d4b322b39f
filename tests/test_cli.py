# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for the depguard command-line interface."""

from __future__ import annotations

from pathlib import Path

import pytest
from typer.testing import CliRunner

from depguard.cli.app import app
from depguard.doctor import NPQ, SCFW
from depguard.errors import DiscoveryError
from depguard.models import ExitReason, RunResult, RunStatistics
from depguard.workflow import AddResult

runner = CliRunner()


class RecordingOrchestrator:
    instances: list[RecordingOrchestrator] = []
    result = RunResult.early_exit(ExitReason.NO_UPDATES_AVAILABLE, RunStatistics())
    error: Exception | None = None

    def __init__(self, context, services, *, show: bool = False) -> None:
        self.context = context
        self.services = services
        self.show = show
        RecordingOrchestrator.instances.append(self)

    def execute(self) -> RunResult:
        if self.error is not None:
            raise self.error
        return self.result


@pytest.fixture
def orchestrator(monkeypatch: pytest.MonkeyPatch) -> type[RecordingOrchestrator]:
    RecordingOrchestrator.instances = []
    RecordingOrchestrator.result = RunResult.early_exit(ExitReason.NO_UPDATES_AVAILABLE, RunStatistics())
    RecordingOrchestrator.error = None
    monkeypatch.setattr("depguard.cli.commands.update.command.WorkflowOrchestrator", RecordingOrchestrator)
    monkeypatch.setattr("depguard.cli.commands.update.command.build_services", lambda context: "services")
    return RecordingOrchestrator


@pytest.fixture
def tools_present(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr("depguard.cli.commands.shared.check_prerequisites", lambda **_kwargs: [])


def test_help_lists_commands() -> None:
    result = runner.invoke(app, ["--help"])

    assert result.exit_code == 0
    for command in ("add", "doctor", "install", "update"):
        assert command in result.output


@pytest.mark.usefixtures("tools_present")
def test_update_applies_cli_overrides(write_manifest, orchestrator) -> None:
    root = write_manifest()

    result = runner.invoke(
        app,
        ["update", "--root", str(root), "--days", "3", "--lint", "check", "--allow-npm-install", "--no-emoji"],
    )

    assert result.exit_code == 0, result.output
    (instance,) = orchestrator.instances
    assert instance.services == "services"
    assert instance.show is False
    assert instance.context.root == root.resolve()
    assert instance.context.safety_buffer_days == 3
    assert instance.context.config.scripts.lint == "check"
    assert instance.context.config.use_npm_fallback is True
    assert 'lint: "check"' in result.output


@pytest.mark.usefixtures("tools_present")
def test_update_exit_code_follows_run_result(write_manifest, orchestrator) -> None:
    orchestrator.result = RunResult.cancelled(RunStatistics())

    result = runner.invoke(app, ["update", "--root", str(write_manifest()), "--show"])

    assert result.exit_code == 130
    assert orchestrator.instances[0].show is True
    assert "were not found in package.json" not in result.output


@pytest.mark.usefixtures("tools_present")
def test_update_reports_fatal_errors(write_manifest, orchestrator) -> None:
    orchestrator.error = DiscoveryError("npm-check-updates failed: boom")

    result = runner.invoke(app, ["update", "--root", str(write_manifest()), "--no-emoji"])

    assert result.exit_code == 1
    assert "npm-check-updates failed: boom" in result.output


@pytest.mark.usefixtures("tools_present")
def test_update_requires_package_json(tmp_path: Path, orchestrator) -> None:
    result = runner.invoke(app, ["update", "--root", str(tmp_path)])

    assert result.exit_code == 1
    assert "No package.json found" in result.output
    assert orchestrator.instances == []


@pytest.mark.usefixtures("tools_present")
def test_update_rejects_invalid_configuration(write_manifest, orchestrator) -> None:
    root = write_manifest()
    (root / ".depguard.toml").write_text("prompt_page_size = 0\n", encoding="utf-8")

    result = runner.invoke(app, ["update", "--root", str(root)])

    assert result.exit_code == 1
    assert "Configuration invalid" in result.output


def test_update_refuses_to_start_without_tools(write_manifest, orchestrator, monkeypatch) -> None:
    monkeypatch.setattr("depguard.cli.commands.shared.check_prerequisites", lambda **_kwargs: [SCFW])

    result = runner.invoke(app, ["update", "--root", str(write_manifest())])

    assert result.exit_code == 1
    assert "scfw not found" in result.output
    assert orchestrator.instances == []


@pytest.mark.usefixtures("tools_present")
def test_add_passes_parsed_spec_and_exit_code(write_manifest, monkeypatch) -> None:
    seen = {}

    def fake_run_add(context, spec):
        seen["context"] = context
        seen["spec"] = spec
        return AddResult(success=False, exit_code=130, error_message="User cancelled")

    monkeypatch.setattr("depguard.cli.commands.add.command._run_add", fake_run_add)

    result = runner.invoke(
        app,
        ["add", "@types/node@20.1.0", "--save-dev", "--days", "14", "-r", str(write_manifest())],
    )

    assert result.exit_code == 130
    assert seen["spec"].name == "@types/node"
    assert seen["spec"].version == "20.1.0"
    assert seen["spec"].save_dev is True
    assert seen["context"].safety_buffer_days == 14


@pytest.mark.usefixtures("tools_present")
def test_install_runs_fresh_install_with_overrides(write_manifest, monkeypatch) -> None:
    seen = {}

    def fake_bootstrap(context):
        seen["context"] = context
        return RunResult.early_exit(ExitReason.NO_PACKAGES_SELECTED, RunStatistics())

    monkeypatch.setattr("depguard.cli.commands.install.command._run_bootstrap", fake_bootstrap)

    result = runner.invoke(app, ["install", "--root", str(write_manifest()), "--days", "10", "--allow-npm-install"])

    assert result.exit_code == 0, result.output
    assert seen["context"].safety_buffer_days == 10
    assert seen["context"].config.use_npm_fallback is True
    assert "Safety buffer: 10 days" in result.output


@pytest.mark.usefixtures("tools_present")
def test_install_exit_code_follows_run_result(write_manifest, monkeypatch) -> None:
    monkeypatch.setattr(
        "depguard.cli.commands.install.command._run_bootstrap",
        lambda context: RunResult.cancelled(RunStatistics()),
    )

    result = runner.invoke(app, ["install", "--root", str(write_manifest())])

    assert result.exit_code == 130


def test_add_rejects_malformed_package(write_manifest) -> None:
    result = runner.invoke(app, ["add", "Not A Package", "--root", str(write_manifest())])

    assert result.exit_code == 2


def test_doctor_reports_missing_tools(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.setattr("depguard.cli.commands.doctor.command.check_prerequisites", lambda **_kwargs: [NPQ])

    result = runner.invoke(app, ["doctor", "--root", str(tmp_path), "--no-emoji"])

    assert result.exit_code == 1
    assert "npq not found" in result.output
    assert "npm install -g npq" in result.output


def test_doctor_succeeds_when_tools_are_present(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.setattr("depguard.cli.commands.doctor.command.check_prerequisites", lambda **_kwargs: [])

    result = runner.invoke(app, ["doctor", "--root", str(tmp_path), "--allow-npm-install"])

    assert result.exit_code == 0
    assert "All required tools are available" in result.output
    assert "scfw" not in result.output
