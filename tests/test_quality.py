# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for post-update quality checks."""

from __future__ import annotations

import pytest

from depguard.config import ScriptNames
from depguard.manifest import ManifestReader
from depguard.models import ServiceResult
from depguard.quality import QualityRunner, validate_scripts


def test_validate_scripts_warns_about_missing_scripts(capsys: pytest.CaptureFixture[str]) -> None:
    manifest = ManifestReader({"scripts": {"lint": "eslint .", "check": "tsc"}})

    available = validate_scripts(manifest, ScriptNames(typecheck="check"), use_emoji=False)

    assert available == {"lint": True, "typecheck": True, "test": False, "build": False}
    output = capsys.readouterr().out
    assert 'test: "test"' in output
    assert 'build: "build"' in output


def test_run_all_records_each_outcome(make_context, prompter_factory, runner_factory) -> None:
    context = make_context({"scripts": {"lint": "eslint .", "test": "vitest"}})
    runner = runner_factory({"npm run test": 1})
    quality = QualityRunner(context, prompter_factory(confirms=[True, True]), runner=runner)

    results = quality.run_all()

    assert results == {
        "lint": ServiceResult.SUCCEEDED,
        "typecheck": ServiceResult.SKIPPED,
        "test": ServiceResult.FAILED,
    }
    assert runner.commands == [("npm", "run", "lint"), ("npm", "run", "test")]


def test_run_build_uses_configured_script_and_honours_decline(make_context, prompter_factory, runner_factory) -> None:
    context = make_context({"scripts": {"compile": "tsc -b"}}, scripts=ScriptNames(build="compile"))
    runner = runner_factory()

    declined = QualityRunner(context, prompter_factory(confirms=[False]), runner=runner)
    accepted = QualityRunner(context, prompter_factory(confirms=[True]), runner=runner)

    assert declined.run_build() is ServiceResult.SKIPPED
    assert accepted.run_build() is ServiceResult.SUCCEEDED
    assert runner.commands == [("npm", "run", "compile")]
