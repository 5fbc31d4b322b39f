# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Shared pytest fixtures."""

from __future__ import annotations

import io
import json
import subprocess
from collections.abc import Callable, Iterable, Mapping, Sequence
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

import pytest
from rich.console import Console

from depguard.config import DepGuardConfig
from depguard.context import RunContext
from depguard.errors import UserCancellationError
from depguard.manifest import ManifestReader

NOW = datetime(2025, 6, 15, 12, 0, tzinfo=UTC)

DEFAULT_MANIFEST: dict[str, Any] = {
    "name": "demo",
    "scripts": {"lint": "eslint .", "typecheck": "tsc", "test": "vitest", "build": "vite build"},
    "dependencies": {"lodash": "^4.17.0", "react": "^18.2.0"},
    "devDependencies": {"typescript": "~5.4.2"},
}


class FakeResponse:
    def __init__(self, status_code: int = 200, payload: Any = None, *, error: Exception | None = None) -> None:
        self.status_code = status_code
        self._payload = payload
        self._error = error

    def json(self) -> Any:
        if self._error is not None:
            raise self._error
        return self._payload


class FakeSession:
    """Replay queued responses (or exceptions) per URL and record every request."""

    def __init__(self, responses: Mapping[str, Sequence[FakeResponse | Exception]]) -> None:
        self._responses = {url: list(queue) for url, queue in responses.items()}
        self.calls: list[tuple[str, float]] = []

    def get(self, url: str, *, timeout: float) -> FakeResponse:
        self.calls.append((url, timeout))
        queue = self._responses[url]
        item = queue.pop(0) if len(queue) > 1 else queue[0]
        if isinstance(item, Exception):
            raise item
        return item


class RecordingRunner:
    def __init__(self, returncodes: Mapping[str, int] | None = None, stdout: str = "") -> None:
        self.calls: list[tuple[tuple[str, ...], Path | None]] = []
        self._returncodes = dict(returncodes or {})
        self._stdout = stdout

    def __call__(self, args: Sequence[str], cwd: Path | None) -> subprocess.CompletedProcess[str]:
        command = tuple(args)
        self.calls.append((command, cwd))
        joined = " ".join(command)
        prefixes = sorted((key for key in self._returncodes if joined.startswith(key)), key=len, reverse=True)
        returncode = self._returncodes[prefixes[0]] if prefixes else 0
        return subprocess.CompletedProcess(args=list(command), returncode=returncode, stdout=self._stdout, stderr="")

    @property
    def commands(self) -> list[tuple[str, ...]]:
        return [command for command, _ in self.calls]


class ScriptedPrompter:
    """Prompter double answering from queues; ``cancel`` raises on the next prompt."""

    def __init__(
        self,
        *,
        confirms: Iterable[bool] = (),
        answers: Iterable[str] = (),
        choices: Iterable[str] = (),
        cancel: bool = False,
    ) -> None:
        self.console = Console(file=io.StringIO(), width=120)
        self._confirms = list(confirms)
        self._answers = list(answers)
        self._choices = list(choices)
        self._cancel = cancel
        self.messages: list[str] = []

    def _record(self, message: str) -> None:
        self.messages.append(message)
        if self._cancel:
            raise UserCancellationError(KeyboardInterrupt())

    def confirm(self, message: str, *, default: bool = False) -> bool:
        self._record(message)
        return self._confirms.pop(0) if self._confirms else default

    def ask(self, message: str, *, default: str = "") -> str:
        self._record(message)
        return self._answers.pop(0) if self._answers else default

    def choose(self, message: str, options: Mapping[str, str], *, default: str) -> str:
        self._record(message)
        return self._choices.pop(0) if self._choices else default


def registry_document(published: Mapping[str, datetime]) -> dict[str, Any]:
    return {
        "versions": {version: {} for version in published},
        "time": {
            "created": "2010-01-01T00:00:00.000Z",
            **{version: stamp.isoformat().replace("+00:00", "Z") for version, stamp in published.items()},
        },
    }


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def write_manifest(tmp_path: Path) -> Callable[..., Path]:
    def _write(data: Mapping[str, Any] | None = None) -> Path:
        (tmp_path / "package.json").write_text(json.dumps(data or DEFAULT_MANIFEST), encoding="utf-8")
        return tmp_path

    return _write


@pytest.fixture
def make_context(tmp_path: Path) -> Callable[..., RunContext]:
    def _make(
        manifest: Mapping[str, Any] | None = None,
        *,
        config: DepGuardConfig | None = None,
        **config_values: Any,
    ) -> RunContext:
        resolved = config or DepGuardConfig(**config_values)
        reader = ManifestReader(manifest if manifest is not None else DEFAULT_MANIFEST, path=tmp_path / "package.json")
        return RunContext.build(tmp_path, resolved, manifest=reader, now=NOW, use_emoji=False)

    return _make


@pytest.fixture
def runner_factory() -> type[RecordingRunner]:
    return RecordingRunner


@pytest.fixture
def prompter_factory() -> type[ScriptedPrompter]:
    return ScriptedPrompter


@pytest.fixture
def session_factory() -> type[FakeSession]:
    return FakeSession


@pytest.fixture
def response_factory() -> type[FakeResponse]:
    return FakeResponse


@pytest.fixture
def registry_doc() -> Callable[[Mapping[str, datetime]], dict[str, Any]]:
    return registry_document
