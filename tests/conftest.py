"""
Pytest configuration and shared fixtures for fbupload tests.

This module provides reusable fixtures and test utilities used across
the test suite, including a scripted in-memory transport.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

import pytest
import yaml

from fbupload.auth.credentials import Credential
from fbupload.io.transport import Body

BASE_URL = "https://fb.example.com"


@dataclass
class RecordedCall:
    """One request seen by FakeTransport."""

    method: str
    url: str
    headers: dict[str, str]
    body: Body


class FakeTransport:
    """
    Transport that replays scripted raw responses in order.

    Each scripted item is either raw transport text (body + status code in
    the transport's convention) or an exception instance to raise.
    """

    def __init__(
        self, responses: list[Any], convention: str = "trailing", verbose: bool = False
    ) -> None:
        self.convention = convention
        self.verbose = verbose
        self.responses = list(responses)
        self.calls: list[RecordedCall] = []

    def execute(
        self, method: str, url: str, headers: dict[str, str], body: Body = None
    ) -> str:
        self.calls.append(RecordedCall(method, url, dict(headers), body))
        if not self.responses:
            raise AssertionError(f"unexpected request: {method} {url}")
        item = self.responses.pop(0)
        if isinstance(item, Exception):
            raise item
        return item


class RecordingLogger:
    """Logger that keeps every message for assertions."""

    def __init__(self) -> None:
        self.steps: list[tuple[int, int, str]] = []
        self.messages: list[tuple[str, str]] = []

    def step(self, step: int, total: int, message: str) -> None:
        self.steps.append((step, total, message))

    def verbose(self, prefix: str, message: str) -> None:
        self.messages.append((prefix, message))

    def debug(self, prefix: str, message: str) -> None:
        self.messages.append((prefix, message))

    def all_text(self) -> str:
        lines = [m for _, _, m in self.steps] + [m for _, m in self.messages]
        return "\n".join(lines)


@pytest.fixture
def tmp_test_dir(tmp_path: Path) -> Path:
    """
    Provide a temporary directory for test artifacts.

    Automatically cleaned up after test completion.
    """
    return tmp_path


@pytest.fixture
def base_url() -> str:
    """Provide the FileBrowser base URL used throughout the tests."""
    return BASE_URL


@pytest.fixture
def sample_file(tmp_test_dir: Path) -> Path:
    """Provide a small local file to upload."""
    path = tmp_test_dir / "report.txt"
    path.write_bytes(b"quarterly numbers\n")
    return path


@pytest.fixture
def credential() -> Credential:
    """Provide a login credential with a recognizable password."""
    return Credential(username="deploy", password="s3cret-Pa55")


@pytest.fixture
def fake_transport():
    """
    Factory fixture for scripted transports.

    Usage:
        transport = fake_transport(['{"token":"abc"}200', "201"])
    """

    def _create(
        responses: list[Any], convention: str = "trailing", verbose: bool = False
    ) -> FakeTransport:
        return FakeTransport(responses, convention=convention, verbose=verbose)

    return _create


@pytest.fixture
def recording_logger() -> RecordingLogger:
    """Provide a logger that records every call."""
    return RecordingLogger()


@pytest.fixture
def create_yaml_file(tmp_test_dir: Path):
    """
    Factory fixture for creating temporary YAML files.

    Usage:
        yaml_path = create_yaml_file("profile.yaml", {"server": {...}})
    """

    def _create(filename: str, data: dict[str, Any]) -> Path:
        path = tmp_test_dir / filename
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w", encoding="utf-8") as f:
            yaml.dump(data, f)
        return path

    return _create
