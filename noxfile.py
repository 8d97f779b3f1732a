"""Nox sessions orchestrating the notification platform unit suites."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable

import nox


PYTHON_VERSIONS = ["3.11"]
PROJECT_ROOT = Path(__file__).parent

nox.options.sessions = [
    "tests_unit_logging",
    "tests_unit_notifications",
    "tests_unit_messaging",
    "tests_unit_api",
]


def _install_test_requirements(session: nox.Session) -> None:
    """Install the project with its test extra inside the session environment."""

    session.install("-e", f"{PROJECT_ROOT}[test]")


def _normalize_pythonpath(existing: str | None) -> str:
    parts = [str(PROJECT_ROOT)]
    if existing:
        parts.append(existing)
    return ":".join(part for part in parts if part)


def _build_env(session: nox.Session) -> dict[str, str]:
    env = dict(session.env)
    env["PYTHONPATH"] = _normalize_pythonpath(env.get("PYTHONPATH"))
    return env


def _run_suite(session: nox.Session, suite: str, targets: Iterable[str]) -> None:
    _install_test_requirements(session)

    env = _build_env(session)
    args = [
        "coverage",
        "run",
        f"--data-file=.coverage.{suite}",
        "--source=logging_lib,app_platform,domains,application,adapters,apps",
        "-m",
        "pytest",
        *targets,
        *session.posargs,
    ]

    session.log("Running %s suite: %s", suite, " ".join(targets))
    session.run(*args, env=env)
    session.run("coverage", "report", f"--data-file=.coverage.{suite}", env=env)


@nox.session(python=PYTHON_VERSIONS, reuse_venv=True, name="tests(unit_logging)")
def tests_unit_logging(session: nox.Session) -> None:
    """Execute logging library unit suites."""

    _run_suite(session, "logging", ["tests/unit/logging"])


@nox.session(python=PYTHON_VERSIONS, reuse_venv=True, name="tests(unit_notifications)")
def tests_unit_notifications(session: nox.Session) -> None:
    """Execute orchestrator, registry, store and channel suites."""

    _run_suite(session, "notifications", ["tests/unit/notifications"])


@nox.session(python=PYTHON_VERSIONS, reuse_venv=True, name="tests(unit_messaging)")
def tests_unit_messaging(session: nox.Session) -> None:
    """Execute SSE hub, breaker and Redis mirror suites."""

    _run_suite(session, "messaging", ["tests/unit/messaging"])


@nox.session(python=PYTHON_VERSIONS, reuse_venv=True, name="tests(unit_api)")
def tests_unit_api(session: nox.Session) -> None:
    """Execute API route suites against the Flask test client."""

    _run_suite(session, "api", ["tests/unit/api"])
