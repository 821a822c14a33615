from __future__ import annotations

import json
import os
from pathlib import Path

import nox

nox.options.default_venv_backend = "uv|virtualenv"
nox.options.reuse_existing_virtualenvs = True

PY311 = "3.11"
PY312 = "3.12"
PY313 = "3.13"
PY_VERSIONS = [PY311, PY312, PY313]
PY_DEFAULT = PY_VERSIONS[0]
PY_LATEST = PY_VERSIONS[-1]


def split_posargs(posargs: list[str]) -> list[str]:
    args = []
    for arg in posargs:
        if arg:
            args.extend(arg.split(" "))
    return args


@nox.session
def test(session):
    session.notify(f"tests-{PY_DEFAULT}")


@nox.session(python=PY_VERSIONS)
def tests(session):
    session.install("-e", ".[test]")
    session.run("pytest", *split_posargs(session.posargs))


@nox.session
def lint(session):
    for command in (["check", "."], ["format", "--check", "."]):
        session.run(
            "uv",
            "run",
            "--no-project",
            "--with",
            "ruff",
            "--python",
            PY_LATEST,
            "ruff",
            *command,
            external=True,
        )


@nox.session
def gha_matrix(session):
    os_args = session.posargs[0] if session.posargs else ""
    os_list = [os.strip() for os in os_args.split(",") if os_args.strip()] or [
        "ubuntu-latest"
    ]

    sessions = session.run("nox", "-l", "--json", external=True, silent=True)
    versions_list = [
        {"python-version": session["python"]}
        for session in json.loads(sessions)
        if session["name"] == "tests"
    ]

    include_list = []
    for os_name in os_list:
        for combo in versions_list:
            include_list.append({**combo, "os": os_name})

    matrix = {"include": include_list}

    if os.environ.get("GITHUB_OUTPUT"):
        with Path(os.environ["GITHUB_OUTPUT"]).open("a") as fh:
            print(f"matrix={matrix}", file=fh)
    else:
        print(matrix)
