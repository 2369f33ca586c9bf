from __future__ import annotations

import os
import subprocess
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]


def _import(module: str, tmp_path: Path, **env: str) -> subprocess.CompletedProcess:
    environment = {
        **os.environ,
        "PYTHONPATH": str(ROOT),
        "DATABASE_URL": f"sqlite:///{tmp_path / 'entry.db'}",
        "CREATE_TABLES": "false",
        **env,
    }
    return subprocess.run(
        [sys.executable, "-c", f"import {module}"],
        cwd=tmp_path,
        env=environment,
        capture_output=True,
        text=True,
    )


@pytest.mark.parametrize(
    ("module", "env"),
    [
        (
            "tategaki.admin_main",
            {"SESSION_BACKEND": "signed", "SESSION_SECRET": "", "ADMIN_SESSION_SECRET": "x"},
        ),
        (
            "tategaki.main",
            {"SESSION_BACKEND": "signed", "SESSION_SECRET": "x", "ADMIN_SESSION_SECRET": ""},
        ),
    ],
)
def test_each_app_only_needs_its_own_secret(module: str, env: dict, tmp_path: Path) -> None:
    result = _import(module, tmp_path, **env)

    assert result.returncode == 0, result.stderr


def test_admin_app_refuses_to_start_without_secret(tmp_path: Path) -> None:
    result = _import("tategaki.admin_main", tmp_path, ADMIN_SESSION_SECRET="")

    assert result.returncode != 0
    assert "ConfigurationError" in result.stderr
