"""Each public package must import on its own in a fresh interpreter."""

from __future__ import annotations

import os
import subprocess
import sys
from pathlib import Path

import pytest

SRC = Path(__file__).resolve().parents[2] / "src"


@pytest.mark.parametrize(
    "module",
    [
        "immotax.backend.services",
        "immotax.backend.services.request_parser",
        "immotax.backend.app.services",
        "immotax.backend.app.services.simulation_service",
        "immotax.backend.app.services.calculators",
        "immotax.backend.app",
        "immotax.backend.passenger_wsgi",
    ],
)
def test_module_imports_in_isolation(module: str) -> None:
    env = dict(os.environ)
    env["PYTHONPATH"] = os.pathsep.join(
        filter(None, [str(SRC), env.get("PYTHONPATH")])
    )

    completed = subprocess.run(
        [sys.executable, "-W", "ignore", "-c", f"import {module}"],
        capture_output=True,
        text=True,
        env=env,
        check=False,
    )

    assert completed.returncode == 0, completed.stderr
