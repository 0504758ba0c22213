"""Alembic migration tests.

File named test_zzz_alembic.py to sort LAST in pytest collection order.
"""

import os
import subprocess
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]


def _alembic(tmp_path: Path, *args: str) -> subprocess.CompletedProcess[str]:
    env = {**os.environ, "SKILLSWAP_DATABASE_URL": f"sqlite+aiosqlite:///{tmp_path / 'migrated.db'}"}
    return subprocess.run(
        [sys.executable, "-m", "alembic", *args],
        capture_output=True,
        text=True,
        cwd=PROJECT_ROOT,
        env=env,
    )


def test_alembic_upgrade_head(tmp_path: Path) -> None:
    """alembic upgrade head succeeds without errors."""
    result = _alembic(tmp_path, "upgrade", "head")
    assert result.returncode == 0, f"alembic upgrade failed: {result.stderr}"


def test_alembic_current_shows_head(tmp_path: Path) -> None:
    """alembic current shows the latest revision."""
    assert _alembic(tmp_path, "upgrade", "head").returncode == 0
    result = _alembic(tmp_path, "current")
    assert result.returncode == 0
    assert "001_initial_schema" in result.stdout
