import os
import subprocess
import sys
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]


class TestFreshImports:
    """Every public module imports on its own in a new interpreter."""

    @pytest.mark.parametrize(
        "statement",
        [
            "from recall.schemas import CardCreate, CardView",
            "import recall.sm2",
            "from recall.sm2.database import create_card",
            "from recall.sm2.review_service import submit_review",
            "from recall.sm2.scheduler import schedule",
        ],
    )
    def test_module_imports_first(self, statement):
        env = dict(os.environ)
        env["PYTHONPATH"] = os.pathsep.join(filter(None, [str(PROJECT_ROOT), env.get("PYTHONPATH")]))

        result = subprocess.run(
            [sys.executable, "-c", statement],
            cwd=PROJECT_ROOT,
            env=env,
            capture_output=True,
            text=True,
        )

        assert result.returncode == 0, result.stderr
