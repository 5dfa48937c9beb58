"""
Plan store — installation plans as JSON files.

Each plan lives in ``<state_dir>/plans/<plan_id>.json``. Writes are
atomic (write to temp file, then rename) so a crash mid-write never
leaves a half-written plan behind. Commands are not stored; they are
re-synthesized from the steps when a plan runs.
"""

from __future__ import annotations

import json
import logging
import os
import re
import tempfile
from pathlib import Path

from pydantic import ValidationError

from devsetup.core.models.plan import InstallationPlan

logger = logging.getLogger(__name__)

PLANS_DIR = "plans"

_PLAN_ID_RE = re.compile(r"^[A-Za-z0-9_-]+$")


class PlanStore:
    """Save, load and list plans under a state directory."""

    def __init__(self, state_dir: Path):
        self._dir = Path(state_dir) / PLANS_DIR

    @property
    def directory(self) -> Path:
        return self._dir

    def path_for(self, plan_id: str) -> Path:
        return self._dir / f"{plan_id}.json"

    def save_plan(self, plan: InstallationPlan) -> Path:
        """Write ``plan`` to disk, replacing any previous copy."""
        path = self.path_for(plan.id)
        path.parent.mkdir(parents=True, exist_ok=True)
        content = json.dumps(plan.model_dump(mode="json"), indent=2, ensure_ascii=False) + "\n"

        fd, tmp_path = tempfile.mkstemp(dir=path.parent, prefix=".plan_", suffix=".tmp")
        os.close(fd)
        tmp = Path(tmp_path)
        try:
            tmp.write_text(content, encoding="utf-8")
            tmp.replace(path)
        except OSError:
            tmp.unlink(missing_ok=True)
            raise
        logger.debug("Plan saved: %s", path)
        return path

    def load_plan(self, plan_id: str) -> InstallationPlan | None:
        """Load a plan by id, or None if missing or unreadable."""
        if not _PLAN_ID_RE.match(plan_id):
            return None
        path = self.path_for(plan_id)
        if not path.is_file():
            return None
        try:
            return InstallationPlan.model_validate_json(path.read_text(encoding="utf-8"))
        except (ValidationError, OSError) as e:
            logger.warning("Failed to load plan %s: %s", plan_id, e)
            return None

    def list_plans(self) -> list[InstallationPlan]:
        """All readable plans, oldest first."""
        if not self._dir.is_dir():
            return []
        plans: list[InstallationPlan] = []
        for f in sorted(self._dir.glob("*.json")):
            try:
                plans.append(InstallationPlan.model_validate_json(f.read_text(encoding="utf-8")))
            except (ValidationError, OSError):
                logger.debug("Skipping corrupt plan file: %s", f)
        plans.sort(key=lambda p: p.created_at)
        return plans
