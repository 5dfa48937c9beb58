"""
Session context — the state one orchestrator session works against.

Holds the environment snapshot, the requests seen so far and the
plans built for them, keyed by id. Entry points create one context
and pass it to the orchestrator:

    - CLI:        main.py    → SessionContext(project_root=cwd)
    - Web server: server.py  → one context per app, shared by requests
    - Tests:      conftest   → SessionContext(environment=fake snapshot)

The orchestrator owns plan lifecycle. The execution engine only ever
sees the plan it was handed.
"""

from __future__ import annotations

import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from devsetup.core.errors import PlanBusyError
from devsetup.core.models.environment import EnvironmentSnapshot
from devsetup.core.models.plan import InstallationPlan
from devsetup.core.models.request import SetupRequest


class SessionContext:
    """Explicit session state, shared by reference."""

    def __init__(
        self,
        project_root: Path | None = None,
        environment: EnvironmentSnapshot | None = None,
    ):
        self.project_root = project_root or Path.cwd()
        self.environment = environment
        self.requests: dict[str, SetupRequest] = {}
        self.plans: dict[str, InstallationPlan] = {}
        self._lock = threading.Lock()
        self._running: set[str] = set()

    def remember(self, request: SetupRequest, plan: InstallationPlan) -> None:
        with self._lock:
            self.requests[request.id] = request
            self.plans[plan.id] = plan

    def request_for(self, plan: InstallationPlan) -> SetupRequest | None:
        return self.requests.get(plan.request_id)

    def is_running(self, plan_id: str) -> bool:
        with self._lock:
            return plan_id in self._running

    @contextmanager
    def running(self, plan_id: str) -> Iterator[None]:
        """Mark ``plan_id`` in flight for the duration of the block.

        Raises:
            PlanBusyError: If the plan is already in flight.
        """
        with self._lock:
            if plan_id in self._running:
                raise PlanBusyError(f"Plan {plan_id} is already running")
            self._running.add(plan_id)
        try:
            yield
        finally:
            with self._lock:
                self._running.discard(plan_id)
