"""Health endpoint models."""

from __future__ import annotations

from enum import Enum

from pydantic import Field

from .base import ConsulModel
from .catalog import Node
from .check import HealthCheck
from .service import AgentService


class CheckState(str, Enum):
    ANY = "any"
    PASSING = "passing"
    WARNING = "warning"
    CRITICAL = "critical"


class ServiceEntry(ConsulModel):
    """A node, one service instance on it, and the checks that cover both."""

    node: Node | None = None
    service: AgentService | None = None
    checks: list[HealthCheck] = Field(default_factory=list)

    @property
    def aggregated_status(self) -> str:
        statuses = {check.status for check in self.checks}
        for status in ("critical", "warning", "maintenance"):
            if status in statuses:
                return status
        return "passing"
