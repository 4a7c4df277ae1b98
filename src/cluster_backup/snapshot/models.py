"""Records produced while walking the cluster."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


class StepResult(BaseModel):
    """Outcome of a single scope-level step (mkdir, list, get or write)."""

    scope: str = Field(..., description="What was attempted, e.g. list deployments in ns-a")
    ok: bool
    message: str = ""


class WalkReport(BaseModel):
    """Summary of one traversal over namespaces and resource kinds."""

    namespaces: list[str] = Field(default_factory=list)
    steps: list[StepResult] = Field(default_factory=list)
    files_written: dict[str, int] = Field(
        default_factory=dict,
        description="variant -> number of files written",
    )
    started_at: datetime = Field(default_factory=datetime.now)
    finished_at: datetime | None = None

    def record(self, scope: str, ok: bool, message: str = "") -> StepResult:
        step = StepResult(scope=scope, ok=ok, message=message)
        self.steps.append(step)
        return step

    def count_file(self, variant: str) -> None:
        self.files_written[variant] = self.files_written.get(variant, 0) + 1

    @property
    def failures(self) -> list[StepResult]:
        return [s for s in self.steps if not s.ok]

    @property
    def total_files(self) -> int:
        return sum(self.files_written.values())
