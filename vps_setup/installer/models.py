# vps_setup/installer/models.py
# -*- coding: utf-8 -*-
"""
Value types shared by the detector, dispatcher and batch orchestrator.
"""

from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class Status(BaseModel):
    """
    Snapshot of one component's state at one point in time.

    A new instance is produced by every status query; instances are never
    reused across actions.
    """

    model_config = ConfigDict(frozen=True)

    installed: bool = False
    active: bool = False
    version: Optional[str] = None

    @model_validator(mode="before")
    @classmethod
    def _inactive_when_absent(cls, data: Any) -> Any:
        # A component that is not installed cannot be running.
        if isinstance(data, dict) and not data.get("installed"):
            data = {**data, "active": False}
        return data

    @property
    def label(self) -> str:
        if not self.installed:
            return "not installed"
        state = "active" if self.active else "inactive"
        return f"{state} ({self.version})" if self.version else state


NOT_INSTALLED = Status()


class ExecutionMode(str, Enum):
    INTERACTIVE = "interactive"
    UNATTENDED = "unattended"


class Action(BaseModel):
    """A (component id, verb, mode) request submitted to the dispatcher."""

    model_config = ConfigDict(frozen=True)

    component_id: str
    verb: str
    mode: ExecutionMode = ExecutionMode.INTERACTIVE


class ActionResult(BaseModel):
    """Outcome of a dispatched action."""

    model_config = ConfigDict(frozen=True)

    action: Action
    exit_code: Optional[int] = None
    error: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return self.error is None and self.exit_code == 0


class BatchPhase(str, Enum):
    SNAPSHOT_BEFORE = "snapshot_before"
    RUN_EACH = "run_each"
    SNAPSHOT_AFTER = "snapshot_after"
    SUMMARIZE = "summarize"


class BatchSummary(BaseModel):
    """
    Result of the "install everything" flow.

    Every component of the batch set appears in exactly one of
    newly_installed, already_present or failed.
    """

    components: List[str] = Field(default_factory=list)
    before: Dict[str, Status] = Field(default_factory=dict)
    after: Dict[str, Status] = Field(default_factory=dict)
    newly_installed: List[str] = Field(default_factory=list)
    already_present: List[str] = Field(default_factory=list)
    failed: Dict[str, str] = Field(default_factory=dict)
    results: Dict[str, ActionResult] = Field(default_factory=dict)
    preparatory: List[ActionResult] = Field(default_factory=list)
    phases: List[BatchPhase] = Field(default_factory=list)

    @property
    def succeeded(self) -> bool:
        return not self.failed
