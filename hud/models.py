"""Pydantic models for host input, transcript state and render context."""
from __future__ import annotations

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from hud.config import HudConfig


# ── Transcript models ───────────────────────────────────────────────

class ToolEntry(BaseModel):
    name: str
    target: Optional[str] = None
    status: Literal["running", "completed", "error"] = "running"
    startTime: datetime
    endTime: Optional[datetime] = None


class AgentEntry(BaseModel):
    type: str = "unknown"
    model: Optional[str] = None
    description: Optional[str] = None
    status: Literal["running", "completed"] = "running"
    startTime: datetime
    endTime: Optional[datetime] = None


class TodoEntry(BaseModel):
    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True)

    id: str = ""
    content: str = ""
    status: Literal["pending", "in_progress", "completed"] = "pending"

    @field_validator("status", mode="before")
    @classmethod
    def _unknown_status_is_pending(cls, value: object) -> object:
        if value not in ("pending", "in_progress", "completed"):
            return "pending"
        return value


class SkillRecord(BaseModel):
    name: str
    timestamp: datetime


class SessionState(BaseModel):
    """Mutable aggregate built while reading one transcript.

    `tools` and `agents` rely on dict insertion order: the last entries are
    the most recently started invocations.
    """

    tools: dict[str, ToolEntry] = Field(default_factory=dict)
    agents: dict[str, AgentEntry] = Field(default_factory=dict)
    todos: list[TodoEntry] = Field(default_factory=list)
    sessionStart: Optional[datetime] = None
    toolCallCount: int = 0
    agentCallCount: int = 0
    skillCallCount: int = 0
    isThinking: bool = False
    lastSkill: Optional[SkillRecord] = None

    def snapshot(self, max_tools: int, max_agents: int) -> SessionSnapshot:
        return SessionSnapshot(
            tools=_tail(list(self.tools.values()), max_tools),
            agents=_tail(list(self.agents.values()), max_agents),
            todos=list(self.todos),
            sessionStart=self.sessionStart,
            toolCallCount=self.toolCallCount,
            agentCallCount=self.agentCallCount,
            skillCallCount=self.skillCallCount,
            isThinking=self.isThinking,
            lastSkill=self.lastSkill,
        )


class SessionSnapshot(BaseModel):
    """Bounded, display-ready summary returned by one parse."""

    tools: list[ToolEntry] = Field(default_factory=list)
    agents: list[AgentEntry] = Field(default_factory=list)
    todos: list[TodoEntry] = Field(default_factory=list)
    sessionStart: Optional[datetime] = None
    toolCallCount: int = 0
    agentCallCount: int = 0
    skillCallCount: int = 0
    isThinking: bool = False
    lastSkill: Optional[SkillRecord] = None

    @classmethod
    def empty(cls) -> SessionSnapshot:
        return cls()


class CachedTranscriptState(BaseModel):
    toolCallCount: int = 0
    agentCallCount: int = 0
    skillCallCount: int = 0
    sessionStart: Optional[datetime] = None
    isThinking: bool = False
    lastSkill: Optional[SkillRecord] = None
    tools: list[tuple[str, ToolEntry]] = Field(default_factory=list)
    agents: list[tuple[str, AgentEntry]] = Field(default_factory=list)
    todos: list[TodoEntry] = Field(default_factory=list)

    @classmethod
    def from_state(cls, state: SessionState, max_tools: int, max_agents: int) -> CachedTranscriptState:
        return cls(
            toolCallCount=state.toolCallCount,
            agentCallCount=state.agentCallCount,
            skillCallCount=state.skillCallCount,
            sessionStart=state.sessionStart,
            isThinking=state.isThinking,
            lastSkill=state.lastSkill,
            tools=_tail(list(state.tools.items()), max_tools),
            agents=_tail(list(state.agents.items()), max_agents),
            todos=list(state.todos),
        )

    def to_state(self) -> SessionState:
        return SessionState(
            tools=dict(self.tools),
            agents=dict(self.agents),
            todos=list(self.todos),
            sessionStart=self.sessionStart,
            toolCallCount=self.toolCallCount,
            agentCallCount=self.agentCallCount,
            skillCallCount=self.skillCallCount,
            isThinking=self.isThinking,
            lastSkill=self.lastSkill,
        )


class TranscriptCache(BaseModel):
    filePath: str
    fileSize: int = Field(ge=0)
    data: CachedTranscriptState = Field(default_factory=CachedTranscriptState)


def _tail(items: list, limit: int) -> list:
    if limit <= 0:
        return []
    return items[-limit:]


# ── Host input ──────────────────────────────────────────────────────

class ModelInfo(BaseModel):
    display_name: str = ""


class CurrentUsage(BaseModel):
    input_tokens: int = 0
    cache_creation_input_tokens: int = 0
    cache_read_input_tokens: int = 0


class ContextWindow(BaseModel):
    context_window_size: int = 0
    current_usage: Optional[CurrentUsage] = None


class CostInfo(BaseModel):
    total_cost_usd: float = 0.0


class StdinInput(BaseModel):
    model_config = ConfigDict(extra="ignore", protected_namespaces=())

    model: ModelInfo = Field(default_factory=ModelInfo)
    context_window: ContextWindow = Field(default_factory=ContextWindow)
    cost: CostInfo = Field(default_factory=CostInfo)
    cwd: Optional[str] = None
    transcript_path: Optional[str] = None


# ── Auxiliary lookups ───────────────────────────────────────────────

class RateLimitInfo(BaseModel):
    utilization: float = 0.0
    resets_at: Optional[str] = None


class UsageLimits(BaseModel):
    five_hour: Optional[RateLimitInfo] = None
    seven_day: Optional[RateLimitInfo] = None
    seven_day_sonnet: Optional[RateLimitInfo] = None


class ConfigCounts(BaseModel):
    claudeMdCount: int = 0
    rulesCount: int = 0
    mcpCount: int = 0
    hooksCount: int = 0


class RenderContext(BaseModel):
    stdin: StdinInput
    config: HudConfig = Field(default_factory=HudConfig)
    transcript: SessionSnapshot = Field(default_factory=SessionSnapshot)
    configCounts: ConfigCounts = Field(default_factory=ConfigCounts)
    gitBranch: Optional[str] = None
    sessionDuration: str = ""
    rateLimits: Optional[UsageLimits] = None
