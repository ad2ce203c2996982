from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class HackatimeProject(BaseModel):
    model_config = ConfigDict(extra="allow")

    name: str
    total_seconds: float = 0.0
    text: str | None = None
    hours: int | None = None
    minutes: int | None = None
    percent: float | None = None
    digital: str | None = None


class HackatimeUserStats(BaseModel):
    model_config = ConfigDict(extra="allow")

    username: str | None = None
    user_id: str | None = None
    total_seconds: float = 0.0
    human_readable_total: str | None = None
    projects: list[HackatimeProject] = Field(default_factory=list)

    def find_project(self, name: str) -> HackatimeProject | None:
        return next((project for project in self.projects if project.name == name), None)


class HackatimeStatsResponse(BaseModel):
    model_config = ConfigDict(extra="allow")

    data: HackatimeUserStats
    trust_factor: dict[str, object] | None = None
