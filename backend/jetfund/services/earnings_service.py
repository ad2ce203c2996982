from __future__ import annotations

from collections.abc import Iterable

from jetfund.models.api import Earnings
from jetfund.models.project import Project
from jetfund.repositories.project_repository import ProjectRepository
from jetfund.repositories.user_repository import UserRepository
from jetfund.tools import round_half_up

DEFAULT_HOURS_TO_USD = 5.0


def calculate_earnings(
    projects: Iterable[Project],
    spent_usd: float,
    rate: float = DEFAULT_HOURS_TO_USD,
) -> Earnings:
    """Approved and pending payouts from project hour rollups.

    Money already paid out is deducted from the approved total only; pending
    work has not been paid and is never reduced.
    """
    approved_usd = 0.0
    pending_usd = 0.0
    for project in projects:
        approved_usd += project.approved_hours * rate
        pending_usd += project.pending_hours * rate

    approved_usd = max(0.0, approved_usd - (spent_usd or 0.0))
    return Earnings(
        approved_usd=round_half_up(approved_usd),
        pending_usd=round_half_up(pending_usd),
    )


class EarningsService:
    def __init__(
        self,
        projects: ProjectRepository,
        users: UserRepository,
        rate: float = DEFAULT_HOURS_TO_USD,
    ):
        self.projects = projects
        self.users = users
        self.rate = rate

    async def get_earnings(self, user_id: str) -> Earnings:
        user = await self.users.find_user(user_id)
        if user is None:
            return Earnings()
        projects = await self.projects.list_user_projects(user_id)
        return calculate_earnings(projects, user.spent_usd, self.rate)
