import httpx
import pytest
from sqlalchemy import select

from jetfund.exceptions import NotAuthorizedError, NotFoundError, RuleViolationError
from jetfund.models.project import ProjectStatus
from jetfund.models.project_db import ProjectDB
from jetfund.models.work_session import SessionStatus
from jetfund.services.hackatime_service import HackatimeService
from jetfund.services.project_service import ProjectService

PROOF = ("https://github.com/ada/engine/commit/abc123", "https://cdn.example.com/shot.png")
ARTIFACTS = {
    "playable_url": "https://ada.itch.io/engine",
    "code_url": "https://github.com/ada/engine",
    "screenshot_url": "https://cdn.example.com/engine.png",
    "description": "A tiny jet engine simulator.",
}


async def _logged_session(session_service, clock, user_id, project_id, hours=2):
    started = await session_service.start_session(user_id, project_id)
    clock.advance(hours=hours)
    await session_service.finish_session(user_id, started.id)
    return await session_service.submit_proof(user_id, started.id, *PROOF)


def _hackatime_service(seconds_by_project):
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/api/v1/users/U0ADA/stats"
        projects = [
            {"name": name, "total_seconds": seconds} for name, seconds in seconds_by_project.items()
        ]
        return httpx.Response(200, json={"data": {"username": "ada", "projects": projects}})

    return HackatimeService(
        "https://hackatime.test/api/v1",
        client_factory=lambda: httpx.AsyncClient(transport=httpx.MockTransport(handler)),
    )


@pytest.mark.asyncio
async def test_create_project(project_service, projects, user):
    project = await project_service.create_project(user.id, "  Jet Engine  ", hackatime_project="  ")

    assert project.name == "Jet Engine"
    assert project.status == ProjectStatus.ACTIVE
    assert project.hackatime_project is None
    assert project.pending_hours == 0.0
    assert project.approved_hours == 0.0
    assert project.is_owned_by(user.id)

    # Verify it's in DB
    saved = await projects.get_project(project.id)
    assert saved.id == project.id


@pytest.mark.asyncio
async def test_create_project_requires_name(project_service, user):
    with pytest.raises(RuleViolationError, match="Missing name."):
        await project_service.create_project(user.id, "   ")


@pytest.mark.asyncio
async def test_list_user_projects_only_returns_own(project_service, user, other_user):
    await project_service.create_project(user.id, "Engine")
    await project_service.create_project(user.id, "Wings")
    await project_service.create_project(other_user.id, "Hull")

    listed = await project_service.list_user_projects(user.id)

    assert sorted(p.name for p in listed) == ["Engine", "Wings"]


@pytest.mark.asyncio
async def test_get_project_checks_owner(project_service, user, other_user):
    project = await project_service.create_project(user.id, "Engine")

    with pytest.raises(NotAuthorizedError):
        await project_service.get_project(other_user.id, project.id)
    with pytest.raises(NotFoundError):
        await project_service.get_project(user.id, "missing")


@pytest.mark.asyncio
async def test_edit_project(project_service, user):
    project = await project_service.create_project(user.id, "Engine")

    renamed = await project_service.edit_project(user.id, project.id, name="Turbofan")
    linked = await project_service.edit_project(user.id, project.id, hackatime_project="turbofan")
    unlinked = await project_service.edit_project(user.id, project.id, hackatime_project=None)

    assert renamed.name == "Turbofan"
    assert linked.hackatime_project == "turbofan"
    assert linked.name == "Turbofan"
    assert unlinked.hackatime_project is None


@pytest.mark.asyncio
async def test_edit_project_cannot_link_hackatime_after_manual_sessions(
    project_service, session_service, user, clock
):
    project = await project_service.create_project(user.id, "Engine")
    await _logged_session(session_service, clock, user.id, project.id)

    with pytest.raises(RuleViolationError, match="cannot be linked to Hackatime"):
        await project_service.edit_project(user.id, project.id, hackatime_project="engine")


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "status", [ProjectStatus.SUBMITTED, ProjectStatus.APPROVED, ProjectStatus.REJECTED]
)
async def test_edit_and_delete_locked_after_submission(project_service, projects, user, status):
    project = await project_service.create_project(user.id, "Engine")
    await projects.update_project_status(project.id, status)

    with pytest.raises(RuleViolationError, match="Only active projects can be edited."):
        await project_service.edit_project(user.id, project.id, name="Renamed")
    with pytest.raises(RuleViolationError, match="Only active projects can be deleted."):
        await project_service.delete_project(user.id, project.id)


@pytest.mark.asyncio
async def test_delete_project_removes_sessions(project_service, session_service, sessions, user, clock):
    project = await project_service.create_project(user.id, "Engine")
    await _logged_session(session_service, clock, user.id, project.id)

    await project_service.delete_project(user.id, project.id)

    with pytest.raises(NotFoundError):
        await project_service.get_project(user.id, project.id)
    assert await sessions.count_project_sessions(project.id) == 0


@pytest.mark.asyncio
async def test_submit_requires_artifacts(project_service, complete_user):
    project = await project_service.create_project(complete_user.id, "Engine")

    with pytest.raises(RuleViolationError) as exc_info:
        await project_service.submit_project(
            complete_user.id, project.id, **{**ARTIFACTS, "description": " "}
        )

    assert exc_info.value.extra["missing"] == ["description"]


@pytest.mark.asyncio
async def test_submit_requires_complete_profile(project_service, users, user):
    await users.update_profile(user.id, {"first_name": "Ada", "last_name": "Lovelace"})
    project = await project_service.create_project(user.id, "Engine")

    with pytest.raises(RuleViolationError, match="must be set in account settings") as exc_info:
        await project_service.submit_project(user.id, project.id, **ARTIFACTS)

    assert "birthday" in exc_info.value.extra["missing"]
    assert "address_line1" in exc_info.value.extra["missing"]
    refreshed = await project_service.get_project(user.id, project.id)
    assert refreshed.status == ProjectStatus.ACTIVE


@pytest.mark.asyncio
async def test_submit_blocked_by_in_flight_session(project_service, session_service, complete_user, clock):
    project = await project_service.create_project(complete_user.id, "Engine")
    started = await session_service.start_session(complete_user.id, project.id)
    clock.advance(hours=1)
    await session_service.finish_session(complete_user.id, started.id)

    with pytest.raises(RuleViolationError, match="Finish and submit your current session") as exc_info:
        await project_service.submit_project(complete_user.id, project.id, **ARTIFACTS)

    assert exc_info.value.extra["session"]["id"] == started.id


@pytest.mark.asyncio
async def test_submit_project(project_service, session_service, complete_user, clock):
    project = await project_service.create_project(complete_user.id, "Engine")
    await _logged_session(session_service, clock, complete_user.id, project.id, hours=2)

    submitted = await project_service.submit_project(complete_user.id, project.id, **ARTIFACTS)

    assert submitted.status == ProjectStatus.SUBMITTED
    assert submitted.playable_url == ARTIFACTS["playable_url"]
    assert submitted.description == ARTIFACTS["description"]
    assert submitted.pending_hours == 2.0
    assert submitted.session_pending_hours == 2.0
    assert submitted.approved_hours == 0.0
    assert submitted.hours_spent == 2.0

    listed = await session_service.list_sessions_for_project(complete_user.id, project.id)
    assert [s.status for s in listed] == [SessionStatus.SUBMITTED]
    assert await session_service.total_time_for_project(complete_user.id, project.id) == 2.0

    with pytest.raises(RuleViolationError, match="Project is already submitted."):
        await project_service.submit_project(complete_user.id, project.id, **ARTIFACTS)


@pytest.mark.asyncio
async def test_submit_project_snapshots_hackatime_hours(projects, sessions, users, complete_user):
    service = ProjectService(
        projects=projects,
        sessions=sessions,
        users=users,
        hackatime=_hackatime_service({"jet-engine": 5400, "other": 7200}),
    )
    project = await service.create_project(complete_user.id, "Engine", hackatime_project="jet-engine")

    submitted = await service.submit_project(complete_user.id, project.id, **ARTIFACTS)

    assert submitted.hackatime_hours == 1.5
    assert submitted.hackatime_pending_hours == 1.5
    assert submitted.pending_hours == 1.5

    approved = await projects.update_project_status(project.id, ProjectStatus.APPROVED)
    assert approved.hackatime_approved_hours == 1.5
    assert approved.approved_hours == 1.5
    assert approved.pending_hours == 0.0


@pytest.mark.asyncio
async def test_approved_sessions_roll_up(project_service, session_service, sessions, projects, complete_user, clock):
    project = await project_service.create_project(complete_user.id, "Engine")
    logged = await _logged_session(session_service, clock, complete_user.id, project.id, hours=3)
    await project_service.submit_project(complete_user.id, project.id, **ARTIFACTS)

    await sessions.update_status(logged.id, SessionStatus.APPROVED)
    approved = await projects.update_project_status(project.id, ProjectStatus.APPROVED)

    assert approved.session_approved_hours == 3.0
    assert approved.approved_hours == 3.0
    assert approved.pending_hours == 0.0


@pytest.mark.asyncio
async def test_reopen_disabled_by_default(project_service, projects, user):
    project = await project_service.create_project(user.id, "Engine")
    await projects.update_project_status(project.id, ProjectStatus.REJECTED, rejection_reason="Broken link")

    with pytest.raises(RuleViolationError, match="Rejected projects cannot be reopened."):
        await project_service.reopen_project(user.id, project.id)


@pytest.mark.asyncio
async def test_reopen_rejected_project(projects, sessions, users, user):
    service = ProjectService(projects=projects, sessions=sessions, users=users, allow_reopen=True)
    active = await service.create_project(user.id, "Engine")

    with pytest.raises(RuleViolationError, match="Only rejected projects can be reopened."):
        await service.reopen_project(user.id, active.id)

    await projects.update_project_status(active.id, ProjectStatus.REJECTED, rejection_reason="Broken link")
    reopened = await service.reopen_project(user.id, active.id)

    assert reopened.status == ProjectStatus.ACTIVE
    assert reopened.rejection_reason is None


@pytest.mark.asyncio
async def test_legacy_finished_status_reads_as_submitted(project_service, db_session, user):
    project = await project_service.create_project(user.id, "Engine")
    result = await db_session.execute(select(ProjectDB).where(ProjectDB.id == project.id))
    result.scalar_one().status = "finished"
    await db_session.commit()

    loaded = await project_service.get_project(user.id, project.id)

    assert loaded.status == ProjectStatus.SUBMITTED
