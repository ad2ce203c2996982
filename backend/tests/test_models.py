from datetime import UTC, datetime, timedelta

import pytest

from jetfund.models.profile import UserAccount
from jetfund.models.project import ProjectStatus
from jetfund.models.work_session import SessionStatus, WorkSession
from jetfund.tools import ensure_utc, hours_between, round_half_up


def test_project_transitions():
    assert ProjectStatus.ACTIVE.can_transition_to(ProjectStatus.SUBMITTED)
    assert ProjectStatus.SUBMITTED.can_transition_to(ProjectStatus.APPROVED)
    assert ProjectStatus.SUBMITTED.can_transition_to(ProjectStatus.REJECTED)
    assert ProjectStatus.REJECTED.can_transition_to(ProjectStatus.ACTIVE)
    assert not ProjectStatus.ACTIVE.can_transition_to(ProjectStatus.APPROVED)
    assert not any(ProjectStatus.APPROVED.can_transition_to(status) for status in ProjectStatus)


def test_legacy_project_status():
    assert ProjectStatus("finished") is ProjectStatus.SUBMITTED
    with pytest.raises(ValueError):
        ProjectStatus("shipped")


def test_session_transitions():
    assert SessionStatus.ONGOING.can_transition_to(SessionStatus.FINISHED)
    assert SessionStatus.FINISHED.can_transition_to(SessionStatus.SUBMITTED)
    assert SessionStatus.REJECTED.can_transition_to(SessionStatus.FINISHED)
    assert not SessionStatus.ONGOING.can_transition_to(SessionStatus.SUBMITTED)
    assert not any(SessionStatus.APPROVED.can_transition_to(status) for status in SessionStatus)


def test_session_is_non_terminal():
    start = datetime(2026, 3, 14, 9, 0, tzinfo=UTC)
    ongoing = WorkSession(id="s1", user=["u1"], project=["p1"], start_time=start)
    stopped = ongoing.model_copy(
        update={"status": SessionStatus.FINISHED, "end_time": start + timedelta(hours=1)}
    )
    with_proof = stopped.model_copy(update={"git_commit_url": "https://git", "image_url": "https://img"})

    assert ongoing.is_non_terminal()
    assert stopped.is_non_terminal()
    assert not with_proof.is_non_terminal()


def test_user_account_profile_completeness():
    user = UserAccount(id="u1", slack_id="U0ADA", first_name="Ada", last_name=" ", city="London")

    missing = user.missing_profile_fields()

    assert "last_name" in missing
    assert "birthday" in missing
    assert "city" not in missing
    assert user.has_address is False


def test_sanitized_profile_has_no_address():
    user = UserAccount(
        id="u1",
        slack_id="U0ADA",
        address_line1="1 Analytical Way",
        city="London",
        state="Greater London",
        postal_code="N1 9GU",
        country="United Kingdom",
    )

    profile = user.sanitized().model_dump()

    assert profile["has_address"] is True
    assert "address_line1" not in profile
    assert "city" not in profile


def test_time_math():
    start = datetime(2026, 3, 14, 9, 0)

    assert ensure_utc(start).tzinfo is UTC
    assert hours_between(start, start + timedelta(minutes=90)) == 1.5
    assert hours_between(start, start - timedelta(minutes=30)) == -0.5
    assert round_half_up(2.345) == 2.35
    assert round_half_up(0.125) == 0.13
