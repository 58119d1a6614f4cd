"""Tests for the signed-in user's work-time endpoints."""

from datetime import datetime

import pytest

from app.models.user import AccountStatus


@pytest.mark.asyncio
async def test_work_time_for_new_user(client, make_user, auth_headers):
    user = await make_user()

    resp = await client.get("/api/user/work-time", headers=auth_headers(user))

    assert resp.status_code == 200
    assert resp.json() == {
        "hoursWorked": 0.0,
        "hoursRemaining": 8.0,
        "isRequirementMet": False,
        "lastActiveTime": None,
    }


@pytest.mark.asyncio
async def test_heartbeats_accumulate_work_time(client, clock, make_user, auth_headers, db):
    user = await make_user()
    headers = auth_headers(user)

    resp = await client.post("/api/user/update-activity", headers=headers)
    assert resp.status_code == 200
    assert resp.json() == {"success": True}

    clock.advance(minutes=3)
    await client.post("/api/user/update-activity", headers=headers)

    data = (await client.get("/api/user/work-time", headers=headers)).json()
    assert data["hoursWorked"] == 0.05
    assert data["isRequirementMet"] is False

    await db.refresh(user)
    assert user.daily_work_minutes == pytest.approx(3.0)


@pytest.mark.asyncio
async def test_suspended_user_cannot_send_heartbeats(client, tracker, make_user, auth_headers):
    user = await make_user(
        status=AccountStatus.SUSPENDED.value,
        suspended_at=datetime(2026, 10, 18),
        suspension_reason="Failed to meet daily work-time target",
    )

    resp = await client.post("/api/user/update-activity", headers=auth_headers(user))

    assert resp.status_code == 403
    assert resp.json()["detail"] == {
        "error": "Account suspended",
        "requiresReactivation": True,
        "suspensionReason": "Failed to meet daily work-time target",
        "reactivationFee": "49.00",
    }
    assert tracker.get_work_statistics()["total_active_users"] == 0


@pytest.mark.asyncio
async def test_suspended_user_can_read_work_time(client, make_user, auth_headers):
    user = await make_user(
        status=AccountStatus.SUSPENDED.value,
        suspended_at=datetime(2026, 10, 18),
        suspension_reason="manual",
    )

    resp = await client.get("/api/user/work-time", headers=auth_headers(user))

    assert resp.status_code == 200


@pytest.mark.asyncio
async def test_heartbeat_requires_auth(client):
    resp = await client.post("/api/user/update-activity")
    assert resp.status_code == 401


@pytest.mark.asyncio
async def test_own_suspension_status(client, make_user, auth_headers):
    user = await make_user(consecutive_failed_days=1)

    resp = await client.get("/api/user/suspension-status", headers=auth_headers(user))

    assert resp.status_code == 200
    data = resp.json()
    assert data["isSuspended"] is False
    assert data["consecutiveFailedDays"] == 1
    assert data["eligibleForSuspension"] is True
    assert data["reactivationFeePaid"] is False
