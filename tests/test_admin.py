"""Tests for the admin monitoring and suspension endpoints."""

import uuid
from datetime import datetime

import pytest
from sqlalchemy import select

from app.models.admin_audit_log import AdminAuditLog
from app.models.user import AccountStatus, KycStatus


@pytest.fixture
def make_admin(make_user):
    async def _make_admin():
        return await make_user(role="admin", email="admin@example.com")
    return _make_admin


@pytest.mark.asyncio
async def test_non_admin_is_forbidden(client, make_user, auth_headers):
    user = await make_user()

    resp = await client.get("/api/admin/work-statistics", headers=auth_headers(user))

    assert resp.status_code == 403
    assert resp.json()["detail"] == "Admin access required"


@pytest.mark.asyncio
async def test_work_statistics(client, make_admin, make_user, auth_headers, tracker):
    admin = await make_admin()
    worker = await make_user()
    await tracker.update_activity(worker.id)

    resp = await client.get("/api/admin/work-statistics", headers=auth_headers(admin))

    assert resp.status_code == 200
    assert resp.json() == {
        "totalActiveUsers": 1,
        "averageHoursWorked": 0.0,
        "usersMetRequirement": 0,
        "usersPendingSuspension": 1,
    }


@pytest.mark.asyncio
async def test_users_at_risk(client, make_admin, make_user, auth_headers):
    admin = await make_admin()
    risky = await make_user(consecutive_failed_days=2, daily_work_minutes=120.0)
    await make_user(consecutive_failed_days=1)

    resp = await client.get("/api/admin/users-at-risk", headers=auth_headers(admin))

    assert resp.status_code == 200
    data = resp.json()
    assert data["total"] == 1
    assert data["users"][0]["id"] == str(risky.id)
    assert data["users"][0]["consecutiveFailedDays"] == 2
    assert data["users"][0]["dailyWorkMinutes"] == 120.0


@pytest.mark.asyncio
async def test_user_suspension_status(client, make_admin, make_user, auth_headers):
    admin = await make_admin()
    user = await make_user(kyc_status=KycStatus.PENDING.value)

    resp = await client.get(f"/api/admin/users/{user.id}/suspension-status", headers=auth_headers(admin))

    assert resp.status_code == 200
    assert resp.json()["eligibleForSuspension"] is False


@pytest.mark.asyncio
async def test_suspension_status_for_unknown_user(client, make_admin, auth_headers):
    admin = await make_admin()

    resp = await client.get(f"/api/admin/users/{uuid.uuid4()}/suspension-status", headers=auth_headers(admin))

    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_admin_suspend_writes_audit_log(client, make_admin, make_user, auth_headers, db):
    admin = await make_admin()
    user = await make_user(kyc_status=KycStatus.PENDING.value)

    resp = await client.post(
        f"/api/admin/users/{user.id}/suspend",
        json={"reason": "Fraudulent task submissions"},
        headers=auth_headers(admin),
    )

    assert resp.status_code == 200
    assert resp.json() == {"message": "User suspended"}
    await db.refresh(user)
    assert user.status == AccountStatus.SUSPENDED.value
    assert user.suspension_reason == "Admin suspension: Fraudulent task submissions"

    logs = (await db.execute(select(AdminAuditLog))).scalars().all()
    assert len(logs) == 1
    assert logs[0].action == "user_suspend"
    assert logs[0].admin_id == admin.id
    assert logs[0].target_user_id == user.id
    assert logs[0].details == {"reason": "Fraudulent task submissions"}


@pytest.mark.asyncio
async def test_admin_suspend_already_suspended(client, make_admin, make_user, auth_headers):
    admin = await make_admin()
    user = await make_user(
        status=AccountStatus.SUSPENDED.value,
        suspended_at=datetime(2026, 10, 18),
        suspension_reason="manual",
    )

    resp = await client.post(
        f"/api/admin/users/{user.id}/suspend",
        json={"reason": "again"},
        headers=auth_headers(admin),
    )

    assert resp.status_code == 409


@pytest.mark.asyncio
async def test_admin_suspend_unknown_user(client, make_admin, auth_headers):
    admin = await make_admin()

    resp = await client.post(
        f"/api/admin/users/{uuid.uuid4()}/suspend",
        json={"reason": "gone"},
        headers=auth_headers(admin),
    )

    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_admin_suspend_requires_reason(client, make_admin, make_user, auth_headers):
    admin = await make_admin()
    user = await make_user()

    resp = await client.post(
        f"/api/admin/users/{user.id}/suspend",
        json={"reason": ""},
        headers=auth_headers(admin),
    )

    assert resp.status_code == 422


@pytest.mark.asyncio
async def test_run_compliance_check(client, make_admin, make_user, auth_headers, db):
    admin = await make_admin()
    user = await make_user(consecutive_failed_days=2, daily_work_minutes=60.0)

    resp = await client.post(
        "/api/admin/compliance/run",
        params={"check_date": "2026-10-18"},
        headers=auth_headers(admin),
    )

    assert resp.status_code == 200
    data = resp.json()
    assert data["checkDate"] == "2026-10-18"
    assert data["suspended"] == 1
    # The admin account is KYC-complete by default and gets evaluated too.
    assert data["checked"] == 2

    await db.refresh(user)
    assert user.status == AccountStatus.SUSPENDED.value

    logs = (await db.execute(select(AdminAuditLog))).scalars().all()
    assert [log.action for log in logs] == ["compliance_run"]


@pytest.mark.asyncio
async def test_user_audit_log(client, make_admin, make_user, auth_headers):
    admin = await make_admin()
    user = await make_user()
    await client.post(
        f"/api/admin/users/{user.id}/suspend",
        json={"reason": "Chargeback abuse"},
        headers=auth_headers(admin),
    )

    resp = await client.get(f"/api/admin/users/{user.id}/audit-log", headers=auth_headers(admin))

    assert resp.status_code == 200
    entries = resp.json()
    assert len(entries) == 1
    assert entries[0]["action"] == "user_suspend"
    assert entries[0]["adminId"] == str(admin.id)
    assert entries[0]["details"] == {"reason": "Chargeback abuse"}


@pytest.mark.asyncio
async def test_admin_cannot_suspend_banned_user(client, make_admin, make_user, auth_headers, db):
    admin = await make_admin()
    user = await make_user(status=AccountStatus.BANNED.value)

    resp = await client.post(
        f"/api/admin/users/{user.id}/suspend",
        json={"reason": "Chargeback abuse"},
        headers=auth_headers(admin),
    )

    assert resp.status_code == 409
    assert resp.json()["detail"] == "User account is banned"
    await db.refresh(user)
    assert user.status == AccountStatus.BANNED.value
    assert (await db.execute(select(AdminAuditLog))).scalars().all() == []
