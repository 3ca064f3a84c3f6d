import pytest


@pytest.fixture
def admin(make_member):
    async def _admin():
        return await make_member("boss", "Boss", role="admin")
    return _admin


@pytest.mark.asyncio
async def test_admin_routes_need_admin_role(client, make_member):
    _, member = await make_member("u1", "Member", role="member")
    assert (await client.get("/admin/stats", headers=member)).status_code == 403


@pytest.mark.asyncio
async def test_suspend_user_blocks_them_and_is_audited(client, admin, make_member):
    _, admin_h = await admin()
    target, target_h = await make_member("u1", "Target")

    response = await client.patch(f"/admin/users/{target['id']}/status", json={"action": "suspend"}, headers=admin_h)
    assert response.status_code == 200
    assert response.json()["status"] == "inactive"

    # suspended members lose access to member routes
    assert (await client.get("/swap-requests/incoming", headers=target_h)).status_code == 403

    actions = (await client.get("/admin/actions", headers=admin_h)).json()
    assert [(a["action_type"], a["target_id"]) for a in actions] == [("user_suspend", target["id"])]

    response = await client.patch(f"/admin/users/{target['id']}/status", json={"action": "explode"}, headers=admin_h)
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_admin_cannot_suspend_themselves(client, admin):
    me, admin_h = await admin()
    response = await client.patch(f"/admin/users/{me['id']}/status", json={"action": "ban"}, headers=admin_h)
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_delete_user_removes_their_rows(client, admin, make_member):
    _, admin_h = await admin()
    target, target_h = await make_member("u1", "Target")
    other, other_h = await make_member("u2", "Other")
    await client.post("/profiles/me/skills/offered", json={"skill_name": "Python"}, headers=target_h)
    await client.post("/swap-requests", json={"recipient_id": other["id"]}, headers=target_h)

    response = await client.delete(f"/admin/users/{target['id']}", headers=admin_h)
    assert response.status_code == 204

    users = (await client.get("/admin/users", headers=admin_h)).json()
    assert target["id"] not in [u["id"] for u in users]
    assert (await client.get("/swap-requests/incoming", headers=other_h)).json() == []

    actions = (await client.get("/admin/actions", headers=admin_h)).json()
    assert actions[0]["action_type"] == "user_delete"


@pytest.mark.asyncio
async def test_skill_moderation(client, admin, make_member):
    _, admin_h = await admin()
    _, member_h = await make_member("u1", "Member")

    response = await client.post(
        "/admin/skills", json={"name": "Pottery", "category": "Crafts"}, headers=admin_h
    )
    assert response.status_code == 201
    assert response.json()["is_approved"] is True
    assert (await client.post("/admin/skills", json={"name": "pottery", "category": "Crafts"}, headers=admin_h)).status_code == 400

    pending = (await client.post("/skills", json={"name": "Juggling"}, headers=member_h)).json()
    assert [s["name"] for s in (await client.get("/skills", headers=member_h)).json()] == ["Pottery"]

    response = await client.patch(f"/admin/skills/{pending['id']}", json={"action": "approve"}, headers=admin_h)
    assert response.json()["is_approved"] is True
    assert [s["name"] for s in (await client.get("/skills", headers=member_h)).json()] == ["Juggling", "Pottery"]

    # rejecting deletes the skill and every link to it
    link = (await client.post("/profiles/me/skills/offered", json={"skill_name": "Knitting"}, headers=member_h)).json()
    response = await client.patch(f"/admin/skills/{link['skill']['id']}", json={"action": "reject"}, headers=admin_h)
    assert response.status_code == 200
    assert response.json() is None
    assert (await client.get("/profiles/me/skills/offered", headers=member_h)).json() == []

    action_types = sorted(a["action_type"] for a in (await client.get("/admin/actions", headers=admin_h)).json())
    assert action_types == ["skill_add", "skill_approve", "skill_reject"]


@pytest.mark.asyncio
async def test_stats(client, admin, make_member):
    _, admin_h = await admin()
    _, a_h = await make_member("a", "A")
    b, b_h = await make_member("b", "B")
    swap = (await client.post("/swap-requests", json={"recipient_id": b["id"]}, headers=a_h)).json()
    await client.post("/swap-requests", json={"recipient_id": b["id"]}, headers=a_h)
    await client.patch(f"/swap-requests/{swap['id']}/status", json={"status": "rejected"}, headers=b_h)

    stats = (await client.get("/admin/stats", headers=admin_h)).json()
    assert stats == {"total_users": 3, "total_skills": 0, "total_swaps": 2, "total_feedback": 0}

    swap_stats = (await client.get("/admin/swap-stats", headers=admin_h)).json()
    assert swap_stats == {"total": 2, "pending": 1, "accepted": 0, "rejected": 1, "completed": 0}

    swaps = (await client.get("/admin/swap-requests", headers=admin_h)).json()
    assert {s["requester"]["full_name"] for s in swaps} == {"A"}


@pytest.mark.asyncio
async def test_global_message_reaches_active_members(client, admin, make_member):
    _, admin_h = await admin()
    _, a_h = await make_member("a", "A")
    suspended, _ = await make_member("b", "B")
    await client.patch(f"/admin/users/{suspended['id']}/status", json={"action": "suspend"}, headers=admin_h)

    response = await client.post("/admin/messages", json={"message": "Maintenance tonight"}, headers=admin_h)
    assert response.status_code == 200
    # admin and A; the suspended member is skipped
    assert response.json()["recipients"] == 2

    notifications = (await client.get("/notifications/my", headers=a_h)).json()
    assert notifications[0]["kind"] == "global_message"
    assert notifications[0]["message"] == "Maintenance tonight"

    response = await client.patch(f"/notifications/{notifications[0]['id']}/read", headers=a_h)
    assert response.json()["is_read"] is True
    # marking again is harmless
    assert (await client.patch(f"/notifications/{notifications[0]['id']}/read", headers=a_h)).status_code == 200
    # but only for the owner
    assert (await client.patch(f"/notifications/{notifications[0]['id']}/read", headers=admin_h)).status_code == 403


@pytest.mark.asyncio
async def test_csv_report_download(client, admin, make_member):
    _, admin_h = await admin()
    await make_member("u1", "Lee, Ann")

    response = await client.get("/admin/reports/users", headers=admin_h)
    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/csv")
    assert response.headers["content-disposition"] == "attachment; filename=users_report.csv"

    lines = response.text.split("\n")
    assert lines[0].startswith("id,clerk_id,email,full_name")
    assert any("Lee; Ann" in line for line in lines[1:])

    actions = (await client.get("/admin/actions", headers=admin_h)).json()
    assert actions[0]["action_type"] == "report_download"
    assert actions[0]["details"]["report_type"] == "users"


@pytest.mark.asyncio
async def test_empty_report_and_unknown_type(client, admin):
    _, admin_h = await admin()

    response = await client.get("/admin/reports/feedback", headers=admin_h)
    assert response.status_code == 200
    assert response.text == ""

    assert (await client.get("/admin/reports/secrets", headers=admin_h)).status_code == 422


@pytest.mark.asyncio
async def test_users_report_keeps_skills_in_one_column(client, admin, make_member):
    _, admin_h = await admin()
    _, sarah = await make_member("sarah", "Sarah")
    for skill in ("Python", "Guitar"):
        await client.post("/profiles/me/skills/offered", json={"skill_name": skill}, headers=sarah)

    lines = (await client.get("/admin/reports/users", headers=admin_h)).text.split("\n")
    header = lines[0].split(",")
    row = next(line.split(",") for line in lines[1:] if "Sarah" in line)

    assert len(row) == len(header)
    assert sorted(row[header.index("skills_offered")].split("; ")) == ["Guitar", "Python"]
    assert row[header.index("skills_wanted")] == ""
