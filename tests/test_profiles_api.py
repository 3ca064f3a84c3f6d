import pytest

from conftest import auth_headers


@pytest.mark.asyncio
async def test_requests_without_token_are_rejected(client):
    response = await client.get("/profiles/me")
    assert response.status_code == 401
    assert response.headers["www-authenticate"] == "Bearer"

    response = await client.get("/profiles/me", headers={"Authorization": "Bearer garbage"})
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_me_is_null_before_sync(client):
    response = await client.get("/profiles/me", headers=auth_headers("u1"))
    assert response.status_code == 200
    assert response.json() is None


@pytest.mark.asyncio
async def test_sync_then_update_me(client, make_member):
    profile, headers = await make_member("u1", "A B", email="a@b.com")
    assert profile["clerk_id"] == "u1"
    assert profile["email"] == "a@b.com"
    assert profile["status"] == "active"
    assert profile["skills_offered"] == []

    response = await client.put(
        "/profiles/me",
        json={"location": "Taipei", "bio": "Python tutor", "is_public": False},
        headers=headers,
    )
    assert response.status_code == 200
    updated = response.json()
    assert updated["location"] == "Taipei"
    assert updated["bio"] == "Python tutor"
    assert updated["is_public"] is False
    # untouched fields keep their values
    assert updated["full_name"] == "A B"
    assert updated["availability"] == "weekends"


@pytest.mark.asyncio
async def test_update_requires_synced_profile(client):
    response = await client.put("/profiles/me", json={"bio": "x"}, headers=auth_headers("ghost"))
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_skill_links_and_duplicates(client, make_member):
    _, headers = await make_member("u1", "Sarah")

    response = await client.post(
        "/profiles/me/skills/offered",
        json={"skill_name": "Python", "years_experience": 5},
        headers=headers,
    )
    assert response.status_code == 201
    link = response.json()
    assert link["skill"]["name"] == "Python"
    assert link["skill"]["is_approved"] is False
    assert link["proficiency_level"] == "intermediate"

    # same skill again, different case
    response = await client.post("/profiles/me/skills/offered", json={"skill_name": "python"}, headers=headers)
    assert response.status_code == 400

    # wanting it is a different direction
    response = await client.post("/profiles/me/skills/wanted", json={"skill_name": "python"}, headers=headers)
    assert response.status_code == 201
    assert response.json()["urgency"] == "medium"
    assert response.json()["skill"]["id"] == link["skill"]["id"]

    response = await client.get("/profiles/me/skills/offered", headers=headers)
    assert [item["id"] for item in response.json()] == [link["id"]]

    response = await client.delete(f"/profiles/me/skills/offered/{link['id']}", headers=headers)
    assert response.status_code == 204
    response = await client.get("/profiles/me/skills/offered", headers=headers)
    assert response.json() == []


@pytest.mark.asyncio
async def test_only_owner_removes_a_skill_link(client, make_member):
    _, sarah = await make_member("sarah", "Sarah")
    _, mike = await make_member("mike", "Mike")
    link = (await client.post("/profiles/me/skills/offered", json={"skill_name": "Python"}, headers=sarah)).json()

    response = await client.delete(f"/profiles/me/skills/offered/{link['id']}", headers=mike)
    assert response.status_code == 403

    response = await client.delete("/profiles/me/skills/offered/missing", headers=mike)
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_skill_get_or_create(client, make_member):
    _, headers = await make_member("u1", "A")

    first = (await client.post("/skills", json={"name": "Guitar", "category": "Music"}, headers=headers)).json()
    again = (await client.post("/skills", json={"name": "  guitar "}, headers=headers)).json()
    assert again["id"] == first["id"]

    # unapproved skills are not listed yet
    response = await client.get("/skills", headers=headers)
    assert response.status_code == 200
    assert response.json() == []


@pytest.mark.asyncio
async def test_browse_by_query(client, make_member):
    _, sarah = await make_member("sarah", "Sarah")
    _, mike = await make_member("mike", "Mike")
    _, viewer = await make_member("viewer", "Viewer")
    await client.post("/profiles/me/skills/offered", json={"skill_name": "Python"}, headers=sarah)
    await client.post("/profiles/me/skills/offered", json={"skill_name": "Guitar"}, headers=mike)

    response = await client.get("/profiles", params={"q": "python"}, headers=viewer)
    assert response.status_code == 200
    assert [p["full_name"] for p in response.json()] == ["Sarah"]

    # the caller never sees their own card
    response = await client.get("/profiles", headers=sarah)
    assert "Sarah" not in [p["full_name"] for p in response.json()]


@pytest.mark.asyncio
async def test_private_profile_is_hidden_from_others(client, make_member):
    private, owner = await make_member("owner", "Owner")
    _, other = await make_member("other", "Other")
    await client.put("/profiles/me", json={"is_public": False}, headers=owner)

    assert (await client.get(f"/profiles/{private['id']}", headers=other)).status_code == 404
    assert (await client.get(f"/profiles/{private['id']}", headers=owner)).status_code == 200

    response = await client.get("/profiles", headers=other)
    assert response.json() == []


@pytest.mark.asyncio
async def test_matches_score_both_directions(client, make_member):
    _, me = await make_member("me", "Me")
    _, tutor = await make_member("tutor", "Tutor")
    _, stranger = await make_member("stranger", "Stranger")
    await client.post("/profiles/me/skills/wanted", json={"skill_name": "Guitar"}, headers=me)
    await client.post("/profiles/me/skills/offered", json={"skill_name": "Python"}, headers=me)
    await client.post("/profiles/me/skills/offered", json={"skill_name": "Guitar"}, headers=tutor)
    await client.post("/profiles/me/skills/wanted", json={"skill_name": "Python"}, headers=tutor)
    await client.post("/profiles/me/skills/offered", json={"skill_name": "Knitting"}, headers=stranger)

    response = await client.get("/profiles/matches", headers=me)
    assert response.status_code == 200
    matches = response.json()
    assert [m["profile"]["full_name"] for m in matches] == ["Tutor"]
    assert matches[0]["match_score"] == 2.0


@pytest.mark.asyncio
async def test_photo_upload_and_delete(client, make_member):
    _, headers = await make_member("u1", "A")

    response = await client.post(
        "/profiles/me/photo",
        files={"file": ("me.png", b"\x89PNG fake image", "image/png")},
        headers=headers,
    )
    assert response.status_code == 200
    avatar_url = response.json()["avatar_url"]
    assert "/static/profile-photos/" in avatar_url
    assert avatar_url.endswith(".png")

    response = await client.post(
        "/profiles/me/photo",
        files={"file": ("notes.txt", b"hello", "text/plain")},
        headers=headers,
    )
    assert response.status_code == 400

    response = await client.delete("/profiles/me/photo", headers=headers)
    assert response.status_code == 200
    assert response.json()["avatar_url"] == ""

    # nothing left to delete
    assert (await client.delete("/profiles/me/photo", headers=headers)).status_code == 404


@pytest.mark.asyncio
async def test_null_for_required_fields_is_rejected(client, make_member):
    _, headers = await make_member("u1", "A")

    for field in ("availability", "is_public"):
        response = await client.put("/profiles/me", json={field: None}, headers=headers)
        assert response.status_code == 422

    # nullable fields can still be cleared
    response = await client.put("/profiles/me", json={"location": None}, headers=headers)
    assert response.status_code == 200
    assert response.json()["availability"] == "weekends"
    assert response.json()["is_public"] is True
