"""Profile Routes — edits, username uniqueness and a tutor's subtopic set.

Invariants:
    - Blank optional fields are stored as null
    - A taken username is a 409
    - subtopics replaces the tutor's whole set; unknown pairs are a 400
    - Students cannot set subtopics (403)
"""

from tests.services.accounts import signup


async def test_get_profile_for_student_has_no_subtopics(client, student):
    resp = await client.get("/api/v1/profile", headers=student["headers"])
    assert resp.status_code == 200
    assert resp.json()["subtopics"] == []
    assert resp.json()["full_name"] == "Sam Student"


async def test_update_profile_blanks_become_null(client, student):
    resp = await client.put("/api/v1/profile", headers=student["headers"], json={
        "full_name": "Sam S.",
        "username": "sammy",
        "bio": "   ",
        "avatar_url": "",
        "contact_info": "sam@chat.io",
    })
    assert resp.status_code == 200
    body = resp.json()
    assert body["full_name"] == "Sam S."
    assert body["username"] == "sammy"
    assert body["bio"] is None
    assert body["avatar_url"] is None
    assert body["contact_info"] == "sam@chat.io"


async def test_username_collision(client, student, other_student):
    await client.put("/api/v1/profile", headers=student["headers"], json={
        "full_name": "Sam", "username": "sammy",
    })
    resp = await client.put("/api/v1/profile", headers=other_student["headers"], json={
        "full_name": "Kim", "username": "sammy",
    })
    assert resp.status_code == 409
    assert resp.json()["error"]["code"] == "USERNAME_TAKEN"


async def test_keeping_own_username_is_allowed(client, student):
    body = {"full_name": "Sam", "username": "sammy"}
    await client.put("/api/v1/profile", headers=student["headers"], json=body)
    resp = await client.put("/api/v1/profile", headers=student["headers"], json=body)
    assert resp.status_code == 200


async def test_tutor_subtopics_replace_whole_set(client, tutor):
    first = await client.put("/api/v1/profile", headers=tutor["headers"], json={
        "full_name": "Ada Lovelace",
        "subtopics": [
            {"subject_slug": "math", "subtopic_id": "algebra"},
            {"subject_slug": "math", "subtopic_id": "calculus"},
            {"subject_slug": "math", "subtopic_id": "algebra"},
        ],
    })
    assert first.status_code == 200
    assert {s["subtopic_id"] for s in first.json()["subtopics"]} == {"algebra", "calculus"}

    second = await client.put("/api/v1/profile", headers=tutor["headers"], json={
        "full_name": "Ada Lovelace",
        "subtopics": [{"subject_slug": "science", "subtopic_id": "physics"}],
    })
    assert second.json()["subtopics"] == [{
        "subject_slug": "science",
        "subtopic_id": "physics",
        "subject_title": "Science",
        "subtopic_title": "Physics",
    }]


async def test_omitting_subtopics_keeps_them(client, tutor):
    await client.put("/api/v1/profile", headers=tutor["headers"], json={
        "full_name": "Ada",
        "subtopics": [{"subject_slug": "arts", "subtopic_id": "music"}],
    })
    resp = await client.put("/api/v1/profile", headers=tutor["headers"], json={
        "full_name": "Ada L.",
    })
    assert [s["subtopic_id"] for s in resp.json()["subtopics"]] == ["music"]


async def test_unknown_subtopic_rejected(client, tutor):
    resp = await client.put("/api/v1/profile", headers=tutor["headers"], json={
        "full_name": "Ada",
        "subtopics": [{"subject_slug": "math", "subtopic_id": "astrology"}],
    })
    assert resp.status_code == 400
    assert resp.json()["error"]["code"] == "BUSINESS_RULE_VIOLATION"


async def test_student_cannot_set_subtopics(client, student):
    resp = await client.put("/api/v1/profile", headers=student["headers"], json={
        "full_name": "Sam",
        "subtopics": [{"subject_slug": "math", "subtopic_id": "algebra"}],
    })
    assert resp.status_code == 403


async def test_profile_requires_auth(client):
    assert (await client.get("/api/v1/profile")).status_code == 401


async def test_second_tutor_can_teach_same_subtopic(client, tutor):
    other = await signup(client, "grace@tutors.io", "tutor", "Grace Hopper")
    pick = [{"subject_slug": "math", "subtopic_id": "algebra"}]
    for account in (tutor, other):
        resp = await client.put("/api/v1/profile", headers=account["headers"], json={
            "full_name": account["user"]["full_name"], "subtopics": pick,
        })
        assert resp.status_code == 200
