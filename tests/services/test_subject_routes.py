"""Subject Routes — catalog browsing, search, tutors per subject and resources.

Invariants:
    - Catalog endpoints need no database and no authentication
    - Resource suggestions answer 200 for a known subtopic whatever the model does
    - Resource URLs come from the curated templates only
"""

import json

from tutor_network.core.errors import AnthropicAPIError

from tests.services.accounts import signup


async def _teach(client, account, pairs):
    resp = await client.put("/api/v1/profile", headers=account["headers"], json={
        "full_name": account["user"]["full_name"],
        "subtopics": [{"subject_slug": s, "subtopic_id": t} for s, t in pairs],
    })
    assert resp.status_code == 200, resp.text


async def test_list_subjects(client):
    resp = await client.get("/api/v1/subjects")
    assert resp.status_code == 200
    subjects = resp.json()
    assert [s["slug"] for s in subjects][:2] == ["math", "science"]
    assert subjects[0]["subtopics"][0] == {
        "id": "algebra",
        "title": "Algebra",
        "description": subjects[0]["subtopics"][0]["description"],
    }


async def test_get_subject_and_404(client):
    resp = await client.get("/api/v1/subjects/foreign-languages")
    assert [s["id"] for s in resp.json()["subtopics"]] == ["spanish", "french"]
    missing = await client.get("/api/v1/subjects/cooking")
    assert missing.status_code == 404
    assert missing.json()["error"]["code"] == "RESOURCE_NOT_FOUND"


async def test_search(client):
    resp = await client.get("/api/v1/subjects/search", params={"q": "Chem"})
    assert resp.json() == [{
        "subject_slug": "science",
        "subject_title": "Science",
        "subtopic_id": "chemistry",
        "subtopic_title": "Chemistry",
    }]
    everything = await client.get("/api/v1/subjects/search")
    assert len(everything.json()) == 15


async def test_tutors_for_subject_sorted_and_filtered(client, tutor):
    grace = await signup(client, "grace@tutors.io", "tutor", "Grace Hopper")
    await _teach(client, tutor, [("math", "algebra"), ("math", "calculus")])
    await _teach(client, grace, [("math", "geometry")])

    resp = await client.get("/api/v1/subjects/math/tutors")
    tutors = resp.json()
    assert [t["full_name"] for t in tutors] == ["Ada Lovelace", "Grace Hopper"]
    assert {s["subtopic_id"] for s in tutors[0]["subtopics"]} == {"algebra", "calculus"}

    only_geometry = await client.get(
        "/api/v1/subjects/math/tutors", params={"subtopic_id": "geometry"},
    )
    assert [t["full_name"] for t in only_geometry.json()] == ["Grace Hopper"]

    unknown = await client.get(
        "/api/v1/subjects/math/tutors", params={"subtopic_id": "poetry"},
    )
    assert unknown.status_code == 404


async def test_tutors_for_subject_empty(client, tutor):
    resp = await client.get("/api/v1/subjects/history/tutors")
    assert resp.status_code == 200
    assert resp.json() == []


# ==============================================================================
# Learning resources
# ==============================================================================


async def test_resources_use_model_picks(client, llm):
    llm.responses.append(
        'Here you go: [{"key": "khan", "note": "Great practice."}, '
        '{"key": "youtube", "note": "Visual walkthroughs."}, '
        '{"key": "wikipedia", "note": "Not allowed."}]'
    )
    resp = await client.post("/api/v1/subjects/math/algebra/resources")
    assert resp.status_code == 200
    body = resp.json()
    assert body["subject_title"] == "Math"
    assert body["topic_title"] == "Algebra"
    assert [r["title"] for r in body["resources"]] == [
        "Khan Academy", "YouTube — video tutorials",
    ]
    assert body["resources"][1]["url"] == (
        "https://www.youtube.com/results?search_query=Algebra"
    )
    assert "Algebra" in llm.calls[0]["prompt"]


async def test_resources_fall_back_without_model(client, no_llm):
    resp = await client.post("/api/v1/subjects/science/physics/resources")
    assert resp.status_code == 200
    resources = resp.json()["resources"]
    assert len(resources) == 4
    assert all(r["note"] == "Free resource for Physics." for r in resources)


async def test_resources_fall_back_on_api_error(client, llm):
    llm.responses.append(AnthropicAPIError("down", "server_error"))
    resp = await client.post("/api/v1/subjects/science/physics/resources")
    assert resp.status_code == 200
    assert len(resp.json()["resources"]) == 4


async def test_resources_fall_back_on_unusable_output(client, llm):
    llm.responses.append(json.dumps({"key": "khan"}))
    resp = await client.post("/api/v1/subjects/arts/music/resources")
    assert len(resp.json()["resources"]) == 4


async def test_resources_unknown_subtopic(client):
    resp = await client.post("/api/v1/subjects/math/poetry/resources")
    assert resp.status_code == 404
