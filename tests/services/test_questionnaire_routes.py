"""Questionnaire Routes — saving answers and AI recommendations.

Invariants:
    - Saving answers never fails because of the model
    - New answers clear recommendations until a fresh set is produced
    - Only catalog subtopics are ever recommended
    - Only students keep a questionnaire; anyone signed in may ask statelessly
"""

import json

from tutor_network.core.errors import AnthropicAPIError
from tutor_network.services.ai_assist import NO_RECOMMENDATIONS_MESSAGE

ANSWERS = {
    "gradeLevel": "10th grade",
    "favoriteSubjects": "Physics",
    "strugglingSubjects": "Algebra",
    "helpType": "Test prep",
    "currentLevel": "A little behind",
    "extraNotes": "",
}

PICKS = json.dumps([
    {"subject_slug": "math", "subtopic_id": "algebra", "reason": "Needs support."},
    {"subject_slug": "science", "subtopic_id": "physics", "reason": "Enjoys it."},
    {"subject_slug": "math", "subtopic_id": "knitting", "reason": "Not real."},
])


async def _save(client, account, answers=ANSWERS):
    return await client.put(
        "/api/v1/questionnaire", headers=account["headers"], json={"answers": answers},
    )


async def test_get_before_saving(client, student):
    resp = await client.get("/api/v1/questionnaire", headers=student["headers"])
    assert resp.status_code == 404


async def test_save_with_recommendations(client, student, llm):
    llm.responses.append(PICKS)
    resp = await _save(client, student)
    assert resp.status_code == 200
    body = resp.json()
    assert body["recommendation_error"] is None
    assert body["answers"]["extraNotes"] is None
    assert [(r["subject_slug"], r["subtopic_id"]) for r in body["recommendations"]] == [
        ("math", "algebra"), ("science", "physics"),
    ]
    assert body["recommendations"][1]["subtopic_title"] == "Physics"

    prompt = llm.calls[0]["prompt"]
    assert "- Grade level: 10th grade" in prompt
    assert "- Learning style: Not specified" in prompt

    stored = (await client.get("/api/v1/questionnaire", headers=student["headers"])).json()
    assert stored["recommendations"] == body["recommendations"]
    assert stored["answers"]["helpType"] == "Test prep"


async def test_answers_saved_when_model_fails(client, student, llm):
    llm.responses.append(AnthropicAPIError("boom", "server_error"))
    resp = await _save(client, student)
    assert resp.status_code == 200
    assert resp.json()["recommendations"] is None
    assert "Anthropic API error" in resp.json()["recommendation_error"]

    stored = await client.get("/api/v1/questionnaire", headers=student["headers"])
    assert stored.json()["answers"]["gradeLevel"] == "10th grade"


async def test_answers_saved_without_model(client, student, no_llm):
    resp = await _save(client, student)
    assert resp.status_code == 200
    assert resp.json()["recommendation_error"] == (
        "AI assistance is not configured on this server"
    )


async def test_new_answers_clear_stale_recommendations(client, student, llm):
    llm.responses.extend([PICKS, "I cannot help with that."])
    await _save(client, student)
    resp = await _save(client, student, {**ANSWERS, "gradeLevel": "11th grade"})
    assert resp.json()["recommendations"] is None
    assert resp.json()["recommendation_error"] == NO_RECOMMENDATIONS_MESSAGE


async def test_invalid_choice_rejected(client, student):
    resp = await _save(client, student, {"helpType": "Do my homework"})
    assert resp.status_code == 400


async def test_tutors_have_no_questionnaire(client, tutor):
    assert (await _save(client, tutor)).status_code == 403
    get = await client.get("/api/v1/questionnaire", headers=tutor["headers"])
    assert get.status_code == 403


async def test_regenerate(client, student, llm):
    missing = await client.post(
        "/api/v1/questionnaire/recommendations", headers=student["headers"],
    )
    assert missing.status_code == 404

    llm.responses.extend(["[]", PICKS])
    await _save(client, student)
    resp = await client.post(
        "/api/v1/questionnaire/recommendations", headers=student["headers"],
    )
    assert resp.status_code == 200
    assert len(resp.json()["recommendations"]) == 2
    assert resp.json()["recommendation_error"] is None


async def test_regenerate_surfaces_model_errors(client, student, llm):
    llm.responses.extend([PICKS, AnthropicAPIError("slow down", "rate_limit")])
    await _save(client, student)
    resp = await client.post(
        "/api/v1/questionnaire/recommendations", headers=student["headers"],
    )
    assert resp.status_code == 503
    assert resp.json()["error"]["code"] == "ANTHROPIC_API_ERROR"


async def test_stateless_recommendations(client, tutor, llm):
    llm.responses.append(PICKS)
    resp = await client.post(
        "/api/v1/recommendations", headers=tutor["headers"], json={"answers": ANSWERS},
    )
    assert resp.status_code == 200
    assert len(resp.json()["recommendations"]) == 2
    assert resp.json()["error"] is None


async def test_stateless_recommendations_empty(client, student, llm):
    llm.responses.append("no json here")
    resp = await client.post(
        "/api/v1/recommendations", headers=student["headers"], json={"answers": {}},
    )
    assert resp.status_code == 200
    assert resp.json() == {"recommendations": [], "error": NO_RECOMMENDATIONS_MESSAGE}


async def test_stateless_recommendations_without_model(client, student, no_llm):
    resp = await client.post(
        "/api/v1/recommendations", headers=student["headers"], json={"answers": ANSWERS},
    )
    assert resp.status_code == 503
