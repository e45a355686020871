"""AI Assist — recommendations, note summaries and learning resources via the Anthropic API.

Invariants:
    - Every call goes through ResilientAnthropicClient (retry/backoff/error mapping)
    - Model output is parsed by core/llm_output.py; nothing the model writes is
      trusted as a catalog id or a URL
    - Resource suggestions never fail: any problem falls back to the curated list
    - Recommendations and summaries raise LLMNotConfiguredError without a client

Design Decisions:
    - Prompts kept here, next to the calls that use them
    - The recommendation model is the larger one; summaries and resources use the
      fast model (settings.recommend_model / settings.assist_model)
"""

import logging

from tutor_network.config import Settings
from tutor_network.core.errors import (
    AnthropicAPIError,
    BusinessRuleError,
    ErrorContext,
    LLMNotConfiguredError,
)
from tutor_network.core.llm_output import (
    CURATED_RESOURCES,
    build_resources,
    fallback_resources,
    parse_recommendations,
    parse_resource_suggestions,
)
from tutor_network.core.subjects_catalog import (
    build_catalog_prompt,
    get_subject_by_slug,
    get_subtopic,
)
from tutor_network.infrastructure.anthropic_client import ResilientAnthropicClient

logger = logging.getLogger(__name__)

RECOMMEND_SYSTEM_PROMPT = """You are an intelligent tutor recommendation engine. Given a student's questionnaire answers, you must recommend exactly 6 sub-courses from the provided catalog that would best help this student succeed academically.

Consider the student's:
- Grade level (match difficulty appropriately)
- Subjects they enjoy (include related topics to keep them engaged)
- Subjects they struggle with (prioritize these for support)
- What kind of help they need (homework, concepts, test prep, advanced)
- Their current academic level
- How they learn best
- Any specific needs or preferences

Return ONLY a JSON array of exactly 6 objects. Each object must have exactly these keys:
- "subject_slug": the parent subject slug from the catalog
- "subtopic_id": the subtopic id from the catalog
- "reason": a brief 1-sentence explanation of why this is recommended for this student

Do not include any text outside the JSON array. Do not wrap in markdown code fences."""

SUMMARIZE_SYSTEM_PROMPT = (
    "You summarize tutoring session notes. Output a clear, concise overview: "
    "main topics covered, key points, and any action items or follow-ups. "
    "Use plain text, no markdown headers."
)

RESOURCES_SYSTEM_PROMPT = (
    "You suggest free learning resources for a school topic. You must return a "
    "JSON array of 3 or 4 objects. Each object has exactly: \"key\" (one of: "
    f"{', '.join(CURATED_RESOURCES)}) and \"note\" (one short sentence explaining "
    "why this resource helps for this topic). Use only those four keys. "
    "Do not include any URLs. Return only the JSON array."
)

# questionnaire key -> label shown to the model
_ANSWER_LABELS: tuple[tuple[str, str], ...] = (
    ("gradeLevel", "Grade level"),
    ("favoriteSubjects", "Favorite subjects"),
    ("strugglingSubjects", "Struggling subjects"),
    ("specificNeeds", "Specific needs"),
    ("helpType", "Help type"),
    ("currentLevel", "Current level"),
    ("learningBest", "Learning style"),
    ("specificWants", "Wants from tutor"),
    ("extraNotes", "Extra notes"),
)

NO_RECOMMENDATIONS_MESSAGE = "AI could not generate recommendations. Please try again."


def build_recommendation_prompt(answers: dict) -> str:
    lines = [
        f"- {label}: {answers.get(key) or 'Not specified'}"
        for key, label in _ANSWER_LABELS
    ]
    return (
        f"Available sub-courses catalog:\n{build_catalog_prompt()}\n\n"
        "Student questionnaire answers:\n"
        + "\n".join(lines)
        + "\n\nPick exactly 6 sub-courses from the catalog above. Return a JSON array."
    )


def _require(llm: ResilientAnthropicClient | None) -> ResilientAnthropicClient:
    if llm is None:
        raise LLMNotConfiguredError()
    return llm


def _with_titles(rec: dict) -> dict:
    subject = get_subject_by_slug(rec["subject_slug"])
    subtopic = get_subtopic(rec["subject_slug"], rec["subtopic_id"])
    return {**rec, "subject_title": subject.title, "subtopic_title": subtopic.title}


async def recommend_subtopics(
    llm: ResilientAnthropicClient | None,
    settings: Settings,
    answers: dict,
    user_id: str | None = None,
) -> list[dict]:
    """Catalog subtopics suited to the answers; [] when the model output is unusable."""
    client = _require(llm)
    raw = await client.complete_text(
        model=settings.recommend_model,
        system=RECOMMEND_SYSTEM_PROMPT,
        prompt=build_recommendation_prompt(answers),
        max_tokens=800,
        temperature=0.7,
        context=ErrorContext(user_id=user_id),
    )
    recommendations = parse_recommendations(raw)
    if not recommendations:
        logger.warning(
            "Recommendation output had no usable entries",
            extra={"user_id": user_id},
        )
    return [_with_titles(r) for r in recommendations]


async def summarize_notes(
    llm: ResilientAnthropicClient | None,
    settings: Settings,
    content: str,
    user_id: str | None = None,
) -> str:
    if not content or not content.strip():
        raise BusinessRuleError("No content to summarize")
    client = _require(llm)
    summary = await client.complete_text(
        model=settings.assist_model,
        system=SUMMARIZE_SYSTEM_PROMPT,
        prompt=f"Summarize these session notes:\n\n{content}",
        max_tokens=500,
        context=ErrorContext(user_id=user_id),
    )
    return summary or "No summary generated."


async def suggest_resources(
    llm: ResilientAnthropicClient | None,
    settings: Settings,
    subject_title: str,
    topic_title: str,
    topic_description: str = "",
) -> list[dict]:
    """Model-picked curated resources, or every curated resource on any failure."""
    if llm is None:
        return fallback_resources(topic_title)

    description = f"Description: {topic_description}." if topic_description else ""
    prompt = (
        f"Subject: {subject_title}. Topic: {topic_title}. {description} "
        f"Suggest 3-4 resources from the allowed keys ({', '.join(CURATED_RESOURCES)}). "
        'Return a JSON array of objects with "key" and "note" only.'
    )
    try:
        raw = await llm.complete_text(
            model=settings.assist_model,
            system=RESOURCES_SYSTEM_PROMPT,
            prompt=prompt,
            max_tokens=400,
        )
    except AnthropicAPIError as e:
        logger.warning(f"Resource suggestion failed, using curated list: {e.message}")
        return fallback_resources(topic_title)

    suggestions = parse_resource_suggestions(raw)
    if not suggestions:
        return fallback_resources(topic_title)
    return build_resources(topic_title, suggestions)
