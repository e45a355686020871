"""LLM Output Parsing — turns free-form model text into validated, catalog-bound data.

Invariants:
    - Model output is untrusted: only the first JSON array in the text is considered
    - Recommendations reference existing (subject_slug, subtopic_id) pairs only
    - Resource URLs are always built here from curated templates, never taken from the model
    - Unparseable output yields an empty list, never an exception
"""

import json
import logging
import re
from urllib.parse import quote_plus

from tutor_network.core.subjects_catalog import is_valid_subtopic

logger = logging.getLogger(__name__)

MAX_RECOMMENDATIONS = 6

_JSON_ARRAY = re.compile(r"\[[\s\S]*\]")

# key -> (title, url template); "{query}" is the URL-encoded topic title
CURATED_RESOURCES: dict[str, tuple[str, str]] = {
    "youtube": (
        "YouTube — video tutorials",
        "https://www.youtube.com/results?search_query={query}",
    ),
    "khan": ("Khan Academy", "https://www.khanacademy.org/"),
    "openstax": ("OpenStax free textbooks", "https://openstax.org/"),
    "crashcourse": (
        "Crash Course (YouTube)",
        "https://www.youtube.com/results?search_query=crash+course+{query}",
    ),
}


def extract_json_array(raw: str | None) -> list | None:
    """Return the first JSON array embedded in the text, or None."""
    if not raw:
        return None
    match = _JSON_ARRAY.search(raw)
    if not match:
        return None
    try:
        parsed = json.loads(match.group(0))
    except json.JSONDecodeError:
        logger.warning("LLM output contained malformed JSON array")
        return None
    return parsed if isinstance(parsed, list) else None


def parse_recommendations(raw: str | None) -> list[dict]:
    """Catalog-valid recommendations, de-duplicated, capped at MAX_RECOMMENDATIONS."""
    items = extract_json_array(raw)
    if items is None:
        return []
    seen: set[tuple[str, str]] = set()
    result = []
    for item in items:
        if not isinstance(item, dict):
            continue
        slug = str(item.get("subject_slug") or "").strip()
        subtopic_id = str(item.get("subtopic_id") or "").strip()
        if (slug, subtopic_id) in seen or not is_valid_subtopic(slug, subtopic_id):
            continue
        seen.add((slug, subtopic_id))
        result.append({
            "subject_slug": slug,
            "subtopic_id": subtopic_id,
            "reason": str(item.get("reason") or "").strip(),
        })
        if len(result) == MAX_RECOMMENDATIONS:
            break
    return result


def parse_resource_suggestions(raw: str | None) -> list[dict]:
    """Model-chosen curated keys with a short note; unknown keys dropped."""
    items = extract_json_array(raw)
    if items is None:
        return []
    suggestions = []
    seen: set[str] = set()
    for item in items:
        if not isinstance(item, dict):
            continue
        key = str(item.get("key") or "").strip().lower()
        if key not in CURATED_RESOURCES or key in seen:
            continue
        seen.add(key)
        suggestions.append({"key": key, "note": str(item.get("note") or "").strip()})
    return suggestions


def _resource(key: str, topic_title: str, note: str) -> dict:
    title, template = CURATED_RESOURCES[key]
    return {
        "title": title,
        "url": template.replace("{query}", quote_plus(topic_title)),
        "note": note or f"Free resource for {topic_title}.",
    }


def build_resources(topic_title: str, suggestions: list[dict]) -> list[dict]:
    return [_resource(s["key"], topic_title, s.get("note", "")) for s in suggestions]


def fallback_resources(topic_title: str) -> list[dict]:
    """All curated resources with a generic note."""
    return [_resource(key, topic_title, "") for key in CURATED_RESOURCES]
