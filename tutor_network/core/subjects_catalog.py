"""Subject Catalog — hard-coded core subjects and their subtopics.

Invariants:
    - Subject slugs and subtopic ids are stable identifiers stored in tutor_subjects
      and bookings; renaming one orphans existing rows
    - all_subtopics_flat() preserves catalog order
"""

from dataclasses import dataclass
from functools import lru_cache


@dataclass(frozen=True)
class Subtopic:
    id: str
    title: str
    description: str


@dataclass(frozen=True)
class SubjectConfig:
    title: str
    slug: str
    subtopics: tuple[Subtopic, ...]


@dataclass(frozen=True)
class SubtopicOption:
    """Flat view of one subtopic for tutor profile pickers and search."""
    subject_slug: str
    subject_title: str
    subtopic_id: str
    subtopic_title: str
    search_text: str


SUBJECTS: dict[str, SubjectConfig] = {
    "math": SubjectConfig(
        title="Math",
        slug="math",
        subtopics=(
            Subtopic("algebra", "Algebra", "Understand variables, equations, inequalities, functions, and how to reason symbolically."),
            Subtopic("geometry", "Geometry", "Explore shapes, theorems, proofs, and spatial reasoning including Euclidean geometry."),
            Subtopic("trigonometry", "Trigonometry", "Study angles, triangles, and trigonometric functions with applications to waves and rotations."),
            Subtopic("calculus", "Calculus", "Limits, derivatives, integrals, and the fundamental theorem of calculus with real-world modeling."),
        ),
    ),
    "science": SubjectConfig(
        title="Science",
        slug="science",
        subtopics=(
            Subtopic("physics", "Physics", "Motion, forces, energy, and the fundamental laws governing the physical world."),
            Subtopic("chemistry", "Chemistry", "Atoms, molecules, reactions, and the structure and behavior of matter."),
            Subtopic("biology", "Biology", "Living organisms, cells, genetics, evolution, and ecosystems."),
        ),
    ),
    "english": SubjectConfig(
        title="English",
        slug="english",
        subtopics=(
            Subtopic("grammar", "Grammar & Writing", "Sentence structure, punctuation, essay writing, and clear communication."),
            Subtopic("literature", "Literature", "Reading comprehension, analysis of fiction and non-fiction, and critical thinking."),
        ),
    ),
    "history": SubjectConfig(
        title="History",
        slug="history",
        subtopics=(
            Subtopic("us-history", "U.S. History", "American history from colonization through the present day."),
            Subtopic("world-history", "World History", "Major civilizations, events, and global developments over time."),
        ),
    ),
    "foreign-languages": SubjectConfig(
        title="Foreign Languages",
        slug="foreign-languages",
        subtopics=(
            Subtopic("spanish", "Spanish", "Spanish language fundamentals, conversation, and culture."),
            Subtopic("french", "French", "French language fundamentals, conversation, and culture."),
        ),
    ),
    "arts": SubjectConfig(
        title="Arts",
        slug="arts",
        subtopics=(
            Subtopic("visual", "Visual Arts", "Drawing, painting, composition, and art history."),
            Subtopic("music", "Music", "Music theory, performance, and appreciation."),
        ),
    ),
}


def get_subject_by_slug(slug: str) -> SubjectConfig | None:
    return SUBJECTS.get(slug)


def get_subtopic(slug: str, subtopic_id: str) -> Subtopic | None:
    subject = SUBJECTS.get(slug)
    if subject is None:
        return None
    return next((s for s in subject.subtopics if s.id == subtopic_id), None)


def is_valid_subtopic(slug: str, subtopic_id: str) -> bool:
    return get_subtopic(slug, subtopic_id) is not None


@lru_cache(maxsize=1)
def all_subtopics_flat() -> tuple[SubtopicOption, ...]:
    """Every subtopic with its parent subject, in catalog order."""
    return tuple(
        SubtopicOption(
            subject_slug=config.slug,
            subject_title=config.title,
            subtopic_id=st.id,
            subtopic_title=st.title,
            search_text=f"{config.title} {st.title}".lower(),
        )
        for config in SUBJECTS.values()
        for st in config.subtopics
    )


def filter_subtopics_by_search(
    options: tuple[SubtopicOption, ...] | list[SubtopicOption], query: str,
) -> list[SubtopicOption]:
    """Case-insensitive substring match on "<subject> <subtopic>". Blank query keeps all."""
    q = (query or "").strip().lower()
    if not q:
        return list(options)
    return [o for o in options if q in o.search_text]


def build_catalog_prompt() -> str:
    """One line per subtopic, embedded in the recommendation prompt."""
    return "\n".join(
        f'- subject_slug: "{config.slug}", subtopic_id: "{st.id}", '
        f'title: "{config.title} > {st.title}", description: "{st.description}"'
        for config in SUBJECTS.values()
        for st in config.subtopics
    )
