"""Profiles — accounts, profile edits and the subtopics a tutor teaches.

Invariants:
    - Emails are unique (case-insensitive, stored lower-case)
    - Usernames are unique when set
    - A tutor's subtopic set is only ever replaced as a whole, and every pair in
      it exists in the catalog
    - Students have no subtopic set
"""

import logging
from uuid import UUID

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from tutor_network.config import Settings
from tutor_network.core.domain_types import UserType
from tutor_network.core.errors import (
    AuthenticationError,
    BusinessRuleError,
    EmailAlreadyRegisteredError,
    PermissionDeniedError,
    UsernameTakenError,
)
from tutor_network.core.subjects_catalog import get_subject_by_slug, get_subtopic
from tutor_network.infrastructure.security import hash_password, verify_password
from tutor_network.models.tutor_subject import TutorSubject
from tutor_network.models.user import User
from tutor_network.schemas.profile import ProfileUpdate, SubtopicRef

logger = logging.getLogger(__name__)


async def register_user(
    db: AsyncSession,
    settings: Settings,
    *,
    email: str,
    password: str,
    full_name: str,
    user_type: UserType,
) -> User:
    email = email.lower()
    existing = await db.execute(select(User.id).where(User.email == email))
    if existing.scalar_one_or_none() is not None:
        raise EmailAlreadyRegisteredError()
    user = User(
        email=email,
        password_hash=hash_password(password, settings.bcrypt_rounds),
        full_name=full_name,
        user_type=user_type.value,
    )
    db.add(user)
    try:
        await db.flush()
    except IntegrityError:
        await db.rollback()
        raise EmailAlreadyRegisteredError()
    await db.commit()
    logger.info("User registered", extra={"user_id": str(user.id)})
    return user


async def authenticate(db: AsyncSession, email: str, password: str) -> User:
    """Same error for an unknown email and a wrong password."""
    result = await db.execute(select(User).where(User.email == email.lower()))
    user = result.scalar_one_or_none()
    if user is None or not verify_password(password, user.password_hash):
        raise AuthenticationError("Invalid email or password")
    return user


async def taught_subtopics(db: AsyncSession, tutor_id: UUID) -> list[dict]:
    """The tutor's subtopics in catalog terms; rows no longer in the catalog are skipped."""
    rows = (await db.execute(
        select(TutorSubject)
        .where(TutorSubject.tutor_id == tutor_id)
        .order_by(TutorSubject.subject_slug, TutorSubject.subtopic_id),
    )).scalars().all()
    return [_describe(r.subject_slug, r.subtopic_id) for r in rows if _in_catalog(r)]


async def update_profile(db: AsyncSession, user: User, body: ProfileUpdate) -> User:
    if body.subtopics is not None and user.user_type != UserType.TUTOR.value:
        raise PermissionDeniedError("Only tutors can choose subtopics to teach")

    if body.username and body.username != user.username:
        taken = await db.execute(
            select(User.id)
            .where(User.username == body.username)
            .where(User.id != user.id),
        )
        if taken.scalar_one_or_none() is not None:
            raise UsernameTakenError(body.username)

    user.full_name = body.full_name
    user.username = body.username
    user.bio = body.bio
    user.avatar_url = body.avatar_url
    user.contact_info = body.contact_info

    if body.subtopics is not None:
        await _replace_subtopics(db, user.id, body.subtopics)
    await db.commit()
    logger.info("Profile updated", extra={"user_id": str(user.id)})
    return user


async def tutors_for_subject(
    db: AsyncSession, subject_slug: str, subtopic_id: str | None = None,
) -> list[dict]:
    """Tutors teaching the subject (or one subtopic of it), ordered by name."""
    query = (
        select(User, TutorSubject.subject_slug, TutorSubject.subtopic_id)
        .join(TutorSubject, TutorSubject.tutor_id == User.id)
        .where(User.user_type == UserType.TUTOR.value)
        .where(TutorSubject.subject_slug == subject_slug)
    )
    if subtopic_id:
        query = query.where(TutorSubject.subtopic_id == subtopic_id)

    tutors: dict[UUID, dict] = {}
    for tutor, slug, st_id in (await db.execute(query)).all():
        entry = tutors.setdefault(tutor.id, {
            "id": str(tutor.id),
            "full_name": tutor.full_name,
            "username": tutor.username,
            "bio": tutor.bio,
            "avatar_url": tutor.avatar_url,
            "subtopics": [],
        })
        if get_subtopic(slug, st_id) is not None:
            entry["subtopics"].append(_describe(slug, st_id))
    return sorted(tutors.values(), key=lambda t: (t["full_name"].lower(), t["id"]))


async def _replace_subtopics(
    db: AsyncSession, tutor_id: UUID, refs: list[SubtopicRef],
) -> None:
    pairs: list[tuple[str, str]] = []
    for ref in refs:
        pair = (ref.subject_slug, ref.subtopic_id)
        if get_subtopic(*pair) is None:
            raise BusinessRuleError(
                f"Unknown subtopic '{ref.subtopic_id}' for subject '{ref.subject_slug}'",
            )
        if pair not in pairs:
            pairs.append(pair)

    await db.execute(delete(TutorSubject).where(TutorSubject.tutor_id == tutor_id))
    db.add_all(
        TutorSubject(tutor_id=tutor_id, subject_slug=slug, subtopic_id=st_id)
        for slug, st_id in pairs
    )


def _in_catalog(row: TutorSubject) -> bool:
    return get_subtopic(row.subject_slug, row.subtopic_id) is not None


def _describe(subject_slug: str, subtopic_id: str) -> dict:
    subject = get_subject_by_slug(subject_slug)
    subtopic = get_subtopic(subject_slug, subtopic_id)
    return {
        "subject_slug": subject_slug,
        "subtopic_id": subtopic_id,
        "subject_title": subject.title,
        "subtopic_title": subtopic.title,
    }
