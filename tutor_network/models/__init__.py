"""ORM Models — SQLAlchemy declarative models for all domain entities.

Invariants:
    - All models inherit from Base (db/base.py)
    - User is the owner of every other row (tutor_id / student_id / user_id)

Design Decisions:
    - All models imported here so SQLAlchemy resolves string-based relationship()
      references before any query runs
"""

from tutor_network.models.user import User  # noqa: F401
from tutor_network.models.tutor_subject import TutorSubject  # noqa: F401
from tutor_network.models.availability import Availability  # noqa: F401
from tutor_network.models.booking import Booking  # noqa: F401
from tutor_network.models.questionnaire import Questionnaire  # noqa: F401
