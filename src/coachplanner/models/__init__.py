from coachplanner.models.availability import AvailabilitySlot
from coachplanner.models.classroom import Classroom
from coachplanner.models.session import Attendance, CourseSession
from coachplanner.models.user import User

__all__ = [
    "Attendance",
    "AvailabilitySlot",
    "Classroom",
    "CourseSession",
    "User",
]
