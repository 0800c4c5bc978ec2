from coachplanner.schemas.availability import (
    AvailabilityDateCreate,
    AvailabilityDeleted,
    AvailabilityInstanceRead,
    AvailabilityRangeCreate,
    AvailabilitySlotRead,
)
from coachplanner.schemas.calendar import CalendarDayRead, CalendarEntryRead, CalendarMonthRead
from coachplanner.schemas.session import (
    AttendanceCreate,
    AttendanceRead,
    ClassroomSummaryRead,
    ConflictCheckRequest,
    ConflictEntryRead,
    ConflictReportRead,
    PersonSummaryRead,
    SessionCreate,
    SessionRangeCreate,
    SessionRead,
)
from coachplanner.schemas.system import StatusResponse

__all__ = [
    "AttendanceCreate",
    "AttendanceRead",
    "AvailabilityDateCreate",
    "AvailabilityDeleted",
    "AvailabilityInstanceRead",
    "AvailabilityRangeCreate",
    "AvailabilitySlotRead",
    "CalendarDayRead",
    "CalendarEntryRead",
    "CalendarMonthRead",
    "ClassroomSummaryRead",
    "ConflictCheckRequest",
    "ConflictEntryRead",
    "ConflictReportRead",
    "PersonSummaryRead",
    "SessionCreate",
    "SessionRangeCreate",
    "SessionRead",
    "StatusResponse",
]
