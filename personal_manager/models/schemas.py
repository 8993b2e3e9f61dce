import datetime as dt
from typing import Annotated, Generic, List, Literal, Optional, TypeVar

from pydantic import AfterValidator, BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from personal_manager.core.config import settings
from personal_manager.utils.clock import utcnow

T = TypeVar("T")

MarkCategory = Literal["group-assignment", "individual-assignment", "test01", "test02", "presentation"]
MoneyStatus = Literal["pending", "returned", "cancelled"]
AppointmentStatus = Literal["upcoming", "completed", "cancelled"]
JourneyStatus = Literal["pending", "completed", "cancelled"]
Notification = Literal["30min", "2hours", "1day", "none"]
Tier = Literal["excellent", "good", "failed"]


class CamelModel(BaseModel):
    """camelCase on the wire, snake_case in Python; both accepted on input."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


def _blank(v: Optional[str]) -> str:
    return (v or "").strip()


OptionalText = Annotated[Optional[str], AfterValidator(_blank)]


class ApiResponse(CamelModel, Generic[T]):
    success: bool = True
    data: Optional[T] = None
    message: Optional[str] = None
    timestamp: dt.datetime = Field(default_factory=utcnow)


# ---------- Auth ----------
class LoginIn(CamelModel):
    username: str = Field(min_length=1)
    password: str = Field(min_length=1)


class SessionUser(CamelModel):
    id: int
    username: str
    email: Optional[str] = None


class AuthStatus(CamelModel):
    authenticated: bool
    user: Optional[SessionUser] = None


# ---------- Modules ----------
class ModuleIn(CamelModel):
    code: str = Field(min_length=1, max_length=20)
    name: str = Field(min_length=1, max_length=100)
    lecturer: OptionalText = ""
    semester: int = Field(1, ge=1)
    year: int = Field(1, ge=1)


class ModuleOut(CamelModel):
    id: int
    code: str
    name: str
    lecturer: Optional[str] = None
    semester: int
    year: int
    created_at: Optional[dt.datetime] = None


# ---------- Timetable ----------
class ExamIn(CamelModel):
    module_code: str = Field(min_length=1, max_length=20)
    module_name: str = Field(min_length=1, max_length=100)
    date: dt.date
    time: dt.time
    venue: OptionalText = ""


class ExamOut(CamelModel):
    id: int
    module_code: str
    module_name: str
    date: dt.date
    time: dt.time
    venue: Optional[str] = None


# ---------- Marks ----------
class MarkIn(CamelModel):
    module_id: int
    category: MarkCategory = "test01"
    marks: float = Field(ge=0)


class MarkOut(CamelModel):
    id: int
    module_id: int
    module_name: str
    module_code: Optional[str] = None
    lecturer: Optional[str] = None
    category: str
    marks: float
    date: dt.date


class ModuleProgress(CamelModel):
    module_id: int
    module_name: str
    module_code: Optional[str] = None
    total_marks: float
    assessment_count: int
    percentage: int
    remaining_marks: float
    status: Tier
    status_color: str


class CaMarksProgress(CamelModel):
    total_modules: int
    excellent_modules: int
    good_modules: int
    failed_modules: int
    max_marks_per_module: int
    percentage: int
    status: Tier
    status_color: str
    modules: List[ModuleProgress]


# ---------- Money / savings / fees ----------
class MoneyIn(CamelModel):
    person: str = Field(min_length=1, max_length=100)
    amount: float = Field(gt=0)
    borrow_date: dt.date
    return_date: Optional[dt.date] = None


class MoneyOut(CamelModel):
    id: int
    person: str
    amount: float
    borrow_date: dt.date
    return_date: Optional[dt.date] = None
    status: MoneyStatus


class SavingsIn(CamelModel):
    amount: float = Field(gt=0)
    date: dt.date


class SavingsOut(CamelModel):
    id: int
    amount: float
    date: dt.date


class SchoolFeeIn(CamelModel):
    year: int = Field(ge=1)
    semester: str = Field(min_length=1, max_length=20)
    amount: float = Field(gt=0)
    payment_date: dt.date
    payment_method: Optional[str] = "cash"

    @field_validator("amount")
    @classmethod
    def within_fee_limit(cls, v: float) -> float:
        if v > settings.SCHOOL_FEE_LIMIT:
            raise ValueError(f"amount must not exceed {settings.SCHOOL_FEE_LIMIT:,.0f} {settings.CURRENCY}")
        return v

    @field_validator("payment_method")
    @classmethod
    def default_payment_method(cls, v: Optional[str]) -> str:
        return _blank(v) or "cash"


class SchoolFeeOut(CamelModel):
    id: int
    year: int
    semester: str
    amount: float
    payment_date: dt.date
    payment_method: str


# ---------- Appointments ----------
class AppointmentIn(CamelModel):
    name: str = Field(min_length=1, max_length=100)
    place: OptionalText = ""
    date: dt.date
    time: dt.time
    aim: OptionalText = ""
    notification: Notification = "none"


class AppointmentStatusIn(CamelModel):
    status: AppointmentStatus


class AppointmentOut(CamelModel):
    id: int
    name: str
    place: Optional[str] = None
    date: dt.date
    time: dt.time
    aim: Optional[str] = None
    notification: str
    status: AppointmentStatus


# ---------- Journeys ----------
class JourneyIn(CamelModel):
    journey_from: str = Field(alias="from", min_length=1, max_length=100)
    journey_to: str = Field(alias="to", min_length=1, max_length=100)
    date: dt.date
    time: dt.time = dt.time(0, 0)
    transport_cost: float = Field(0, ge=0)
    food_cost: float = Field(0, ge=0)
    status: JourneyStatus = "pending"


class JourneyStatusIn(CamelModel):
    status: JourneyStatus


class JourneyOut(CamelModel):
    id: int
    journey_from: str = Field(alias="from")
    journey_to: str = Field(alias="to")
    date: dt.date
    time: dt.time
    transport_cost: float
    food_cost: float
    total_cost: float
    status: JourneyStatus


# ---------- Activities / dashboard ----------
class ActivityOut(CamelModel):
    id: int
    description: str
    type: str
    status: str
    created_at: dt.datetime


class ClearedActivities(CamelModel):
    cleared_count: int


class DashboardStats(CamelModel):
    module_count: int = 0
    appointment_count: int = 0
    appointment_completed: int = 0
    money_owed: float = 0
    money_returned: float = 0
    journey_count: int = 0
    journey_completed: int = 0
    savings_total: float = 0
    exam_count: int = 0
    recent_activity_count: int = 0
