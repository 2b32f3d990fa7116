from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class Credentials:
    access_token: str
    refresh_token: str | None = None


@dataclass(frozen=True)
class ApiError:
    code: str
    message: str
    details: dict[str, Any] | None = None


@dataclass(frozen=True)
class ApiResult(Generic[T]):
    """Outcome of one logical API call.

    Exactly one of ``data`` and ``error`` is meaningful: ``data`` when
    ``success`` is true, ``error`` otherwise. Use :meth:`ok` and :meth:`fail`
    instead of the constructor.
    """

    success: bool
    data: T | None = None
    error: ApiError | None = None

    @classmethod
    def ok(cls, data: T | None = None) -> "ApiResult[T]":
        return cls(success=True, data=data)

    @classmethod
    def fail(
        cls,
        code: str,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> "ApiResult[T]":
        return cls(success=False, error=ApiError(code=code, message=message, details=details))

    @classmethod
    def from_error(cls, error: ApiError) -> "ApiResult[T]":
        return cls(success=False, error=error)


@dataclass(frozen=True)
class AuthState:
    is_signed_in: bool
    user_name: str | None = None


def _int_or(value: Any, default: int = 0) -> int:
    if isinstance(value, bool):
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def _float_or(value: Any, default: float = 0.0) -> float:
    if isinstance(value, bool):
        return default
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


def _str_or_none(value: Any) -> str | None:
    return value if isinstance(value, str) else None


@dataclass(frozen=True)
class TodayAttendance:
    assignment_id: int
    worker_name: str
    role: str
    department: str
    updated_start_time: str
    updated_end_time: str
    clock_in_at: str | None
    clock_out_at: str | None
    current_work_status: str

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> "TodayAttendance":
        return cls(
            assignment_id=_int_or(raw.get("assignmentId")),
            worker_name=str(raw.get("workerName") or ""),
            role=str(raw.get("role") or ""),
            department=str(raw.get("department") or ""),
            updated_start_time=str(raw.get("updatedStartTime") or ""),
            updated_end_time=str(raw.get("updatedEndTime") or ""),
            clock_in_at=_str_or_none(raw.get("clockInAt")),
            clock_out_at=_str_or_none(raw.get("clockOutAt")),
            current_work_status=str(raw.get("currentWorkStatus") or "BEFORE_WORK"),
        )


@dataclass(frozen=True)
class WeeklyAttendanceItem:
    assignment_id: int
    worker_name: str
    role: str
    department: str
    updated_start_time: str
    updated_end_time: str
    clock_in_at: str | None
    clock_out_at: str | None
    status: str | None
    worked_minutes: int

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> "WeeklyAttendanceItem":
        return cls(
            assignment_id=_int_or(raw.get("assignmentId")),
            worker_name=str(raw.get("workerName") or ""),
            role=str(raw.get("role") or ""),
            department=str(raw.get("department") or ""),
            updated_start_time=str(raw.get("updatedStartTime") or ""),
            updated_end_time=str(raw.get("updatedEndTime") or ""),
            clock_in_at=_str_or_none(raw.get("clockInAt")),
            clock_out_at=_str_or_none(raw.get("clockOutAt")),
            status=_str_or_none(raw.get("status")),
            worked_minutes=_int_or(raw.get("workedMinutes")),
        )


@dataclass(frozen=True)
class MyWeeklyAttendance:
    total_work_time: str
    total_minutes: int
    weekly_data: list[WeeklyAttendanceItem] = field(default_factory=list)

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> "MyWeeklyAttendance":
        rows = raw.get("weeklyData")
        return cls(
            total_work_time=str(raw.get("totalWorkTime") or ""),
            total_minutes=_int_or(raw.get("totalMinutes")),
            weekly_data=[
                WeeklyAttendanceItem.from_dict(row)
                for row in (rows if isinstance(rows, list) else [])
                if isinstance(row, dict)
            ],
        )


@dataclass(frozen=True)
class OpenShift:
    id: int
    work_date: str
    start_time: str
    end_time: str
    request_status: str
    created_at: str
    note: str | None = None

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> "OpenShift":
        return cls(
            id=_int_or(raw.get("id")),
            work_date=str(raw.get("workDate") or ""),
            start_time=str(raw.get("startTime") or ""),
            end_time=str(raw.get("endTime") or ""),
            request_status=str(raw.get("requestStatus") or "OPEN"),
            created_at=str(raw.get("createdAt") or ""),
            note=_str_or_none(raw.get("note")),
        )


@dataclass(frozen=True)
class OpenShiftApplicant:
    id: int
    applicant_name: str
    department: str
    apply_status: str
    created_at: str

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> "OpenShiftApplicant":
        return cls(
            id=_int_or(raw.get("id")),
            applicant_name=str(raw.get("applicantName") or ""),
            department=str(raw.get("department") or ""),
            apply_status=str(raw.get("applyStatus") or "WAITING"),
            created_at=str(raw.get("createdAt") or ""),
        )


@dataclass(frozen=True)
class SalaryMonth:
    year: int
    month: int


@dataclass(frozen=True)
class StoreMonthlySalary:
    store_id: int
    store_name: str
    store_alias: str | None
    hourly_wage: float
    worked_minutes: int
    worked_hours: float
    estimated_pay: float

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> "StoreMonthlySalary":
        store_name = raw.get("storeName")
        return cls(
            store_id=_int_or(raw.get("storeId")),
            store_name=store_name if isinstance(store_name, str) else "Store",
            store_alias=_str_or_none(raw.get("storeAlias")),
            hourly_wage=_float_or(raw.get("hourlyWage")),
            worked_minutes=_int_or(raw.get("workedMinutes")),
            worked_hours=_float_or(raw.get("workedHours")),
            estimated_pay=_float_or(raw.get("estimatedPay")),
        )


@dataclass(frozen=True)
class MonthlySalarySummary:
    year: int
    month: int
    total_estimated_pay: float
    stores: list[StoreMonthlySalary] = field(default_factory=list)


@dataclass(frozen=True)
class UserSchedule:
    id: int
    date: str
    start_time: str
    end_time: str
    role: str | None = None

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> "UserSchedule":
        raw_id = raw.get("id")
        if raw_id is None:
            raw_id = raw.get("shiftAssignmentId")
        return cls(
            id=_int_or(raw_id),
            date=str(raw.get("date") or raw.get("workDate") or ""),
            start_time=str(raw.get("startTime") or ""),
            end_time=str(raw.get("endTime") or ""),
            role=_str_or_none(raw.get("role")),
        )


@dataclass(frozen=True)
class Employee:
    id: str
    first_name: str
    last_name: str
    email: str
    role: str
    department: str
    hourly_wage: float
    status: str

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> "Employee":
        return cls(
            id=str(raw.get("id") or ""),
            first_name=str(raw.get("firstName") or ""),
            last_name=str(raw.get("lastName") or ""),
            email=str(raw.get("email") or ""),
            role=str(raw.get("role") or "staff"),
            department=str(raw.get("department") or ""),
            hourly_wage=_float_or(raw.get("hourlyWage")),
            status=str(raw.get("status") or "active"),
        )


@dataclass(frozen=True)
class Store:
    id: str
    name: str
    code: str
    location: str
    status: str
    active_staff: int
    shift_coverage: float
    open_time: str | None = None
    close_time: str | None = None

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> "Store":
        return cls(
            id=str(raw.get("id") or raw.get("storeId") or ""),
            name=str(raw.get("name") or ""),
            code=str(raw.get("code") or ""),
            location=str(raw.get("location") or ""),
            status=str(raw.get("status") or "open"),
            active_staff=_int_or(raw.get("activeStaff")),
            shift_coverage=_float_or(raw.get("shiftCoverage")),
            open_time=_str_or_none(raw.get("openTime")),
            close_time=_str_or_none(raw.get("closeTime")),
        )


@dataclass(frozen=True)
class SubstituteRequest:
    """A shift its owner wants someone else to work."""

    id: int
    shift_id: int
    requester_id: int
    requester_name: str
    date: str
    start_time: str
    end_time: str
    reason: str
    status: str
    created_at: str

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> "SubstituteRequest":
        return cls(
            id=_int_or(raw.get("requestId")),
            shift_id=_int_or(raw.get("shiftAssignmentId")),
            requester_id=_int_or(raw.get("requesterId")),
            requester_name=str(raw.get("requesterName") or ""),
            date=str(raw.get("workDate") or ""),
            start_time=str(raw.get("startTime") or ""),
            end_time=str(raw.get("endTime") or ""),
            reason=str(raw.get("reason") or ""),
            status=str(raw.get("status") or "OPEN"),
            created_at=str(raw.get("createdAt") or ""),
        )


@dataclass(frozen=True)
class MySubstituteApplication:
    application_id: int
    request_id: int
    requester_name: str
    date: str
    start_time: str
    end_time: str
    status: str
    created_at: str

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> "MySubstituteApplication":
        return cls(
            application_id=_int_or(raw.get("applicationId")),
            request_id=_int_or(raw.get("requestId")),
            requester_name=str(raw.get("requesterName") or ""),
            date=str(raw.get("workDate") or ""),
            start_time=str(raw.get("startTime") or ""),
            end_time=str(raw.get("endTime") or ""),
            status=str(raw.get("applicationStatus") or "WAITING"),
            created_at=str(raw.get("createdAt") or ""),
        )


@dataclass(frozen=True)
class SubstituteApplication:
    application_id: int
    applicant_id: int
    applicant_name: str
    status: str
    created_at: str
    # Not exposed by the server yet.
    applicant_phone: str | None = None

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> "SubstituteApplication":
        return cls(
            application_id=_int_or(raw.get("applicationId")),
            applicant_id=_int_or(raw.get("applicantId")),
            applicant_name=str(raw.get("applicantName") or ""),
            status=str(raw.get("applicationStatus") or "WAITING"),
            created_at=str(raw.get("createdAt") or ""),
            applicant_phone=_str_or_none(raw.get("applicantPhone")),
        )
