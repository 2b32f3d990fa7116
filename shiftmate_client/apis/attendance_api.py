from __future__ import annotations

from datetime import date
from typing import Any

from shiftmate_client.apis._dates import format_date
from shiftmate_client.envelope import unwrap_list, unwrap_payload
from shiftmate_client.http import HttpClient
from shiftmate_client.models import (
    ApiResult,
    MyWeeklyAttendance,
    TodayAttendance,
    WeeklyAttendanceItem,
)


class AttendanceApi:
    def __init__(self, http_client: HttpClient):
        self._http_client = http_client

    def clock(self, store_id: str, assignment_id: int, otp: str) -> ApiResult[Any]:
        otp = otp.strip()
        if not otp.isdigit():
            raise ValueError("OTP must contain digits only")

        return self._http_client.post(
            f"/stores/{store_id}/attendance/clock",
            {"assignmentId": int(assignment_id), "otp": otp},
        )

    def get_daily_attendance(self, store_id: str, day: date | str) -> ApiResult[list[TodayAttendance]]:
        result = self._http_client.get(
            f"/stores/{store_id}/attendance/daily",
            params={"date": format_date(day)},
        )
        return self._map_rows(result, TodayAttendance.from_dict)

    def get_my_daily_attendance(self, store_id: str) -> ApiResult[list[TodayAttendance]]:
        result = self._http_client.get(f"/stores/{store_id}/attendance/daily/my")
        return self._map_rows(result, TodayAttendance.from_dict)

    def get_weekly_attendance(self, store_id: str, day: date | str) -> ApiResult[list[WeeklyAttendanceItem]]:
        result = self._http_client.get(
            f"/stores/{store_id}/attendance/weekly",
            params={"date": format_date(day)},
        )
        return self._map_rows(result, WeeklyAttendanceItem.from_dict)

    def get_my_weekly_attendance(self, store_id: str, day: date | str) -> ApiResult[MyWeeklyAttendance]:
        result = self._http_client.get(
            f"/stores/{store_id}/attendance/weekly/my",
            params={"date": format_date(day)},
        )
        if not result.success:
            return result

        payload = unwrap_payload(result.data)
        if not isinstance(payload, dict):
            payload = {}
        return ApiResult.ok(MyWeeklyAttendance.from_dict(payload))

    @staticmethod
    def _map_rows(result: ApiResult[Any], parse) -> ApiResult[Any]:
        if not result.success:
            return result
        return ApiResult.ok([parse(row) for row in unwrap_list(result.data) if isinstance(row, dict)])
