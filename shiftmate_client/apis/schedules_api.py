from __future__ import annotations

from datetime import date
from typing import Any

from shiftmate_client.apis._dates import format_date
from shiftmate_client.envelope import unwrap_list, unwrap_payload
from shiftmate_client.http import HttpClient
from shiftmate_client.models import ApiResult, UserSchedule

SHIFT_TYPES = ("opening", "middle", "closing")


class SchedulesApi:
    def __init__(self, http_client: HttpClient):
        self._http_client = http_client

    def get_user_schedules(self, store_id: str, user_id: str | int) -> ApiResult[list[UserSchedule]]:
        result = self._http_client.get(f"/stores/{store_id}/schedules/users/{user_id}")
        if not result.success:
            return result
        return ApiResult.ok(
            [UserSchedule.from_dict(row) for row in unwrap_list(result.data) if isinstance(row, dict)]
        )

    def get_schedule(self, store_id: str, week_start: date | str) -> ApiResult[Any]:
        result = self._http_client.get(
            "/schedules",
            params={"storeId": store_id, "weekStart": format_date(week_start)},
        )
        return _payload(result)

    def get_my_shifts(self, week_start: date | str | None = None) -> ApiResult[list[Any]]:
        params = {"weekStart": format_date(week_start)} if week_start is not None else None
        result = self._http_client.get("/schedules/my-shifts", params=params)
        if not result.success:
            return result
        return ApiResult.ok(unwrap_list(result.data))

    def create_shift(self, shift: dict[str, Any]) -> ApiResult[Any]:
        _check_shift_type(shift)
        return _payload(self._http_client.post("/schedules/shifts", shift))

    def update_shift(self, shift_id: str, changes: dict[str, Any]) -> ApiResult[Any]:
        _check_shift_type(changes)
        return _payload(self._http_client.put(f"/schedules/shifts/{shift_id}", changes))

    def delete_shift(self, shift_id: str) -> ApiResult[None]:
        result = self._http_client.delete(f"/schedules/shifts/{shift_id}")
        if not result.success:
            return result
        return ApiResult.ok(None)

    def get_substitute_requests(self) -> ApiResult[list[Any]]:
        result = self._http_client.get("/schedules/substitute-requests")
        if not result.success:
            return result
        return ApiResult.ok(unwrap_list(result.data))

    def create_substitute_request(
        self,
        store_id: str,
        shift_id: str | int,
        reason: str | None = None,
    ) -> ApiResult[Any]:
        payload: dict[str, Any] = {"assignmentId": int(shift_id)}
        if reason:
            payload["reason"] = reason.strip()
        return _payload(self._http_client.post(f"/stores/{store_id}/substitute-requests", payload))

    def approve_substitute_request(self, request_id: str) -> ApiResult[Any]:
        return _payload(self._http_client.post(f"/schedules/substitute-requests/{request_id}/approve"))

    def reject_substitute_request(self, request_id: str) -> ApiResult[Any]:
        return _payload(self._http_client.post(f"/schedules/substitute-requests/{request_id}/reject"))

    def get_open_shifts(self) -> ApiResult[list[Any]]:
        result = self._http_client.get("/schedules/open-shifts")
        if not result.success:
            return result
        return ApiResult.ok(unwrap_list(result.data))

    def claim_open_shift(self, shift_id: str) -> ApiResult[Any]:
        return _payload(self._http_client.post(f"/schedules/open-shifts/{shift_id}/claim"))


def _payload(result: ApiResult[Any]) -> ApiResult[Any]:
    if not result.success:
        return result
    return ApiResult.ok(unwrap_payload(result.data))


def _check_shift_type(shift: dict[str, Any]) -> None:
    shift_type = shift.get("type")
    if shift_type is not None and shift_type not in SHIFT_TYPES:
        raise ValueError("Shift type must be one of: " + ", ".join(SHIFT_TYPES))
