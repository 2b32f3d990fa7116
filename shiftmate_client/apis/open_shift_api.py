from __future__ import annotations

from datetime import date
from typing import Any

from shiftmate_client.apis._dates import format_date
from shiftmate_client.envelope import unwrap_list
from shiftmate_client.http import HttpClient
from shiftmate_client.models import ApiResult, OpenShift, OpenShiftApplicant


class OpenShiftApi:
    def __init__(self, http_client: HttpClient):
        self._http_client = http_client

    def create(
        self,
        store_id: str,
        shift_template_id: int,
        work_date: date | str,
        note: str | None = None,
    ) -> ApiResult[Any]:
        payload: dict[str, Any] = {
            "shiftTemplateId": int(shift_template_id),
            "workDate": format_date(work_date),
        }
        if note:
            payload["note"] = note.strip()
        return self._http_client.post(f"/stores/{store_id}/open-shift", payload)

    def get_list(self, store_id: str) -> ApiResult[list[OpenShift]]:
        result = self._http_client.get(f"/stores/{store_id}/open-shift")
        if not result.success:
            return result
        return ApiResult.ok(
            [OpenShift.from_dict(row) for row in unwrap_list(result.data) if isinstance(row, dict)]
        )

    def apply(self, store_id: str, open_shift_id: int) -> ApiResult[Any]:
        return self._http_client.post(f"/stores/{store_id}/open-shift/{open_shift_id}/apply")

    def get_applicants(self, store_id: str, open_shift_id: int) -> ApiResult[list[OpenShiftApplicant]]:
        result = self._http_client.get(f"/stores/{store_id}/open-shift/{open_shift_id}/applies")
        if not result.success:
            return result
        return ApiResult.ok(
            [OpenShiftApplicant.from_dict(row) for row in unwrap_list(result.data) if isinstance(row, dict)]
        )

    def approve(self, store_id: str, open_shift_id: int, apply_id: int) -> ApiResult[Any]:
        return self._http_client.patch(
            f"/stores/{store_id}/open-shift/{open_shift_id}/{apply_id}/approve"
        )
