from __future__ import annotations

from datetime import date
from typing import Any

from shiftmate_client.apis._dates import format_date
from shiftmate_client.envelope import unwrap_list, unwrap_payload
from shiftmate_client.http import HttpClient
from shiftmate_client.models import ApiResult, Store

STORE_FIELDS = {
    "name": "name",
    "code": "code",
    "location": "location",
    "status": "status",
    "open_time": "openTime",
    "close_time": "closeTime",
    "image": "image",
}
TEMPLATE_TYPES = ("COSTSAVER", "HIGHSERVICE")


class StoresApi:
    def __init__(self, http_client: HttpClient):
        self._http_client = http_client

    def get_stores(self) -> ApiResult[list[Store]]:
        result = self._http_client.get("/stores")
        if not result.success:
            return result
        return ApiResult.ok(
            [Store.from_dict(row) for row in unwrap_list(result.data) if isinstance(row, dict)]
        )

    def get_store(self, store_id: str) -> ApiResult[Store]:
        return _store(self._http_client.get(f"/stores/{store_id}"))

    def verify_business_number(self, business_number: str) -> ApiResult[Any]:
        digits = business_number.replace("-", "").strip()
        if not digits.isdigit():
            raise ValueError("Business registration number must contain only digits and dashes")
        return _payload(self._http_client.post("/stores/verify-bizno", {"bno": digits}))

    def create_store(
        self,
        name: str,
        open_time: str,
        close_time: str,
        shift_count: int,
        business_number: str,
        location: str | None = None,
        alias: str | None = None,
        monthly_sales: int | None = None,
    ) -> ApiResult[Any]:
        """Register a store the way the setup wizard does.

        ``shift_count`` is the number of shifts per day the store runs; the
        server derives its default shift template from it.
        """
        if not name.strip():
            raise ValueError("Store name is required")
        if shift_count < 1:
            raise ValueError("A store needs at least one shift per day")

        payload: dict[str, Any] = {
            "name": name.strip(),
            "openTime": open_time,
            "closeTime": close_time,
            "nShifts": int(shift_count),
            "brn": business_number.replace("-", "").strip(),
        }
        if location:
            payload["location"] = location.strip()
        if alias:
            payload["alias"] = alias.strip()
        if monthly_sales is not None:
            payload["monthlySales"] = int(monthly_sales)
        return _payload(self._http_client.post("/stores", payload))

    def update_store(self, store_id: str, **changes: Any) -> ApiResult[Store]:
        unknown = sorted(set(changes) - set(STORE_FIELDS))
        if unknown:
            raise ValueError("Unknown store fields: " + ", ".join(unknown))

        payload = {STORE_FIELDS[name]: value for name, value in changes.items()}
        return _store(self._http_client.put(f"/stores/{store_id}", payload))

    def delete_store(self, store_id: str) -> ApiResult[None]:
        result = self._http_client.delete(f"/stores/{store_id}")
        if not result.success:
            return result
        return ApiResult.ok(None)

    def get_shift_template(self, store_id: str) -> ApiResult[Any]:
        return _payload(self._http_client.get(f"/stores/{store_id}/shift-template"))

    def get_shift_template_type(self, store_id: str) -> ApiResult[Any]:
        return _payload(self._http_client.get(f"/stores/{store_id}/shift-template/type"))

    def create_shift_template(
        self,
        store_id: str,
        peak: bool,
        peak_start_time: str | None = None,
        peak_end_time: str | None = None,
    ) -> ApiResult[Any]:
        if peak and not (peak_start_time and peak_end_time):
            raise ValueError("Peak start and end times are required when peak is enabled")

        payload: dict[str, Any] = {"peak": bool(peak)}
        if peak:
            payload["peakStartTime"] = peak_start_time
            payload["peakEndTime"] = peak_end_time
        return _payload(self._http_client.post(f"/stores/{store_id}/shift-template", payload))

    def set_template_type(self, store_id: str, template_type: str) -> ApiResult[Any]:
        template_type = template_type.strip().upper()
        if template_type not in TEMPLATE_TYPES:
            raise ValueError("Template type must be one of: " + ", ".join(TEMPLATE_TYPES))
        return _payload(
            self._http_client.put(f"/stores/{store_id}/shift-template", {"templateType": template_type})
        )

    def delete_other_template_types(self, store_id: str) -> ApiResult[None]:
        result = self._http_client.delete(f"/stores/{store_id}/shift-template/type")
        if not result.success:
            return result
        return ApiResult.ok(None)

    def get_store_schedules(self, store_id: str, week_start: date | str) -> ApiResult[Any]:
        return _payload(
            self._http_client.get(
                f"/stores/{store_id}/schedules",
                params={"weekStartDate": format_date(week_start)},
            )
        )


def _payload(result: ApiResult[Any]) -> ApiResult[Any]:
    if not result.success:
        return result
    return ApiResult.ok(unwrap_payload(result.data))


def _store(result: ApiResult[Any]) -> ApiResult[Any]:
    if not result.success:
        return result
    payload = unwrap_payload(result.data)
    if not isinstance(payload, dict):
        return ApiResult.ok(None)
    return ApiResult.ok(Store.from_dict(payload))
