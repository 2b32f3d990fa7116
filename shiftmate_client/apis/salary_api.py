from __future__ import annotations

from typing import Any

from shiftmate_client.envelope import unwrap
from shiftmate_client.http import HttpClient
from shiftmate_client.models import (
    ApiResult,
    MonthlySalarySummary,
    SalaryMonth,
    StoreMonthlySalary,
)

INVALID_RESPONSE = "INVALID_RESPONSE"


class SalaryApi:
    """Estimated pay as computed by the server from logged hours."""

    def __init__(self, http_client: HttpClient):
        self._http_client = http_client

    def get_salary_months(self) -> ApiResult[list[SalaryMonth]]:
        result = self._http_client.get("/users/me/salary/months")
        if not result.success:
            return result

        payload = unwrap(result.data)
        if not isinstance(payload, list):
            return ApiResult.fail(INVALID_RESPONSE, "Salary month list has an unexpected format.")

        months = []
        for row in payload:
            if not isinstance(row, dict):
                continue
            year = _as_int(row.get("year"))
            month = _as_int(row.get("month"))
            if year is None or month is None:
                continue
            months.append(SalaryMonth(year=year, month=month))
        return ApiResult.ok(months)

    def get_monthly_salary(self, year: int, month: int) -> ApiResult[MonthlySalarySummary]:
        if not 1 <= month <= 12:
            raise ValueError("month must be between 1 and 12")

        result = self._http_client.get(
            "/users/me/salary/monthly",
            params={"year": year, "month": month},
        )
        if not result.success:
            return result

        payload = unwrap(result.data)
        if not isinstance(payload, dict):
            return ApiResult.fail(INVALID_RESPONSE, "Monthly salary has an unexpected format.")

        stores_raw = payload.get("stores")
        stores = [
            StoreMonthlySalary.from_dict(row)
            for row in (stores_raw if isinstance(stores_raw, list) else [])
            if isinstance(row, dict)
        ]
        return ApiResult.ok(
            MonthlySalarySummary(
                year=_as_int(payload.get("year")) or year,
                month=_as_int(payload.get("month")) or month,
                total_estimated_pay=_as_float(payload.get("totalEstimatedPay")),
                stores=stores,
            )
        )


def _as_float(value: Any) -> float:
    if isinstance(value, bool):
        return 0.0
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0.0


def _as_int(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return None
    return None
