from __future__ import annotations

from typing import Any

from shiftmate_client.envelope import unwrap_list, unwrap_payload
from shiftmate_client.http import HttpClient
from shiftmate_client.models import ApiResult, Employee

EMPLOYEE_FIELDS = {
    "first_name": "firstName",
    "last_name": "lastName",
    "email": "email",
    "role": "role",
    "department": "department",
    "hourly_wage": "hourlyWage",
    "status": "status",
}


class EmployeesApi:
    def __init__(self, http_client: HttpClient):
        self._http_client = http_client

    def get_employees(self, store_id: str | None = None) -> ApiResult[list[Employee]]:
        params = {"storeId": store_id} if store_id else None
        result = self._http_client.get("/employees", params=params)
        if not result.success:
            return result
        return ApiResult.ok(
            [Employee.from_dict(row) for row in unwrap_list(result.data) if isinstance(row, dict)]
        )

    def get_employee(self, employee_id: str) -> ApiResult[Employee]:
        result = self._http_client.get(f"/employees/{employee_id}")
        return self._single(result)

    def invite_employee(self, email: str, role: str, store_id: str) -> ApiResult[Employee]:
        email = email.strip()
        if "@" not in email:
            raise ValueError("A valid email address is required")

        result = self._http_client.post(
            "/employees/invite",
            {"email": email, "role": role, "storeId": store_id},
        )
        return self._single(result)

    def update_employee(self, employee_id: str, **changes: Any) -> ApiResult[Employee]:
        unknown = sorted(set(changes) - set(EMPLOYEE_FIELDS))
        if unknown:
            raise ValueError("Unknown employee fields: " + ", ".join(unknown))

        payload = {EMPLOYEE_FIELDS[name]: value for name, value in changes.items()}
        result = self._http_client.put(f"/employees/{employee_id}", payload)
        return self._single(result)

    def delete_employee(self, employee_id: str) -> ApiResult[None]:
        result = self._http_client.delete(f"/employees/{employee_id}")
        if not result.success:
            return result
        return ApiResult.ok(None)

    @staticmethod
    def _single(result: ApiResult[Any]) -> ApiResult[Any]:
        if not result.success:
            return result
        payload = unwrap_payload(result.data)
        if not isinstance(payload, dict):
            return ApiResult.ok(None)
        return ApiResult.ok(Employee.from_dict(payload))
