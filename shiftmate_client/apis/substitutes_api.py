from __future__ import annotations

from typing import Any, Callable, TypeVar

from shiftmate_client.envelope import unwrap_list
from shiftmate_client.http import HttpClient
from shiftmate_client.models import (
    ApiResult,
    MySubstituteApplication,
    SubstituteApplication,
    SubstituteRequest,
)

R = TypeVar("R")

# Filter value meaning "no status filter"; never sent to the server.
ALL_STATUSES = "ALL"


class SubstitutesApi:
    """Substitute-shift requests and the applications made against them.

    Staff post a request for one of their own shifts, colleagues apply, and a
    manager selects one applicant. List calls accept the server's ``sort`` and
    ``status`` filters.
    """

    def __init__(self, http_client: HttpClient):
        self._http_client = http_client

    def create_request(self, store_id: str, shift_assignment_id: int, reason: str) -> ApiResult[Any]:
        reason = reason.strip()
        if not reason:
            raise ValueError("A reason is required for a substitute request")
        return self._http_client.post(
            f"/stores/{store_id}/substitute-requests",
            {"shiftAssignmentId": int(shift_assignment_id), "reason": reason},
        )

    def get_other_requests(
        self, store_id: str, sort: str | None = None, status: str | None = None
    ) -> ApiResult[list[SubstituteRequest]]:
        return self._list_requests(f"/stores/{store_id}/substitute-requests/others", sort, status)

    def get_my_requests(
        self, store_id: str, sort: str | None = None, status: str | None = None
    ) -> ApiResult[list[SubstituteRequest]]:
        return self._list_requests(f"/stores/{store_id}/substitute-requests/my", sort, status)

    def get_all_requests(
        self, store_id: str, sort: str | None = None, status: str | None = None
    ) -> ApiResult[list[SubstituteRequest]]:
        return self._list_requests(f"/stores/{store_id}/substitute-requests/all", sort, status)

    def cancel_request(self, store_id: str, request_id: int) -> ApiResult[Any]:
        return self._http_client.delete(f"/stores/{store_id}/substitute-requests/{request_id}")

    def manager_cancel_request(self, store_id: str, request_id: int) -> ApiResult[Any]:
        return self._http_client.delete(
            f"/stores/{store_id}/substitute-requests/{request_id}/manager-cancel"
        )

    def apply(self, store_id: str, request_id: int) -> ApiResult[Any]:
        return self._http_client.post(f"/stores/{store_id}/substitute-requests/{request_id}/apply", {})

    def get_my_applications(
        self, store_id: str, sort: str | None = None, status: str | None = None
    ) -> ApiResult[list[MySubstituteApplication]]:
        result = self._http_client.get(
            f"/stores/{store_id}/substitute-requests/applications/my",
            params=_filters(sort, status),
        )
        return _mapped(result, MySubstituteApplication.from_dict, lambda item: item.application_id)

    def cancel_application(self, store_id: str, application_id: int) -> ApiResult[Any]:
        return self._http_client.delete(
            f"/stores/{store_id}/substitute-requests/applications/{application_id}"
        )

    def get_applicants(
        self,
        store_id: str,
        request_id: int,
        sort: str | None = None,
        status: str | None = None,
    ) -> ApiResult[list[SubstituteApplication]]:
        result = self._http_client.get(
            f"/stores/{store_id}/substitute-requests/{request_id}/applications",
            params=_filters(sort, status),
        )
        return _mapped(result, SubstituteApplication.from_dict, lambda item: item.application_id)

    def approve_application(self, store_id: str, request_id: int, application_id: int) -> ApiResult[Any]:
        return self._http_client.patch(
            f"/stores/{store_id}/substitute-requests/{request_id}/applications/{application_id}/approve",
            {},
        )

    def reject_application(self, store_id: str, request_id: int, application_id: int) -> ApiResult[Any]:
        return self._http_client.patch(
            f"/stores/{store_id}/substitute-requests/{request_id}/applications/{application_id}/reject",
            {},
        )

    def _list_requests(
        self, path: str, sort: str | None, status: str | None
    ) -> ApiResult[list[SubstituteRequest]]:
        result = self._http_client.get(path, params=_filters(sort, status))
        return _mapped(result, SubstituteRequest.from_dict, lambda item: item.id)


def _filters(sort: str | None, status: str | None) -> dict[str, str] | None:
    params: dict[str, str] = {}
    if sort:
        params["sort"] = sort
    if status and status != ALL_STATUSES:
        params["status"] = status
    return params or None


def _mapped(
    result: ApiResult[Any],
    parse: Callable[[dict[str, Any]], R],
    key: Callable[[R], Any],
) -> ApiResult[list[R]]:
    if not result.success:
        return result

    # Rows repeated under one id collapse into the last of them, at the first position.
    unique: dict[Any, R] = {}
    for row in unwrap_list(result.data):
        if isinstance(row, dict):
            item = parse(row)
            unique[key(item)] = item
    return ApiResult.ok(list(unique.values()))
