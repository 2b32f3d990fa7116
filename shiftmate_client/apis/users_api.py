from __future__ import annotations

from typing import Any

from shiftmate_client.envelope import unwrap_payload
from shiftmate_client.http import HttpClient
from shiftmate_client.models import ApiResult


class UsersApi:
    def __init__(self, http_client: HttpClient):
        self._http_client = http_client

    def get_user_info_by_email(self, email: str) -> ApiResult[Any]:
        """Admin lookup of a user account by e-mail address."""
        email = email.strip()
        if "@" not in email:
            raise ValueError("A valid email address is required")

        result = self._http_client.get("/users/admin/user-info", params={"email": email})
        if not result.success:
            return result
        return ApiResult.ok(unwrap_payload(result.data))
