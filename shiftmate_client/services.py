from __future__ import annotations

from datetime import date
from typing import Any, Callable

import requests

from shiftmate_client.apis import (
    AttendanceApi,
    EmployeesApi,
    OpenShiftApi,
    SalaryApi,
    SchedulesApi,
    StoresApi,
    SubstitutesApi,
    UsersApi,
)
from shiftmate_client.auth import AuthManager
from shiftmate_client.config import AppSettings
from shiftmate_client.http import HttpClient
from shiftmate_client.models import ApiResult, AuthState
from shiftmate_client.storage import FileStorage, KeyValueStorage
from shiftmate_client.tokens import TokenStore


class ShiftMateService:
    def __init__(
        self,
        settings: AppSettings,
        http_client: HttpClient,
        auth_manager: AuthManager,
        attendance_api: AttendanceApi,
        employees_api: EmployeesApi,
        open_shift_api: OpenShiftApi,
        salary_api: SalaryApi,
        schedules_api: SchedulesApi,
        stores_api: StoresApi,
        substitutes_api: SubstitutesApi,
        users_api: UsersApi,
    ):
        self._settings = settings
        self._http_client = http_client
        self._auth_manager = auth_manager
        self.attendance = attendance_api
        self.employees = employees_api
        self.open_shifts = open_shift_api
        self.salary = salary_api
        self.schedules = schedules_api
        self.stores = stores_api
        self.substitutes = substitutes_api
        self.users = users_api

    @property
    def request_timeout_seconds(self) -> int:
        return self._settings.timeout_seconds

    @property
    def default_store_id(self) -> str:
        return self._settings.default_store_id

    def on_auth_expired(self, handler: Callable[[], None] | None) -> None:
        self._http_client.set_auth_expired_handler(handler)

    def auth_state(self) -> AuthState:
        return self._auth_manager.get_auth_state()

    def sign_in(self, email: str, password: str) -> ApiResult[Any]:
        return self._auth_manager.login(email, password)

    def sign_out(self) -> ApiResult[Any]:
        return self._auth_manager.logout()

    def current_user(self) -> ApiResult[Any]:
        return self._auth_manager.get_current_user()

    def clock(self, store_id: str, assignment_id: int, otp: str) -> ApiResult[Any]:
        return self.attendance.clock(store_id, assignment_id, otp)

    def today_attendance(self, store_id: str) -> ApiResult[Any]:
        return self.attendance.get_daily_attendance(store_id, date.today())

    def my_week(self, store_id: str, day: date | str | None = None) -> ApiResult[Any]:
        return self.attendance.get_my_weekly_attendance(store_id, day or date.today())

    def open_shift_list(self, store_id: str) -> ApiResult[Any]:
        return self.open_shifts.get_list(store_id)

    def apply_open_shift(self, store_id: str, open_shift_id: int) -> ApiResult[Any]:
        return self.open_shifts.apply(store_id, open_shift_id)

    def monthly_salary(self, year: int, month: int) -> ApiResult[Any]:
        return self.salary.get_monthly_salary(year, month)

    def my_stores(self) -> ApiResult[Any]:
        return self.stores.get_stores()

    def open_substitute_requests(self, store_id: str) -> ApiResult[Any]:
        return self.substitutes.get_other_requests(store_id, status="OPEN")

    def apply_substitute(self, store_id: str, request_id: int) -> ApiResult[Any]:
        return self.substitutes.apply(store_id, request_id)


def build_service(
    settings: AppSettings,
    storage: KeyValueStorage | None = None,
    session: requests.Session | None = None,
    on_auth_expired: Callable[[], None] | None = None,
) -> ShiftMateService:
    tokens = TokenStore(storage if storage is not None else FileStorage(settings.token_store_path))
    http_client = HttpClient(settings, tokens, session=session, on_auth_expired=on_auth_expired)
    return ShiftMateService(
        settings=settings,
        http_client=http_client,
        auth_manager=AuthManager(http_client),
        attendance_api=AttendanceApi(http_client),
        employees_api=EmployeesApi(http_client),
        open_shift_api=OpenShiftApi(http_client),
        salary_api=SalaryApi(http_client),
        schedules_api=SchedulesApi(http_client),
        stores_api=StoresApi(http_client),
        substitutes_api=SubstitutesApi(http_client),
        users_api=UsersApi(http_client),
    )
