from .attendance_api import AttendanceApi
from .employees_api import EmployeesApi
from .open_shift_api import OpenShiftApi
from .salary_api import SalaryApi
from .schedules_api import SchedulesApi
from .stores_api import StoresApi
from .substitutes_api import SubstitutesApi
from .users_api import UsersApi

__all__ = [
    "AttendanceApi",
    "EmployeesApi",
    "OpenShiftApi",
    "SalaryApi",
    "SchedulesApi",
    "StoresApi",
    "SubstitutesApi",
    "UsersApi",
]
