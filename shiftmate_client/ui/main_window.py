from __future__ import annotations

from datetime import date
import json
import logging
import threading

import customtkinter as ctk

from shiftmate_client.config import AppSettings, ConfigurationError
from shiftmate_client.logging_utils import configure_logging
from shiftmate_client.models import ApiResult
from shiftmate_client.services import ShiftMateService, build_service

logger = logging.getLogger(__name__)


class MainWindow(ctk.CTk):
	def __init__(self, service: ShiftMateService):
		super().__init__()
		self._service = service
		self._service.on_auth_expired(lambda: self.after(0, self._handle_auth_expired))
		self.title("ShiftMate")
		self.geometry("1000x760")
		self.minsize(880, 640)

		self._status_label = ctk.CTkLabel(self, text="Not signed in")
		self._status_label.pack(anchor="w", padx=16, pady=(16, 8))

		self._request_progress_label = ctk.CTkLabel(self, text="")
		self._request_progress_label.pack(anchor="w", padx=16, pady=(0, 4))

		self._request_progress_bar = ctk.CTkProgressBar(self)
		self._request_progress_bar.pack(fill="x", padx=16, pady=(0, 8))
		self._request_progress_bar.set(0)

		self._progress_active = False
		self._progress_total_seconds = max(1, int(self._service.request_timeout_seconds))
		self._progress_elapsed_seconds = 0.0
		self._progress_update_interval_seconds = 0.1
		self._set_progress_idle()

		auth_row = ctk.CTkFrame(self)
		auth_row.pack(fill="x", padx=16, pady=(0, 8))

		self._email = ctk.CTkEntry(auth_row, placeholder_text="Email", width=220)
		self._email.pack(side="left", padx=(8, 6), pady=8)
		self._password = ctk.CTkEntry(auth_row, placeholder_text="Password", show="*", width=180)
		self._password.pack(side="left", padx=6, pady=8)

		self._sign_in_btn = ctk.CTkButton(auth_row, text="Sign in", command=self._sign_in)
		self._sign_in_btn.pack(side="left", padx=6, pady=8)

		self._sign_out_btn = ctk.CTkButton(auth_row, text="Sign out", command=self._sign_out)
		self._sign_out_btn.pack(side="left", padx=6, pady=8)

		self._store_id = ctk.CTkEntry(auth_row, placeholder_text="Store ID", width=100)
		self._store_id.pack(side="right", padx=(6, 8), pady=8)
		if self._service.default_store_id:
			self._store_id.insert(0, self._service.default_store_id)

		self._tabview = ctk.CTkTabview(self)
		self._tabview.pack(fill="both", expand=True, padx=16, pady=(0, 16))

		self._tabview.add("Attendance")
		self._tabview.add("My Week")
		self._tabview.add("Open Shifts")
		self._tabview.add("Substitutes")
		self._tabview.add("Salary")

		attendance_tab = self._tabview.tab("Attendance")
		clock_row = ctk.CTkFrame(attendance_tab)
		clock_row.pack(fill="x", padx=12, pady=(12, 6))
		self._assignment_id = ctk.CTkEntry(clock_row, placeholder_text="Assignment ID", width=140)
		self._assignment_id.pack(side="left", padx=(8, 6), pady=8)
		self._otp = ctk.CTkEntry(clock_row, placeholder_text="OTP", show="*", width=100)
		self._otp.pack(side="left", padx=6, pady=8)
		ctk.CTkButton(clock_row, text="Clock in / out", command=self._clock).pack(
			side="left", padx=6, pady=8
		)
		ctk.CTkButton(clock_row, text="Today's attendance", command=self._load_today).pack(
			side="left", padx=6, pady=8
		)

		self._attendance_validation_label = ctk.CTkLabel(attendance_tab, text="", text_color="#d14343")
		self._attendance_validation_label.pack(anchor="w", padx=12, pady=(0, 6))
		self._attendance_output = self._create_output_pane(attendance_tab, height=420)

		week_tab = self._tabview.tab("My Week")
		ctk.CTkButton(week_tab, text="Load my week", command=self._load_my_week).pack(
			anchor="w", padx=12, pady=(12, 8)
		)
		self._week_output = self._create_output_pane(week_tab, height=460)

		open_shift_tab = self._tabview.tab("Open Shifts")
		open_shift_row = ctk.CTkFrame(open_shift_tab)
		open_shift_row.pack(fill="x", padx=12, pady=(12, 6))
		ctk.CTkButton(open_shift_row, text="Load open shifts", command=self._load_open_shifts).pack(
			side="left", padx=(8, 6), pady=8
		)
		self._open_shift_id = ctk.CTkEntry(open_shift_row, placeholder_text="Open shift ID", width=140)
		self._open_shift_id.pack(side="left", padx=6, pady=8)
		ctk.CTkButton(open_shift_row, text="Apply", command=self._apply_open_shift).pack(
			side="left", padx=6, pady=8
		)
		self._open_shift_output = self._create_output_pane(open_shift_tab, height=440)

		substitute_tab = self._tabview.tab("Substitutes")
		substitute_row = ctk.CTkFrame(substitute_tab)
		substitute_row.pack(fill="x", padx=12, pady=(12, 6))
		ctk.CTkButton(substitute_row, text="Load open requests", command=self._load_substitutes).pack(
			side="left", padx=(8, 6), pady=8
		)
		self._substitute_request_id = ctk.CTkEntry(substitute_row, placeholder_text="Request ID", width=140)
		self._substitute_request_id.pack(side="left", padx=6, pady=8)
		ctk.CTkButton(substitute_row, text="Apply", command=self._apply_substitute).pack(
			side="left", padx=6, pady=8
		)
		self._substitute_output = self._create_output_pane(substitute_tab, height=440)

		salary_tab = self._tabview.tab("Salary")
		salary_row = ctk.CTkFrame(salary_tab)
		salary_row.pack(fill="x", padx=12, pady=(12, 6))
		today = date.today()
		self._salary_year = ctk.CTkEntry(salary_row, placeholder_text="Year", width=80)
		self._salary_year.pack(side="left", padx=(8, 6), pady=8)
		self._salary_year.insert(0, str(today.year))
		self._salary_month = ctk.CTkEntry(salary_row, placeholder_text="Month", width=60)
		self._salary_month.pack(side="left", padx=6, pady=8)
		self._salary_month.insert(0, str(today.month))
		ctk.CTkButton(salary_row, text="Estimate salary", command=self._load_salary).pack(
			side="left", padx=6, pady=8
		)
		self._salary_output = self._create_output_pane(salary_tab, height=440)

		self._refresh_auth_state()

	def _run_in_background(self, output_widget: ctk.CTkTextbox, call, *args, formatter=None):
		self._render_output(output_widget, "Running request...")
		self._start_request_progress()

		def worker():
			try:
				result = call(*args)
				rendered = self._format_result(result, formatter)
			except ValueError as exc:
				rendered = f"Invalid input: {exc}"
			except Exception as exc:
				logger.exception("Request failed")
				rendered = f"{type(exc).__name__}: {exc}"

			self.after(0, lambda: self._render_output(output_widget, rendered))
			self.after(0, self._stop_request_progress)

		threading.Thread(target=worker, daemon=True).start()

	@staticmethod
	def _format_result(result: ApiResult, formatter=None) -> str:
		if not result.success:
			error = result.error
			return error.message if error else "An error occurred"
		if formatter is not None:
			return formatter(result.data)
		if result.data is None:
			return "Done."
		return json.dumps(result.data, indent=2, default=str)

	def _set_progress_idle(self):
		self._request_progress_label.configure(text=f"Request timeout: {self._progress_total_seconds}s")
		self._request_progress_bar.set(0)

	def _start_request_progress(self):
		self._progress_active = True
		self._progress_elapsed_seconds = 0.0
		self._request_progress_bar.set(0)
		self._tick_request_progress()

	def _tick_request_progress(self):
		if not self._progress_active:
			return

		self._progress_elapsed_seconds += self._progress_update_interval_seconds
		progress = min(1.0, self._progress_elapsed_seconds / self._progress_total_seconds)
		self._request_progress_bar.set(progress)
		self._request_progress_label.configure(
			text=(
				f"Request in progress: {self._progress_elapsed_seconds:.1f}s / "
				f"{self._progress_total_seconds}s"
			)
		)
		self.after(
			int(self._progress_update_interval_seconds * 1000),
			self._tick_request_progress,
		)

	def _stop_request_progress(self):
		self._progress_active = False
		self._set_progress_idle()

	@staticmethod
	def _create_output_pane(parent, height: int) -> ctk.CTkTextbox:
		output = ctk.CTkTextbox(parent, height=height)
		output.pack(fill="both", expand=True, padx=12, pady=(4, 12))
		return output

	@staticmethod
	def _render_output(text_widget: ctk.CTkTextbox, text: str):
		text_widget.delete("1.0", "end")
		text_widget.insert("1.0", text)

	def _refresh_auth_state(self):
		state = self._service.auth_state()
		if state.is_signed_in:
			self._status_label.configure(text=f"Signed in as {state.user_name or 'staff member'}")
		else:
			self._status_label.configure(text="Not signed in")
		self._set_auth_button_state(is_signed_in=state.is_signed_in)

	def _set_auth_button_state(self, is_signed_in: bool):
		if is_signed_in:
			self._sign_in_btn.configure(state="disabled")
			self._sign_out_btn.configure(state="normal")
			return

		self._sign_in_btn.configure(state="normal")
		self._sign_out_btn.configure(state="disabled")

	def _handle_auth_expired(self):
		self._status_label.configure(text="Session expired. Sign in again.")
		self._set_auth_button_state(is_signed_in=False)
		self._password.focus_set()

	def _sign_in(self):
		email = self._email.get().strip()
		password = self._password.get()
		if not email or not password:
			self._status_label.configure(text="Enter your email and password.")
			return

		self._status_label.configure(text="Signing in...")
		self._sign_in_btn.configure(state="disabled")

		def worker():
			try:
				result = self._service.sign_in(email, password)
				message = None if result.success else f"Sign in failed: {result.error.message}"
			except Exception as exc:
				logger.exception("Sign in failed")
				message = f"Sign in failed: {exc}"

			def finish():
				self._password.delete(0, "end")
				self._refresh_auth_state()
				if message:
					self._status_label.configure(text=message)

			self.after(0, finish)

		threading.Thread(target=worker, daemon=True).start()

	def _sign_out(self):
		def worker():
			result = self._service.sign_out()
			if not result.success:
				logger.info("Server-side sign out failed: %s", result.error.message)
			self.after(0, self._refresh_auth_state)

		self._set_auth_button_state(is_signed_in=False)
		threading.Thread(target=worker, daemon=True).start()

	def _require_store_id(self, output_widget: ctk.CTkTextbox) -> str | None:
		store_id = self._store_id.get().strip()
		if not store_id:
			self._render_output(output_widget, "Enter a store ID first.")
			return None
		return store_id

	def _clock(self):
		store_id = self._require_store_id(self._attendance_output)
		if store_id is None:
			return

		assignment_id = self._assignment_id.get().strip()
		otp = self._otp.get().strip()
		if not assignment_id.isdigit() or not otp.isdigit():
			self._attendance_validation_label.configure(
				text="Assignment ID and OTP are required and must be numeric."
			)
			return

		self._attendance_validation_label.configure(text="")
		self._otp.delete(0, "end")
		self._run_in_background(
			self._attendance_output,
			self._service.clock,
			store_id,
			int(assignment_id),
			otp,
			formatter=lambda _data: "Attendance recorded.",
		)

	def _load_today(self):
		store_id = self._require_store_id(self._attendance_output)
		if store_id is None:
			return
		self._run_in_background(
			self._attendance_output,
			self._service.today_attendance,
			store_id,
			formatter=self._format_today,
		)

	def _load_my_week(self):
		store_id = self._require_store_id(self._week_output)
		if store_id is None:
			return
		self._run_in_background(
			self._week_output,
			self._service.my_week,
			store_id,
			formatter=self._format_week,
		)

	def _load_open_shifts(self):
		store_id = self._require_store_id(self._open_shift_output)
		if store_id is None:
			return
		self._run_in_background(
			self._open_shift_output,
			self._service.open_shift_list,
			store_id,
			formatter=self._format_open_shifts,
		)

	def _apply_open_shift(self):
		store_id = self._require_store_id(self._open_shift_output)
		if store_id is None:
			return
		open_shift_id = self._open_shift_id.get().strip()
		if not open_shift_id.isdigit():
			self._render_output(self._open_shift_output, "Enter a numeric open shift ID.")
			return
		self._run_in_background(
			self._open_shift_output,
			self._service.apply_open_shift,
			store_id,
			int(open_shift_id),
			formatter=lambda _data: f"Applied for open shift {open_shift_id}.",
		)

	def _load_substitutes(self):
		store_id = self._require_store_id(self._substitute_output)
		if store_id is None:
			return
		self._run_in_background(
			self._substitute_output,
			self._service.open_substitute_requests,
			store_id,
			formatter=self._format_substitutes,
		)

	def _apply_substitute(self):
		store_id = self._require_store_id(self._substitute_output)
		if store_id is None:
			return
		request_id = self._substitute_request_id.get().strip()
		if not request_id.isdigit():
			self._render_output(self._substitute_output, "Enter a numeric request ID.")
			return
		self._run_in_background(
			self._substitute_output,
			self._service.apply_substitute,
			store_id,
			int(request_id),
			formatter=lambda _data: f"Applied to cover request {request_id}.",
		)

	def _load_salary(self):
		year = self._parse_int(self._salary_year.get(), date.today().year, 2000, 2100)
		month = self._parse_int(self._salary_month.get(), date.today().month, 1, 12)
		self._run_in_background(
			self._salary_output,
			self._service.monthly_salary,
			year,
			month,
			formatter=self._format_salary,
		)

	@staticmethod
	def _format_today(rows) -> str:
		if not rows:
			return "Nobody is scheduled today."
		lines = []
		for row in rows:
			start = row.updated_start_time[11:16] or row.updated_start_time
			end = row.updated_end_time[11:16] or row.updated_end_time
			lines.append(
				f"#{row.assignment_id}  {row.worker_name} ({row.role})  {start}-{end}  {row.current_work_status}"
			)
		return "\n".join(lines)

	@staticmethod
	def _format_week(week) -> str:
		lines = [f"Total worked: {week.total_work_time or f'{week.total_minutes} min'}", ""]
		for item in week.weekly_data:
			status = item.status or "-"
			lines.append(
				f"{item.updated_start_time[:10]}  {item.updated_start_time[11:16]}-{item.updated_end_time[11:16]}"
				f"  {status}  {item.worked_minutes} min"
			)
		if not week.weekly_data:
			lines.append("No shifts this week.")
		return "\n".join(lines)

	@staticmethod
	def _format_open_shifts(shifts) -> str:
		if not shifts:
			return "No open shifts."
		return "\n".join(
			f"#{shift.id}  {shift.work_date}  {shift.start_time}-{shift.end_time}  {shift.request_status}"
			+ (f"  ({shift.note})" if shift.note else "")
			for shift in shifts
		)

	@staticmethod
	def _format_substitutes(requests) -> str:
		if not requests:
			return "No open substitute requests."
		return "\n".join(
			f"#{request.id}  {request.date}  {request.start_time}-{request.end_time}  {request.requester_name}"
			+ (f"  ({request.reason})" if request.reason else "")
			for request in requests
		)

	@staticmethod
	def _format_salary(summary) -> str:
		lines = [f"{summary.year}-{summary.month:02d} estimated pay: {summary.total_estimated_pay:,.0f}", ""]
		for store in summary.stores:
			name = store.store_alias or store.store_name
			lines.append(
				f"{name}: {store.worked_hours:g} h x {store.hourly_wage:,.0f} = {store.estimated_pay:,.0f}"
			)
		return "\n".join(lines)

	@staticmethod
	def _parse_int(value: str, default: int, minimum: int, maximum: int) -> int:
		try:
			parsed = int(value)
		except ValueError:
			return default
		if parsed < minimum:
			return minimum
		if parsed > maximum:
			return maximum
		return parsed


def run_app() -> None:
	ctk.set_appearance_mode("System")
	ctk.set_default_color_theme("blue")

	try:
		settings = AppSettings.from_env()
	except ConfigurationError as exc:
		configure_logging()
		app = ctk.CTk()
		app.title("ShiftMate - Configuration Error")
		app.geometry("760x320")
		message = ctk.CTkTextbox(app)
		message.pack(fill="both", expand=True, padx=16, pady=16)
		message.insert(
			"1.0",
			"Configuration error. Fix the environment variables and restart:\n\n"
			f"{exc}\n\n"
			"Settings:\n"
			"- SHIFTMATE_API_URL\n"
			"- SHIFTMATE_TIMEOUT_SECONDS\n"
			"- SHIFTMATE_TOKEN_STORE_PATH\n"
			"- SHIFTMATE_LOG_LEVEL\n",
		)
		app.mainloop()
		return

	configure_logging(settings.log_level)
	window = MainWindow(build_service(settings))
	window.mainloop()
