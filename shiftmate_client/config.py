from __future__ import annotations

from dataclasses import dataclass
import os
from pathlib import Path
from urllib.parse import urlparse


class ConfigurationError(ValueError):
    pass


VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True)
class AppSettings:
    base_url: str
    timeout_seconds: int
    token_store_path: str
    default_store_id: str
    log_level: str

    @staticmethod
    def from_env() -> "AppSettings":
        _load_dotenv_if_present()

        base_url = os.getenv("SHIFTMATE_API_URL", "http://localhost:8080/api").strip().rstrip("/")
        timeout_seconds = _read_int("SHIFTMATE_TIMEOUT_SECONDS", 30)

        default_store_path = os.path.join(
            os.getenv("LOCALAPPDATA", str(Path.home())),
            "ShiftMate",
            "tokens.json",
        )
        token_store_path = os.path.expanduser(os.getenv("SHIFTMATE_TOKEN_STORE_PATH", default_store_path).strip())
        default_store_id = os.getenv("SHIFTMATE_STORE_ID", "").strip()
        log_level = os.getenv("SHIFTMATE_LOG_LEVEL", "INFO").strip().upper()

        settings = AppSettings(
            base_url=base_url,
            timeout_seconds=timeout_seconds,
            token_store_path=token_store_path or default_store_path,
            default_store_id=default_store_id,
            log_level=log_level,
        )
        settings.validate()
        return settings

    def validate(self) -> None:
        parsed = urlparse(self.base_url)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise ConfigurationError("SHIFTMATE_API_URL must be an absolute http(s) URL")

        if self.timeout_seconds <= 0:
            raise ConfigurationError("SHIFTMATE_TIMEOUT_SECONDS must be greater than 0")

        if not self.token_store_path:
            raise ConfigurationError("SHIFTMATE_TOKEN_STORE_PATH must not be empty")

        if self.log_level not in VALID_LOG_LEVELS:
            raise ConfigurationError(
                "SHIFTMATE_LOG_LEVEL must be one of: " + ", ".join(VALID_LOG_LEVELS)
            )


def _read_int(name: str, default: int) -> int:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError as error:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}") from error


def find_env_file() -> Path | None:
    """Return the .env file to read: SHIFTMATE_ENV_FILE if set, else the first found."""
    explicit = os.getenv("SHIFTMATE_ENV_FILE", "").strip()
    if explicit:
        path = Path(explicit).expanduser()
        return path if path.is_file() else None

    for path in (Path.cwd() / ".env", Path.home() / ".shiftmate" / ".env"):
        if path.is_file():
            return path
    return None


def parse_env_file(path: Path) -> dict[str, str]:
    values: dict[str, str] = {}
    for line in path.read_text(encoding="utf-8").splitlines():
        line = line.strip()
        if line.startswith("export "):
            line = line[len("export "):]
        if not line or line.startswith("#") or "=" not in line:
            continue

        key, value = (part.strip() for part in line.split("=", 1))
        if len(value) >= 2 and value[0] == value[-1] and value[0] in "\"'":
            value = value[1:-1]
        if key:
            values[key] = value
    return values


def _load_dotenv_if_present() -> None:
    path = find_env_file()
    if path is None:
        return
    try:
        values = parse_env_file(path)
    except (OSError, UnicodeDecodeError) as error:
        raise ConfigurationError(f"Could not read {path}: {error}") from error

    for key, value in values.items():
        os.environ.setdefault(key, value)
