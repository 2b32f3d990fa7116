import pytest

from shiftmate_client.config import AppSettings, ConfigurationError, find_env_file, parse_env_file

ENV_NAMES = (
    "SHIFTMATE_API_URL",
    "SHIFTMATE_TIMEOUT_SECONDS",
    "SHIFTMATE_TOKEN_STORE_PATH",
    "SHIFTMATE_STORE_ID",
    "SHIFTMATE_LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    for name in ENV_NAMES:
        # Registered first so values written by the .env loader are undone too.
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    monkeypatch.setenv("SHIFTMATE_ENV_FILE", str(tmp_path / "missing.env"))
    monkeypatch.chdir(tmp_path)


def test_defaults() -> None:
    settings = AppSettings.from_env()

    assert settings.base_url == "http://localhost:8080/api"
    assert settings.timeout_seconds == 30
    assert settings.token_store_path.endswith("tokens.json")
    assert settings.log_level == "INFO"


def test_reads_environment(monkeypatch) -> None:
    monkeypatch.setenv("SHIFTMATE_API_URL", "https://shiftmate.example.com/api/")
    monkeypatch.setenv("SHIFTMATE_TIMEOUT_SECONDS", "12")
    monkeypatch.setenv("SHIFTMATE_STORE_ID", "42")
    monkeypatch.setenv("SHIFTMATE_LOG_LEVEL", "debug")

    settings = AppSettings.from_env()

    assert settings.base_url == "https://shiftmate.example.com/api"
    assert settings.timeout_seconds == 12
    assert settings.default_store_id == "42"
    assert settings.log_level == "DEBUG"


def test_env_file_does_not_override_environment(monkeypatch, tmp_path) -> None:
    env_file = tmp_path / "custom.env"
    env_file.write_text(
        "# local overrides\nSHIFTMATE_STORE_ID='7'\nSHIFTMATE_TIMEOUT_SECONDS=15\n",
        encoding="utf-8",
    )
    monkeypatch.setenv("SHIFTMATE_ENV_FILE", str(env_file))
    monkeypatch.setenv("SHIFTMATE_TIMEOUT_SECONDS", "20")

    settings = AppSettings.from_env()

    assert settings.default_store_id == "7"
    assert settings.timeout_seconds == 20


def test_first_env_file_found_is_used(monkeypatch, tmp_path) -> None:
    home = tmp_path / "home"
    (home / ".shiftmate").mkdir(parents=True)
    (home / ".shiftmate" / ".env").write_text("SHIFTMATE_STORE_ID=from-home\n", encoding="utf-8")
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.delenv("SHIFTMATE_ENV_FILE")

    assert find_env_file() == home / ".shiftmate" / ".env"

    (tmp_path / ".env").write_text("SHIFTMATE_STORE_ID=from-cwd\n", encoding="utf-8")
    assert find_env_file() == tmp_path / ".env"
    assert AppSettings.from_env().default_store_id == "from-cwd"


def test_explicit_env_file_that_is_missing_disables_lookup(tmp_path) -> None:
    (tmp_path / ".env").write_text("SHIFTMATE_STORE_ID=from-cwd\n", encoding="utf-8")

    assert find_env_file() is None
    assert AppSettings.from_env().default_store_id == ""


def test_parse_env_file(tmp_path) -> None:
    env_file = tmp_path / "app.env"
    env_file.write_text(
        "\n".join(
            [
                "# comment",
                "export SHIFTMATE_API_URL=https://api.example.com",
                "SHIFTMATE_STORE_ID = \"12\"",
                "QUOTE='it''s'",
                "UNBALANCED=\"open",
                "not a pair",
                "=missing-key",
            ]
        ),
        encoding="utf-8",
    )

    assert parse_env_file(env_file) == {
        "SHIFTMATE_API_URL": "https://api.example.com",
        "SHIFTMATE_STORE_ID": "12",
        "QUOTE": "it''s",
        "UNBALANCED": "\"open",
    }


@pytest.mark.parametrize(
    "name, value",
    [
        ("SHIFTMATE_API_URL", "localhost:8080"),
        ("SHIFTMATE_TIMEOUT_SECONDS", "0"),
        ("SHIFTMATE_TIMEOUT_SECONDS", "soon"),
        ("SHIFTMATE_LOG_LEVEL", "LOUD"),
    ],
)
def test_invalid_settings_raise(monkeypatch, name, value) -> None:
    monkeypatch.setenv(name, value)

    with pytest.raises(ConfigurationError):
        AppSettings.from_env()


def test_configure_logging_is_idempotent() -> None:
    import logging

    from shiftmate_client.logging_utils import configure_logging

    logger = configure_logging("debug")
    configure_logging("warning")

    assert logger.name == "shiftmate_client"
    assert logger.level == logging.WARNING
    assert len([h for h in logger.handlers if h.get_name() == "shiftmate-console"]) == 1


def test_token_store_path_expands_home(monkeypatch, tmp_path) -> None:
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.setenv("SHIFTMATE_TOKEN_STORE_PATH", "~/.shiftmate/tokens.json")

    assert AppSettings.from_env().token_store_path == str(tmp_path / ".shiftmate" / "tokens.json")
