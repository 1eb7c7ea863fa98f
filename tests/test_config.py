import pytest

from presence_backend.config import Settings


def test_defaults_when_environment_is_empty():
    settings = Settings.from_env({})

    assert settings.host == "127.0.0.1"
    assert settings.port == 3000
    assert settings.ws_path == "/ws"
    assert settings.log_level == "INFO"
    assert settings.history_requires_friendship is True
    assert settings.max_avatar_bytes == 256 * 1024


def test_values_are_read_from_environment():
    settings = Settings.from_env(
        {
            "PRESENCE_HOST": "0.0.0.0",
            "PRESENCE_PORT": "8080",
            "PRESENCE_WS_PATH": "/presence",
            "LOG_LEVEL": "debug",
            "HISTORY_REQUIRES_FRIENDSHIP": "0",
            "MAX_AVATAR_BYTES": "1024",
        }
    )

    assert settings.host == "0.0.0.0"
    assert settings.port == 8080
    assert settings.ws_path == "/presence"
    assert settings.log_level == "DEBUG"
    assert settings.history_requires_friendship is False
    assert settings.max_avatar_bytes == 1024


@pytest.mark.parametrize("value, expected", [("1", True), ("yes", True), ("False", False), (" off ", False)])
def test_history_flag_spellings(value, expected):
    assert Settings.from_env({"HISTORY_REQUIRES_FRIENDSHIP": value}).history_requires_friendship is expected


@pytest.mark.parametrize(
    "environ",
    [
        {"HISTORY_REQUIRES_FRIENDSHIP": "maybe"},
        {"PRESENCE_PORT": "not-a-port"},
        {"PRESENCE_PORT": "70000"},
        {"PRESENCE_WS_PATH": "ws"},
        {"MAX_AVATAR_BYTES": "0"},
        {"LOG_LEVEL": "LOUD"},
    ],
)
def test_invalid_values_raise_value_error(environ):
    with pytest.raises(ValueError):
        Settings.from_env(environ)


def test_log_level_is_normalized_to_a_loguru_level():
    assert Settings.from_env({"LOG_LEVEL": " warning "}).log_level == "WARNING"
    assert Settings.from_env({"LOG_LEVEL": "trace"}).log_level == "TRACE"
