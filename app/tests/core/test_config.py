import pytest
from app.core.config import Settings, parse_smtp_addr, parse_smtp_auth


@pytest.fixture(scope="function")
def valid_env(monkeypatch):
    """Fixture setting a complete, valid environment."""
    env = {
        "MESSAGE_FROM_EMAIL": "robot@studio.com",
        "MESSAGE_TO_EMAIL": "team@studio.com",
        "SMTP_ADDR": "smtp.studio.com:587",
        "SMTP_AUTH": "robot@studio.com:s3cr3t",
        "RETRY_COUNT": "3",
        "RETRY_TIMEOUT": "50",
        "SMTP_CONNECTION_TIMEOUT": "5000",
        "ALLOW_CORS_ORIGINS": "https://studio.com, http://localhost:3000",
        "LOG_LEVEL": "info",
        "REQUEST_TIMEOUT": "30",
    }
    for key, value in env.items():
        monkeypatch.setenv(key, value)
    return monkeypatch


class TestSettings:
    def test_valid_settings(self, valid_env):
        settings = Settings()

        assert settings.API_V1_STR == "/api/v1"
        assert settings.RETRY_COUNT == 3
        assert settings.RETRY_TIMEOUT == 50
        assert settings.ALLOW_CORS_ORIGINS == ["https://studio.com", "http://localhost:3000"]

    @pytest.mark.parametrize(
        "key,value,message",
        [
            ("RETRY_COUNT", "0", "between 1 and 10 times"),
            ("RETRY_COUNT", "11", "between 1 and 10 times"),
            ("RETRY_COUNT", "three", "must be an integer"),
            ("RETRY_TIMEOUT", "9", "between 10 and 100 msec"),
            ("RETRY_TIMEOUT", "101", "between 10 and 100 msec"),
            ("SMTP_CONNECTION_TIMEOUT", "999", "at least 1000 msec"),
            ("SMTP_AUTH", "robot:s3cr3t", "valid auth string"),
            ("SMTP_ADDR", "ftp://smtp.studio.com:21", "valid SMTP addr"),
            ("ALLOW_CORS_ORIGINS", "not a url", "valid URLs"),
            ("ALLOW_CORS_ORIGINS", " , ", "at least one"),
            ("LOG_LEVEL", "chatty", "not a valid logging level"),
            ("REQUEST_TIMEOUT", "0", "greater than 0"),
        ]
    )
    def test_invalid_settings(self, valid_env, key, value, message):
        valid_env.setenv(key, value)

        with pytest.raises(ValueError, match=message):
            Settings()

    @pytest.mark.parametrize("key", ["MESSAGE_FROM_EMAIL", "MESSAGE_TO_EMAIL", "SMTP_ADDR", "SMTP_AUTH"])
    def test_required_settings(self, valid_env, key):
        valid_env.delenv(key)

        with pytest.raises(ValueError, match=f"{key} environment variable is not set"):
            Settings()

    def test_retry_bounds_inclusive(self, valid_env):
        valid_env.setenv("RETRY_COUNT", "10")
        valid_env.setenv("RETRY_TIMEOUT", "10")

        settings = Settings()

        assert settings.RETRY_COUNT == 10
        assert settings.RETRY_TIMEOUT == 10


@pytest.mark.parametrize(
    "addr,expected",
    [
        ("smtp.gmail.com:587", ("smtp.gmail.com", 587, False)),
        ("smtp://smtp.gmail.com:2525", ("smtp.gmail.com", 2525, False)),
        ("smtps://smtp.gmail.com:465", ("smtp.gmail.com", 465, True)),
        ("smtp.gmail.com", ("smtp.gmail.com", 587, False)),
        ("smtps://smtp.gmail.com", ("smtp.gmail.com", 465, True)),
    ]
)
def test_parse_smtp_addr(addr, expected):
    assert parse_smtp_addr(addr) == expected


@pytest.mark.parametrize("addr", ["smtp://", "smtp.gmail.com:port", "http://smtp.gmail.com"])
def test_parse_smtp_addr_invalid(addr):
    with pytest.raises(ValueError):
        parse_smtp_addr(addr)


def test_parse_smtp_auth_splits_at_first_colon():
    assert parse_smtp_auth("me@mail.com:pass:word") == ("me@mail.com", "pass:word")
