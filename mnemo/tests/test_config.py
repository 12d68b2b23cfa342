import pytest
from mnemo.config import (
    DEPLOYMENT_ENV_VAR,
    Config,
    ConfigurationError,
    DeploymentLocation,
    locationized_names,
    parse_location,
)


def make_config(location=None, settings=None, connection_strings=None):
    environ = {DEPLOYMENT_ENV_VAR: location} if location else {}
    return Config(
        settings=settings or {},
        connection_strings=connection_strings,
        environ=environ,
    )


@pytest.mark.parametrize(
    "location, expected",
    [
        (DeploymentLocation.LIVE, ["db-live", "db"]),
        (DeploymentLocation.DEV, ["db-dev", "db"]),
        (DeploymentLocation.LOCAL, ["db-local", "db-dev", "db"]),
        (DeploymentLocation.CASSINI, ["db-cassini", "db-local", "db-dev", "db"]),
    ],
)
def test_locationized_names(location, expected):
    assert locationized_names(location, "db") == expected


def test_parse_location():
    assert parse_location("Live") == DeploymentLocation.LIVE
    assert parse_location(" dev ") == DeploymentLocation.DEV
    assert parse_location("cassini") == DeploymentLocation.CASSINI
    assert parse_location(None) == DeploymentLocation.LOCAL
    assert parse_location("staging") == DeploymentLocation.LOCAL


def test_location_read_from_environ():
    assert make_config("live").location == DeploymentLocation.LIVE
    assert make_config().location == DeploymentLocation.LOCAL


def test_setting_prefers_qualified_name():
    settings = {"url": "plain", "url-live": "live", "url-dev": "dev"}
    assert make_config("live", settings).setting("url") == "live"
    assert make_config("dev", settings).setting("url") == "dev"
    # local falls back to the dev value
    assert make_config("local", settings).setting("url") == "dev"


def test_setting_falls_back_to_plain_name():
    config = make_config("live", {"url": "plain", "url-dev": "dev"})
    assert config.setting("url") == "plain"


def test_setting_default_and_missing():
    config = make_config("live")
    assert config.setting("url") is None
    assert config.setting("url", default="fallback") == "fallback"
    assert config.has_setting("url") is False
    with pytest.raises(ConfigurationError):
        config.setting("url", throw_if_missing=True)


def test_setting_default_satisfies_throw_if_missing():
    config = make_config("live")
    assert config.setting("url", "fallback", throw_if_missing=True) == "fallback"


def test_empty_string_is_a_value():
    config = make_config("live", {"url-live": ""})
    assert config.setting("url", default="fallback") == ""
    assert config.has_setting("url") is True


def test_connection_string():
    config = make_config(
        "cassini",
        connection_strings={"main-local": "sqlite://local", "main": "postgres://prod"},
    )
    assert config.connection_string("main") == "sqlite://local"
    assert config.connection_string("other", "sqlite://memory") == "sqlite://memory"
    assert config.has_connection_string("main") is True
    assert config.has_connection_string("other") is False


def test_defaults_to_os_environ(monkeypatch):
    monkeypatch.setenv(DEPLOYMENT_ENV_VAR, "dev")
    monkeypatch.setenv("MNEMO_TEST_TOKEN-dev", "secret")
    config = Config()
    assert config.location == DeploymentLocation.DEV
    assert config.setting("MNEMO_TEST_TOKEN") == "secret"
    assert config.connection_string("MNEMO_TEST_TOKEN") is None
