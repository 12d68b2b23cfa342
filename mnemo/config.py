import os
from collections.abc import Mapping
from enum import Enum

from loguru import logger

DEPLOYMENT_ENV_VAR = "DeploymentLocation"


class ConfigurationError(KeyError):
    pass


class DeploymentLocation(Enum):
    LIVE = "live"
    DEV = "dev"
    LOCAL = "local"
    CASSINI = "cassini"


def parse_location(value: str | None) -> DeploymentLocation:
    if value:
        try:
            return DeploymentLocation[value.strip().upper()]
        except KeyError:
            logger.warning(f"Unknown {DEPLOYMENT_ENV_VAR} {value!r}, using local")
    return DeploymentLocation.LOCAL


def locationized_names(location: DeploymentLocation, name: str) -> list[str]:
    """
    Names a setting may have in the store, most specific first.

    Local and cassini deployments fall back to the dev values before the
    unqualified name.
    """
    suffixes = {
        DeploymentLocation.LIVE: ["live"],
        DeploymentLocation.DEV: ["dev"],
        DeploymentLocation.LOCAL: ["local", "dev"],
        DeploymentLocation.CASSINI: ["cassini", "local", "dev"],
    }[location]
    return [f"{name}-{suffix}" for suffix in suffixes] + [name]


class Config:
    """
    Settings lookup that prefers values qualified with the deployment location.

    ``settings`` and ``environ`` default to ``os.environ``; ``connection_strings``
    defaults to an empty mapping. The location is re-read from ``environ`` on
    every lookup.
    """

    def __init__(
        self,
        settings: Mapping[str, str] | None = None,
        connection_strings: Mapping[str, str] | None = None,
        environ: Mapping[str, str] | None = None,
    ):
        self.settings = settings if settings is not None else os.environ
        self.connection_strings = connection_strings if connection_strings is not None else {}
        self.environ = environ if environ is not None else os.environ

    @property
    def location(self) -> DeploymentLocation:
        return parse_location(self.environ.get(DEPLOYMENT_ENV_VAR))

    def _resolve(self, source: Mapping[str, str], name: str) -> str | None:
        for candidate in locationized_names(self.location, name):
            if (value := source.get(candidate)) is not None:
                logger.debug(f"Resolved {name!r} from {candidate!r}")
                return value
        return None

    def setting(
        self, name: str, default: str | None = None, throw_if_missing: bool = False
    ) -> str | None:
        value = self._resolve(self.settings, name)
        if value is None:
            value = default
        if throw_if_missing and value is None:
            raise ConfigurationError(f"The setting {name!r} was not found")
        return value

    def connection_string(self, name: str, default: str | None = None) -> str | None:
        value = self._resolve(self.connection_strings, name)
        return value if value is not None else default

    def has_setting(self, name: str) -> bool:
        return self.setting(name) is not None

    def has_connection_string(self, name: str) -> bool:
        return self.connection_string(name) is not None
