import logging
import os

from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Optional

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

_PREFIX = "LINKEDIN"

CALLBACK_PATH = "/callback"
DEFAULT_CALLBACK_PORT = 4002

DEFAULT_SCOPES = [
    'openid',
    'profile',
    'email',
    'w_member_social',
    'r_organization_social',
    'w_organization_social',
    'rw_organization_admin'
]


class ConfigurationError(Exception):
    pass


@dataclass(frozen=True)
class OAuthConfig:
    client_id: str
    client_secret: str
    redirect_uri: str
    scopes: list[str] = field(default_factory=lambda: list(DEFAULT_SCOPES))
    callback_port: int = DEFAULT_CALLBACK_PORT

    def __str__(self) -> str:
        return (f"{self.__class__.__name__}(client_id={self.client_id}, client_secret=***, "
                f"redirect_uri={self.redirect_uri}, scopes={self.scopes})")


def redirect_uri_for(port: int) -> str:
    return f"http://localhost:{port}{CALLBACK_PATH}"


def load_environment(env_file: Optional[str] = None) -> bool:
    """
    Load variables from a .env file into the process environment.
    Variables already set in the environment take precedence.

    Raises:
        ConfigurationError: If env_file was given but does not exist
    """
    if env_file and not Path(env_file).is_file():
        raise ConfigurationError(f"Environment file not found: {env_file}")
    env_path = Path(env_file) if env_file else Path.cwd() / ".env"
    if not env_path.exists():
        logger.debug(f".env file not found at {env_path}, using environment variables only")
        return False
    load_dotenv(dotenv_path=env_path, override=False)
    logger.debug(f"Loaded environment variables from {env_path}")
    return True


class LinkedInConfig:
    def __init__(self, environ: Optional[Mapping[str, str]] = None):
        self.__environ = os.environ if environ is None else environ

    @property
    def endpoint(self) -> str:
        return "https://api.linkedin.com/v2"

    @property
    def api_version(self) -> str:
        return "202401"

    @property
    def callback_port(self) -> int:
        value = self._get("OAUTH_PORT")
        if not value:
            return DEFAULT_CALLBACK_PORT
        try:
            port = int(value)
        except ValueError:
            raise ConfigurationError(f"{_PREFIX}_OAUTH_PORT must be a number, got: {value}")
        if not 0 < port < 65536:
            raise ConfigurationError(f"{_PREFIX}_OAUTH_PORT is out of range: {port}")
        return port

    @property
    def scopes(self) -> list[str]:
        value = self._get("SCOPES")
        if not value:
            return list(DEFAULT_SCOPES)
        scopes = [scope.strip() for scope in value.split(',') if scope.strip()]
        return scopes if scopes else list(DEFAULT_SCOPES)

    def oauth_config(self, port: Optional[int] = None) -> OAuthConfig:
        client_id = self._get("CLIENT_ID")
        client_secret = self._get("CLIENT_SECRET")
        if not client_id or not client_secret:
            raise ConfigurationError(
                f"LinkedIn OAuth credentials not configured. Set {_PREFIX}_CLIENT_ID and "
                f"{_PREFIX}_CLIENT_SECRET environment variables (see: linkedin-publisher auth setup)")
        callback_port = port if port else self.callback_port
        return OAuthConfig(
            client_id=client_id,
            client_secret=client_secret,
            redirect_uri=redirect_uri_for(callback_port),
            scopes=self.scopes,
            callback_port=callback_port
        )

    def _get(self, suffix: str) -> Optional[str]:
        value = self.__environ.get(f"{_PREFIX}_{suffix}")
        return value.strip() if value else None

    def __str__(self) -> str:
        return f"{self.__class__.__name__}(endpoint={self.endpoint}, api_version={self.api_version})"
