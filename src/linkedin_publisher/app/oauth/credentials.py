import copy
import json
import logging
import os
import tempfile

from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Dict, Any, List, Optional

logger = logging.getLogger(__name__)

EXPIRY_MARGIN = timedelta(minutes=5)
EXPIRING_SOON_WINDOW = timedelta(days=7)


class CredentialError(Exception):
    pass


class CredentialsParseError(CredentialError):
    pass


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Credentials:
    def __init__(self, data: Dict[str, Any]):
        self.__data = copy.deepcopy(data)

    @staticmethod
    def stamped(token_data: Dict[str, Any], now: Optional[datetime] = None) -> 'Credentials':
        """Credentials for a fresh token response, created now."""
        created_at = now if now else utc_now()
        return Credentials({**token_data, 'created_at': created_at.isoformat()})

    @property
    def data(self) -> Dict[str, Any]:
        return copy.deepcopy(self.__data)

    @property
    def access_token(self) -> Optional[str]:
        return self.__data.get('access_token', None)

    @property
    def token_type(self) -> Optional[str]:
        return self.__data.get('token_type', None)

    @property
    def refresh_token(self) -> Optional[str]:
        return self.__data.get('refresh_token', None)

    @property
    def scope(self) -> str:
        return self.__data.get('scope') or ''

    @property
    def scopes(self) -> List[str]:
        return self.scope.split()

    @property
    def expires_in(self) -> int:
        return int(self.__data.get('expires_in') or 0)

    @property
    def created_at(self) -> datetime:
        value = self.__data.get('created_at')
        if not value:
            raise CredentialsParseError("Credentials have no creation time")
        try:
            created_at = datetime.fromisoformat(str(value).replace('Z', '+00:00'))
        except ValueError as ex:
            raise CredentialsParseError(f"Invalid credentials creation time: {value}") from ex
        if created_at.tzinfo is None:
            created_at = created_at.replace(tzinfo=timezone.utc)
        return created_at

    @property
    def expires_at(self) -> datetime:
        return self.created_at + timedelta(seconds=self.expires_in)

    def is_refreshable(self) -> bool:
        return bool(self.refresh_token)

    def seconds_remaining(self, now: Optional[datetime] = None) -> float:
        now = now if now else utc_now()
        return max(0.0, (self.expires_at - now).total_seconds())

    def __eq__(self, other) -> bool:
        if not isinstance(other, Credentials):
            return NotImplemented
        return self.__data == other.data

    def __str__(self):
        return (f"{self.__class__.__name__}"
                f"(created_at={self.__data.get('created_at')}, expires_in={self.__data.get('expires_in')}, "
                f"access_token={None if self.access_token is None else '***'}, "
                f"refresh_token={None if self.refresh_token is None else '***'}, "
                f"scope={self.scope})")

    __repr__ = __str__


class CredentialsStore:
    """
    Persists the single LinkedIn credentials record.

    Records are written to ``~/.linkedin-publisher/credentials``. Records written by
    older releases under ``~/.content-publisher/oauth-tokens`` are still read and deleted.
    """
    def __init__(self,
                 dir_path: str = '~/.linkedin-publisher/credentials',
                 legacy_dir_paths: Optional[List[str]] = None,
                 filename: str = 'linkedin.json'):
        if legacy_dir_paths is None:
            legacy_dir_paths = ['~/.content-publisher/oauth-tokens']
        self.dir_path = Path(os.path.expanduser(os.path.expandvars(dir_path)))
        self.legacy_dir_paths = [Path(os.path.expanduser(os.path.expandvars(e))) for e in legacy_dir_paths]
        self.filename = filename

    @property
    def file_path(self) -> Path:
        return self.dir_path / self.filename

    def candidate_paths(self) -> List[Path]:
        return [self.file_path] + [dir_path / self.filename for dir_path in self.legacy_dir_paths]

    def save(self, credentials: Credentials) -> Path:
        self._ensure_directory()
        file_path = self.file_path
        fd, tmp_path = tempfile.mkstemp(dir=str(self.dir_path), prefix=f".{self.filename}.", suffix=".tmp")
        try:
            with os.fdopen(fd, 'w', encoding='utf-8') as tmp_file:
                json.dump(credentials.data, tmp_file, indent=2)
                tmp_file.flush()
                os.fsync(tmp_file.fileno())
            os.chmod(tmp_path, 0o600)
            os.replace(tmp_path, file_path)
        except BaseException:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise
        logger.debug(f"Saved {credentials} to: {file_path}")
        return file_path

    def load(self) -> Optional[Credentials]:
        for file_path in self.candidate_paths():
            if not file_path.exists():
                continue
            try:
                data = json.loads(file_path.read_text(encoding='utf-8'))
            except (OSError, ValueError) as ex:
                raise CredentialsParseError(f"Could not read credentials from: {file_path}. Reason: {ex}") from ex
            if not isinstance(data, dict) or not data.get('access_token'):
                raise CredentialsParseError(f"Invalid credentials file: {file_path}")
            credentials = Credentials(data)
            logger.debug(f"Loaded {credentials} from: {file_path}")
            return credentials
        logger.debug(f"No credentials found at: {[str(e) for e in self.candidate_paths()]}")
        return None

    def delete(self) -> bool:
        deleted = False
        for file_path in self.candidate_paths():
            if file_path.exists():
                file_path.unlink()
                logger.debug(f"Deleted: {file_path}")
                deleted = True
        return deleted

    @staticmethod
    def is_expired(credentials: Credentials, now: Optional[datetime] = None) -> bool:
        now = now if now else utc_now()
        return now >= credentials.expires_at - EXPIRY_MARGIN

    @staticmethod
    def is_expiring_soon(credentials: Credentials, now: Optional[datetime] = None) -> bool:
        now = now if now else utc_now()
        return credentials.expires_at <= now + EXPIRING_SOON_WINDOW

    def require_valid(self) -> Credentials:
        credentials = self.load()
        if not credentials:
            raise CredentialError("No LinkedIn credentials found. Run: linkedin-publisher auth login")
        if self.is_expired(credentials):
            raise CredentialError("LinkedIn access token has expired. Run: linkedin-publisher auth refresh")
        return credentials

    def _ensure_directory(self):
        if not self.dir_path.exists():
            self.dir_path.mkdir(mode=0o700, parents=True, exist_ok=True)
            logger.debug(f"Created directory {self.dir_path}")
        os.chmod(self.dir_path, 0o700)
