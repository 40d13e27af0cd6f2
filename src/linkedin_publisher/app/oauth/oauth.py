import base64
import logging
import secrets

from abc import ABC, abstractmethod
from typing import Callable, Optional

from ..config import OAuthConfig
from .credentials import Credentials, CredentialsStore, CredentialError
from .oauth_callback_handler import OAuthCallbackHandler
from .oauth_flow import OAuthFlow, AuthorizationError, DEFAULT_AUTHORIZATION_TIMEOUT

logger = logging.getLogger(__name__)


class OAuth(ABC):
    def __init__(self, config: OAuthConfig, credentials_store: CredentialsStore):
        self.config = config
        self.credentials_store = credentials_store

    @abstractmethod
    def build_authorization_url(self, state: str) -> str:
        raise NotImplementedError

    @abstractmethod
    def exchange_code_for_token(self, authorization_code: str) -> Credentials:
        raise NotImplementedError

    @abstractmethod
    def refresh_access_token(self, refresh_token: str) -> Credentials:
        raise NotImplementedError

    def login(self, manual: bool = False) -> Credentials:
        """
        Obtain, exchange and persist an authorization code.

        Args:
            manual: If True, print the authorization URL and read the code from the
                terminal instead of listening for the browser redirect.

        Returns:
            The saved credentials
        """
        state = self.generate_csrf_token()
        auth_url = self.build_authorization_url(state)

        if manual:
            authorization_code = self.prompt_user_to_paste_code(auth_url)
        else:
            authorization_code = self.prompt_user_to_authorize_app(auth_url, state)

        print("Exchanging code for token...")
        credentials = self.exchange_code_for_token(authorization_code)
        self.credentials_store.save(credentials)
        logger.debug(f"Logged in: {credentials}")
        return credentials

    def refresh(self) -> Credentials:
        stored_credentials = self.credentials_store.load()
        if not stored_credentials:
            raise CredentialError("No credentials found. Run: linkedin-publisher auth login")
        if not stored_credentials.is_refreshable():
            raise CredentialError("No refresh token available. Run: linkedin-publisher auth login")

        logger.debug(f"Refreshing: {stored_credentials}")
        credentials = self.refresh_access_token(stored_credentials.refresh_token)
        self.credentials_store.save(credentials)
        logger.debug(f"Refreshed: {credentials}")
        return credentials

    def prompt_user_to_authorize_app(self,
                                     auth_url: str,
                                     state: str,
                                     callback_handler=OAuthCallbackHandler,
                                     timeout: float = DEFAULT_AUTHORIZATION_TIMEOUT) -> str:
        oauth_flow = OAuthFlow()
        try:
            oauth_flow.start_callback_server(callback_handler, self.config.callback_port, state)
            print(f"Callback server listening on {self.config.redirect_uri}")
            oauth_flow.open_browser(auth_url)
            return oauth_flow.wait_for_authorization(timeout=timeout)
        finally:
            oauth_flow.stop_callback_server()

    def prompt_user_to_paste_code(self, auth_url: str, read_input: Optional[Callable[[str], str]] = None) -> str:
        if read_input is None:
            read_input = input
        print(f"\n{'='*70}\nAuthorization Required (manual mode)\n{'='*70}"
              f"\n\n1. Open this URL in your browser:\n\n{auth_url}\n"
              f"\n2. Sign in and click \"Allow\"."
              f"\n3. You will be redirected to a page that may fail to load. Copy the value of"
              f"\n   the \"code\" parameter from the address bar:"
              f"\n\n   {self.config.redirect_uri}?code=COPY_THIS_PART&state=..."
              f"\n\n4. Paste the code below (Ctrl-C to cancel).\n{'='*70}\n")
        try:
            authorization_code = read_input("Enter the code from the URL: ").strip()
        except (EOFError, KeyboardInterrupt):
            raise AuthorizationError("Login cancelled")
        if not authorization_code:
            raise AuthorizationError("No authorization code entered")
        return authorization_code

    @staticmethod
    def generate_csrf_token(length: int = 32) -> str:
        """
        Generate a cryptographically secure CSRF token suitable for OAuth state parameter.

        Args:
            length (int): Number of random bytes to use before encoding. Default is 32.

        Returns:
            str: A URL-safe base64-encoded token string.
        """
        random_bytes = secrets.token_bytes(length)
        return base64.urlsafe_b64encode(random_bytes).rstrip(b'=').decode('utf-8')
