import logging
import threading
import webbrowser

from http.server import ThreadingHTTPServer
from typing import Optional

logger = logging.getLogger(__name__)

DEFAULT_AUTHORIZATION_TIMEOUT = 300


class OAuthError(Exception):
    pass


class AuthorizationError(OAuthError):
    pass


class TokenRequestError(OAuthError):
    def __init__(self, message: str, status_code: Optional[int] = None, body: Optional[str] = None):
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class OAuthHttpServer(ThreadingHTTPServer):
    daemon_threads = True

    def __init__(self, *args, expected_state: Optional[str] = None, **kwargs):
        super().__init__(*args, **kwargs)
        self.expected_state: Optional[str] = expected_state
        self.oauth_code: Optional[str] = None
        self.oauth_error: Optional[str] = None
        self.completed = threading.Event()
        self.shutdown_initiated: bool = False
        self.__outcome_lock = threading.Lock()

    def resolve(self, code: str) -> bool:
        with self.__outcome_lock:
            if self.completed.is_set():
                return False
            self.oauth_code = code
            self.completed.set()
            return True

    def reject(self, reason: str) -> bool:
        with self.__outcome_lock:
            if self.completed.is_set():
                return False
            self.oauth_error = reason
            self.completed.set()
            return True


class OAuthFlow:
    """
    One-shot local listener for the OAuth redirect.

    Idle -> Listening (start_callback_server) -> Resolved | Rejected | TimedOut
    (wait_for_authorization). stop_callback_server releases the port and may be
    called any number of times.
    """
    def __init__(self) -> None:
        self.server: Optional[OAuthHttpServer] = None
        self.server_thread: Optional[threading.Thread] = None

    @property
    def port(self) -> Optional[int]:
        return self.server.server_address[1] if self.server else None

    def start_callback_server(self, callback_handler_class, port: int, expected_state: str):
        """
        Start local HTTP server to receive OAuth callback

        Args:
            callback_handler_class: The request handler class to handle the oauth callback
            port: Port number for callback server, 0 for any free port
            expected_state: The CSRF state the callback must echo back
        """
        if self.server:
            raise AuthorizationError("Callback server is already running")

        try:
            self.server = OAuthHttpServer(('localhost', port), callback_handler_class,
                                          expected_state=expected_state)
        except OSError as ex:
            raise AuthorizationError(f"Could not start callback server on port {port}: {ex}") from ex

        self.server_thread = threading.Thread(target=self.server.serve_forever, daemon=True)
        self.server_thread.start()

        logger.debug(f"Started callback server on port {self.port}")

    def open_browser(self, auth_url: str):
        print(f"\n{'='*70}\nAuthorization Required\n{'='*70}"
              f"\n\nOpening your browser. If it does not open, visit the following URL:\n"
              f"\n{auth_url}\n{'='*70}\n")
        try:
            opened = webbrowser.open(auth_url)
        except webbrowser.Error as ex:
            logger.debug(f"Could not open browser: {ex}")
            opened = False
        if not opened:
            logger.warning("Could not open a browser, please visit the URL above")
        print("\nWaiting for authorization\n(This window will update once you authorize the app)\n")

    def wait_for_authorization(self, timeout: float = DEFAULT_AUTHORIZATION_TIMEOUT) -> str:
        """
        Wait for user to complete authorization

        Args:
            timeout: Maximum time to wait in seconds (default: 5 minutes)

        Returns:
            The authorization code

        Raises:
            AuthorizationError: If the callback was rejected or did not arrive in time
        """
        if not self.server:
            raise AuthorizationError("Callback server is not running")

        logger.debug(f"Waiting for authorization (timeout: {timeout}s)...")

        if not self.server.completed.wait(timeout):
            raise AuthorizationError(f"Authorization timeout - no callback received within {timeout} seconds")

        if self.server.oauth_error:
            raise AuthorizationError(f"Authorization failed: {self.server.oauth_error}")

        return self.server.oauth_code

    def stop_callback_server(self) -> None:
        server, self.server = self.server, None
        if server:
            server.shutdown_initiated = True
            server.shutdown()
            server.server_close()
            if self.server_thread:
                self.server_thread.join(timeout=5)
            self.server_thread = None
            logger.debug("Stopped callback server")
