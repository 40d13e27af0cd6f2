import html
import logging
import urllib.parse
from http.server import BaseHTTPRequestHandler
from typing import Optional

from ..config import CALLBACK_PATH
from .oauth_flow import OAuthHttpServer

logger = logging.getLogger(__name__)

_PAGE = """<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="utf-8">
<title>{title} - LinkedIn Publisher</title>
<style>
  body {{ font-family: -apple-system, "Segoe UI", Roboto, sans-serif; background: #f4f2ee; color: #191919; }}
  main {{ max-width: 480px; margin: 15vh auto; padding: 32px; background: #fff; border-radius: 8px;
          border-top: 4px solid #0a66c2; }}
  h1 {{ font-size: 22px; }}
  p {{ font-size: 16px; color: #555; }}
</style>
</head>
<body>
<main>
  <h1>{title}</h1>
  <p>{message}</p>
</main>
</body>
</html>
"""


class OAuthCallbackHandler(BaseHTTPRequestHandler):
    # Seconds a connection may stay silent before it is dropped
    timeout = 10

    def get_callback_path(self) -> Optional[str]:
        return CALLBACK_PATH

    def log_message(self, format, *args):
        logger.debug(f"{format % args}")

    def do_GET(self):
        parsed_path = urllib.parse.urlparse(self.path)

        callback_path = self.get_callback_path()
        if callback_path and parsed_path.path != callback_path:
            self.send_error(404, "Not Found")
            return

        server = self.oauth_server

        if server.shutdown_initiated or server.completed.is_set():
            self.send_already_handled()
            return

        query_params = urllib.parse.parse_qs(parsed_path.query)

        def param(name: str) -> Optional[str]:
            values = query_params.get(name)
            return values[0] if values else None

        error = param('error')
        if error:
            reason = param('error_description') or error
            logger.error(f"Authorization error: {error}, {reason}")
            self.send_outcome(server.reject(reason), 400, "Authorization Failed", reason)
            return

        if param('state') != server.expected_state:
            logger.error("Authorization callback has an invalid state parameter")
            self.send_outcome(server.reject("Invalid state parameter"), 400, "Invalid State",
                              "CSRF validation failed. Please start the login again.")
            return

        code = param('code')
        if not code:
            self.send_outcome(server.reject("No authorization code received"), 400, "No Code",
                              "Authorization code not received.")
            return

        logger.debug("Authorization code received")
        self.send_outcome(server.resolve(code), 200, "Authorization Successful",
                          "You can close this window and return to the terminal.")

    def send_outcome(self, decided: bool, code: int, title: str, message: str):
        if decided:
            self.send_html(code, title, message)
        else:
            self.send_already_handled()

    def send_already_handled(self):
        self.send_html(200, "Authorization Already Handled",
                       "This authorization request has already been handled. You can close this window.")

    def send_html(self, code: int, title: str, message: str):
        body = _PAGE.format(title=html.escape(title), message=html.escape(message)).encode('utf-8')
        self.send_response(code)
        self.send_header('Content-type', 'text/html; charset=utf-8')
        self.send_header('Content-Length', str(len(body)))
        self.end_headers()
        self.wfile.write(body)

    @property
    def oauth_server(self) -> OAuthHttpServer:
        if isinstance(self.server, OAuthHttpServer):
            return self.server
        else:
            raise RuntimeError(f"Expected an instance of OAuthHttpServer, but got: {type(self.server)}")
