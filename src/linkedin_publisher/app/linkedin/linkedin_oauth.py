"""
LinkedIn OAuth 2.0 (3-legged) Implementation

Reference:
- https://learn.microsoft.com/en-us/linkedin/shared/authentication/authorization-code-flow
- https://learn.microsoft.com/en-us/linkedin/shared/authentication/programmatic-refresh-tokens
"""
import logging
import urllib.parse

from typing import Any

import requests

from ..oauth import Credentials, OAuth, TokenRequestError
from .linkedin_client import LinkedInTransportError

logger = logging.getLogger(__name__)


class LinkedInOAuth(OAuth):
    authorization_url = "https://www.linkedin.com/oauth/v2/authorization"
    token_url = "https://www.linkedin.com/oauth/v2/accessToken"
    request_timeout = 30

    def build_authorization_url(self, state: str) -> str:
        params = {
            "response_type": "code",
            "client_id": self.config.client_id,
            "redirect_uri": self.config.redirect_uri,
            "state": state,
            "scope": " ".join(self.config.scopes)
        }
        query_string = urllib.parse.urlencode(params, quote_via=urllib.parse.quote)
        return f"{self.authorization_url}?{query_string}"

    def exchange_code_for_token(self, authorization_code: str) -> Credentials:
        if not authorization_code:
            raise ValueError("Authorization code is required")

        payload = {
            "grant_type": "authorization_code",
            "code": authorization_code,
            "redirect_uri": self.config.redirect_uri,
            "client_id": self.config.client_id,
            "client_secret": self.config.client_secret
        }

        logger.debug("Requesting access token...")
        return Credentials.stamped(self._request_token(payload, "Token exchange failed"))

    def refresh_access_token(self, refresh_token: str) -> Credentials:
        """
        Refresh access token using refresh token

        Returns:
            New credentials, created now
        """
        if not refresh_token:
            raise ValueError("No refresh token available")

        payload = {
            "grant_type": "refresh_token",
            "refresh_token": refresh_token,
            "client_id": self.config.client_id,
            "client_secret": self.config.client_secret
        }

        logger.debug("Refreshing access token...")
        return Credentials.stamped(self._request_token(payload, "Token refresh failed"))

    def _request_token(self, payload: dict[str, str], failure_message: str) -> dict[str, Any]:
        headers = {"Content-Type": "application/x-www-form-urlencoded"}
        try:
            response = requests.post(self.token_url, headers=headers, data=payload, timeout=self.request_timeout)
        except requests.exceptions.RequestException as ex:
            raise LinkedInTransportError(f"{failure_message}: {ex}") from ex

        logger.debug(f"Token response status: {response.status_code}")

        if not 200 <= response.status_code < 300:
            raise TokenRequestError(f"{failure_message}: {response.text}",
                                    status_code=response.status_code, body=response.text)

        try:
            token_data = response.json()
        except ValueError as ex:
            raise TokenRequestError(f"{failure_message}: invalid response {response.text[:200]}",
                                    status_code=response.status_code, body=response.text) from ex

        if not isinstance(token_data, dict) or not token_data.get('access_token'):
            raise TokenRequestError(f"{failure_message}: no access token in response",
                                    status_code=response.status_code, body=response.text)
        return token_data
