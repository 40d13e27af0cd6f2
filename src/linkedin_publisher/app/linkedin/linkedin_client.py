"""
LinkedIn REST client

Reference:
- https://learn.microsoft.com/en-us/linkedin/consumer/integrations/self-serve/share-on-linkedin
- https://learn.microsoft.com/en-us/linkedin/consumer/integrations/self-serve/sign-in-with-linkedin-v2
"""
import json
import logging
import urllib.parse

from typing import Any, Dict, List, Optional

import requests

from ..content_publisher import Content, MediaCategory
from ..oauth import Credentials, CredentialsStore, CredentialError

logger = logging.getLogger(__name__)

API_BASE = "https://api.linkedin.com/v2"
API_VERSION = "202401"

ORGANIZATIONS_PROJECTION = "(elements*(organizationalTarget~(id,localizedName,vanityName,logoV2)))"


class LinkedInError(Exception):
    """Base exception for LinkedIn API errors"""
    pass


class LinkedInAPIError(LinkedInError):
    """A non-success response from the LinkedIn API"""
    def __init__(self, status_code: int, message: str):
        super().__init__(f"LinkedIn API Error ({status_code}): {message}")
        self.status_code = status_code
        self.message = message


class LinkedInTransportError(LinkedInError):
    """The LinkedIn API (or an upload/media URL) could not be reached"""
    pass


class LinkedInUploadError(LinkedInError):
    """Exception raised for image upload failures"""
    pass


def person_urn(member_id: str) -> str:
    return f"urn:li:person:{member_id}"


def organization_urn(organization_id: str) -> str:
    return f"urn:li:organization:{organization_id}"


class LinkedInClient:
    def __init__(self,
                 credentials_store: CredentialsStore,
                 credentials: Optional[Credentials] = None,
                 api_endpoint: str = API_BASE,
                 api_version: str = API_VERSION,
                 request_timeout: float = 30):
        if credentials is None:
            credentials = credentials_store.require_valid()
        elif credentials_store.is_expired(credentials):
            raise CredentialError("LinkedIn access token has expired. Run: linkedin-publisher auth refresh")
        self.__credentials = credentials
        self.__api_endpoint = api_endpoint.rstrip('/')
        self.__api_version = api_version
        self.__request_timeout = request_timeout

    @property
    def credentials(self) -> Credentials:
        return self.__credentials

    def request(self,
                endpoint: str,
                method: str = "GET",
                body: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """
        Make an authenticated API request

        Args:
            endpoint: Absolute URL, or a path relative to the API base
            method: HTTP method
            body: Optional JSON body

        Returns:
            The decoded JSON response, or an empty dict for an empty response

        Raises:
            LinkedInAPIError: For any non-2xx response
            LinkedInTransportError: If the API could not be reached
        """
        url = endpoint if endpoint.startswith('http') else f"{self.__api_endpoint}{endpoint}"

        headers = {
            "Authorization": f"Bearer {self.__credentials.access_token}",
            "Content-Type": "application/json",
            "X-Restli-Protocol-Version": "2.0.0",
            "LinkedIn-Version": self.__api_version
        }

        response = self._send(method, url, headers=headers, json=body)
        self._raise_for_status(response)

        text = response.text
        if not text or not text.strip():
            return {}
        try:
            return json.loads(text)
        except ValueError as ex:
            raise LinkedInError(f"Invalid JSON response from {method} {url}: {text[:200]}") from ex

    def upload_bytes(self, upload_url: str, data: bytes) -> None:
        headers = {
            "Authorization": f"Bearer {self.__credentials.access_token}",
            "Content-Type": "application/octet-stream"
        }
        response = self._send("PUT", upload_url, headers=headers, data=data)
        self._raise_for_status(response)

    def get_profile(self) -> Dict[str, Any]:
        return self.request("/userinfo")

    def get_member_urn(self) -> str:
        profile = self.get_profile()
        member_id = profile.get('sub')
        if not member_id:
            raise LinkedInError(f"Profile has no member ID: {profile}")
        return person_urn(member_id)

    def get_posts(self, limit: int = 10) -> List[Dict[str, Any]]:
        author_urn = urllib.parse.quote(self.get_member_urn(), safe='')
        response = self.request(f"/ugcPosts?q=authors&authors=List({author_urn})&count={int(limit)}")
        return response.get('elements') or []

    def delete_post(self, post_id: str) -> None:
        if not post_id:
            raise ValueError("Post ID is required")
        self.request(f"/ugcPosts/{urllib.parse.quote(post_id, safe='')}", method="DELETE")

    def get_organizations(self) -> List[Dict[str, Any]]:
        response = self.request(f"/organizationalEntityAcls?q=roleAssignee&projection={ORGANIZATIONS_PROJECTION}")
        return response.get('elements') or []

    def create_post(self, content: Content) -> Dict[str, Any]:
        return self.publish_share(self.build_share(self.get_member_urn(), content))

    def create_organization_post(self, organization_id: str, content: Content) -> Dict[str, Any]:
        if not organization_id:
            raise ValueError("Organization ID is required")
        return self.publish_share(self.build_share(organization_urn(organization_id), content))

    def publish_share(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        logger.debug(f"Publishing {payload['specificContent']['com.linkedin.ugc.ShareContent']['shareMediaCategory']} "
                     f"post as {payload['author']}")
        return self.request("/ugcPosts", method="POST", body=payload)

    @staticmethod
    def build_share(author: str,
                    content: Content,
                    media_category: Optional[MediaCategory] = None,
                    media: Optional[List[Dict[str, Any]]] = None) -> Dict[str, Any]:
        """
        Build a UGC post payload.

        Without explicit media, an article link on the content becomes an ARTICLE
        share and anything else a NONE (text only) share.
        """
        share_content: Dict[str, Any] = {
            "shareCommentary": {
                "text": content.text
            },
            "shareMediaCategory": MediaCategory.NONE.value
        }

        if media_category and media:
            share_content["shareMediaCategory"] = media_category.value
            share_content["media"] = media
        elif content.article_url:
            article: Dict[str, Any] = {
                "status": "READY",
                "originalUrl": content.article_url
            }
            if content.article_title:
                article["title"] = {"text": content.article_title}
            if content.article_description:
                article["description"] = {"text": content.article_description}
            share_content["shareMediaCategory"] = MediaCategory.ARTICLE.value
            share_content["media"] = [article]

        return {
            "author": author,
            "lifecycleState": "PUBLISHED",
            "visibility": {
                "com.linkedin.ugc.MemberNetworkVisibility": content.visibility.value
            },
            "specificContent": {
                "com.linkedin.ugc.ShareContent": share_content
            }
        }

    def _send(self, method: str, url: str, **kwargs) -> requests.Response:
        try:
            response = requests.request(method, url, timeout=self.__request_timeout, **kwargs)
        except requests.exceptions.RequestException as ex:
            raise LinkedInTransportError(f"Request failed: {method} {url}. Reason: {ex}") from ex
        self._log_response(response)
        return response

    @staticmethod
    def _raise_for_status(response: requests.Response):
        if 200 <= response.status_code < 300:
            return
        text = response.text
        message = None
        try:
            error = json.loads(text)
            if isinstance(error, dict):
                message = error.get('message')
        except ValueError:
            pass
        raise LinkedInAPIError(response.status_code, message or text or str(response.reason))

    @staticmethod
    def _log_response(response):
        try:
            logger.debug(f"Response {response.status_code} json: {response.json()}")
        except Exception:
            logger.debug(f"Response: {response}")
