import logging

from dataclasses import dataclass
from typing import Any, Dict, Optional

from ..content_publisher import Content, MediaCategory, PostResult
from ..media import Media
from .linkedin_client import LinkedInClient, LinkedInUploadError, organization_urn

logger = logging.getLogger(__name__)

FEED_SHARE_IMAGE_RECIPE = "urn:li:digitalmediaRecipe:feedshare-image"
UPLOAD_MECHANISM = "com.linkedin.digitalmedia.uploading.MediaUploadHttpRequest"


@dataclass(frozen=True)
class RegisteredUpload:
    """One-time upload target returned by asset registration"""
    upload_url: str
    asset: str


class LinkedInContentPublisher:
    """
    Publishes text, article and image posts for a member or an organization.

    Image posts take three sequential round trips: register an upload, PUT the
    image bytes to the returned one-time URL, then create the post referencing
    the registered asset. A failing step aborts the remaining ones, so no post
    is ever created for an image that was not uploaded.
    """
    def __init__(self, client: LinkedInClient, media: Optional[Media] = None):
        self.__client = client
        self.__media = media if media else Media()

    def publish(self, content: Content, organization_id: Optional[str] = None) -> PostResult:
        result = PostResult()
        author = organization_urn(organization_id) if organization_id else None
        result.add_step(f"Publishing {content.media_category.value} post as {author or 'member'}")

        if content.media_category == MediaCategory.IMAGE:
            if author is None:
                author = self.__client.get_member_urn()
            response = self._create_image_post(author, content, result)
        elif organization_id:
            response = self.__client.create_organization_post(organization_id, content)
        else:
            response = self.__client.create_post(content)

        return result.as_success(f"Post created: {response.get('id')}", response)

    def create_image_post(self, content: Content) -> Dict[str, Any]:
        return self._create_image_post(self.__client.get_member_urn(), content)

    def create_organization_image_post(self, organization_id: str, content: Content) -> Dict[str, Any]:
        if not organization_id:
            raise ValueError("Organization ID is required")
        return self._create_image_post(organization_urn(organization_id), content)

    def _create_image_post(self,
                           author: str,
                           content: Content,
                           result: Optional[PostResult] = None) -> Dict[str, Any]:
        if not content.image:
            raise ValueError("An image is required for an image post")
        if result is None:
            result = PostResult()

        upload = self._register_upload(author)
        result.add_step(f"Upload registered, asset: {upload.asset}")

        self._upload_image(upload, content.image)
        result.add_step(f"Image uploaded: {content.image}")

        return self._publish(author, content, upload)

    def _register_upload(self, owner: str) -> RegisteredUpload:
        payload = {
            "registerUploadRequest": {
                "recipes": [FEED_SHARE_IMAGE_RECIPE],
                "owner": owner,
                "serviceRelationships": [{
                    "relationshipType": "OWNER",
                    "identifier": "urn:li:userGeneratedContent"
                }]
            }
        }

        response = self.__client.request("/assets?action=registerUpload", method="POST", body=payload)

        value = response.get('value') or {}
        upload_url = ((value.get('uploadMechanism') or {}).get(UPLOAD_MECHANISM) or {}).get('uploadUrl')
        asset = value.get('asset')
        if not upload_url or not asset:
            raise LinkedInUploadError(f"Invalid upload registration response: {response}")

        return RegisteredUpload(upload_url=upload_url, asset=asset)

    def _upload_image(self, upload: RegisteredUpload, image_source: str) -> None:
        data = self.__media.read_bytes(image_source)
        logger.debug(f"Uploading {len(data)} bytes for asset: {upload.asset}")
        self.__client.upload_bytes(upload.upload_url, data)

    def _publish(self, author: str, content: Content, upload: RegisteredUpload) -> Dict[str, Any]:
        media = [{
            "status": "READY",
            "media": upload.asset
        }]
        payload = self.__client.build_share(author, content, MediaCategory.IMAGE, media)
        return self.__client.publish_share(payload)
