import logging
import os

import requests

from .linkedin.linkedin_client import LinkedInTransportError, LinkedInUploadError
from .paths import Paths

logger = logging.getLogger(__name__)


class Media:
    def __init__(self, request_timeout: float = 60):
        self.__request_timeout = request_timeout

    def read_bytes(self, source: str) -> bytes:
        """
        Read an image from a local file or a remote URL.

        Raises:
            FileNotFoundError: If a local file does not exist
            LinkedInUploadError: If a remote image could not be fetched
            LinkedInTransportError: If a remote image host could not be reached
        """
        if not source:
            raise ValueError("Image source is required")
        if Paths.is_local(source):
            return self.read_file(source)
        return self.fetch(source)

    @staticmethod
    def read_file(file_path: str) -> bytes:
        path = os.path.expanduser(os.path.expandvars(file_path))
        if not os.path.isfile(path):
            raise FileNotFoundError(f"Image file not found: {path}")
        with open(path, 'rb') as image_file:
            data = image_file.read()
        logger.debug(f"Read {len(data)} bytes from: {path}")
        return data

    def fetch(self, url: str) -> bytes:
        try:
            response = requests.request("GET", url, timeout=self.__request_timeout)
        except requests.exceptions.RequestException as ex:
            raise LinkedInTransportError(f"Failed to fetch image: {url}. Reason: {ex}") from ex
        if not 200 <= response.status_code < 300:
            raise LinkedInUploadError(f"Failed to fetch image: {url}. Status: {response.status_code} {response.reason}")
        logger.debug(f"Fetched {len(response.content)} bytes from: {url}")
        return response.content
