import logging

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Dict, List, Any, Optional, Union

logger = logging.getLogger(__name__)


class Visibility(str, Enum):
    PUBLIC = "PUBLIC"
    CONNECTIONS = "CONNECTIONS"

    @staticmethod
    def of(value: Union[str, 'Visibility', None]) -> 'Visibility':
        if not value:
            return Visibility.PUBLIC
        if isinstance(value, Visibility):
            return value
        try:
            return Visibility(str(value).upper())
        except ValueError:
            raise ValueError(f"Invalid visibility: {value}, expected one of: "
                             f"{', '.join(e.value for e in Visibility)}")


class MediaCategory(str, Enum):
    NONE = "NONE"
    ARTICLE = "ARTICLE"
    IMAGE = "IMAGE"


@dataclass
class Content:
    """Content of a single post: text plus an optional image or article link"""
    text: str
    visibility: Visibility = Visibility.PUBLIC
    image: Optional[str] = None
    article_url: Optional[str] = None
    article_title: Optional[str] = None
    article_description: Optional[str] = None

    def __post_init__(self):
        if not self.text or not self.text.strip():
            raise ValueError("Post text is required")
        self.visibility = Visibility.of(self.visibility)
        if self.image and self.article_url:
            raise ValueError("A post can have either an image or an article link, not both")

    @property
    def media_category(self) -> MediaCategory:
        if self.image:
            return MediaCategory.IMAGE
        if self.article_url:
            return MediaCategory.ARTICLE
        return MediaCategory.NONE


@dataclass
class PostResult:
    """Result object returned after a successful post"""
    message: str = ""
    steps_log: List[str] = field(default_factory=list)
    platform_response: Optional[Dict[str, Any]] = None
    post_id: Optional[str] = None

    @property
    def post_url(self) -> Optional[str]:
        return f"https://www.linkedin.com/feed/update/{self.post_id}" if self.post_id else None

    def add_step(self, step: str, log_level=logging.DEBUG) -> 'PostResult':
        """Add a step to the execution log"""
        self.steps_log.append(f"{datetime.now().strftime('%H:%M:%S')} - {step}")
        logger.log(log_level, step)
        return self

    def as_success(self, message: str, platform_response: Dict[str, Any]) -> 'PostResult':
        self.platform_response = platform_response
        self.post_id = platform_response.get('id') if platform_response else None
        self.message = message
        return self.add_step(message)

    def __str__(self):
        steps_lines = '\n'.join(self.steps_log)
        return (f"{self.__class__.__name__}"
                f"(message={self.message}\npost_id={self.post_id}\npost_url={self.post_url}"
                f"\nsteps_log={steps_lines})")
