"""
A Python app for publishing content to LinkedIn, as a member or as an organization
"""
from .app.app import App
from .app.config import ConfigurationError, LinkedInConfig, OAuthConfig
from .app.content_publisher import Content, MediaCategory, PostResult, Visibility
from .app.linkedin.linkedin_client import LinkedInClient, LinkedInError, LinkedInAPIError, \
    LinkedInTransportError, LinkedInUploadError
from .app.linkedin.linkedin_content_publisher import LinkedInContentPublisher, RegisteredUpload
from .app.linkedin.linkedin_oauth import LinkedInOAuth
from .app.oauth import Credentials, CredentialsStore, CredentialError, OAuthError, AuthorizationError

__all__ = ["App", "ConfigurationError", "LinkedInConfig", "OAuthConfig", "Content", "MediaCategory",
           "PostResult", "Visibility", "LinkedInClient", "LinkedInError", "LinkedInAPIError",
           "LinkedInTransportError", "LinkedInUploadError", "LinkedInContentPublisher", "RegisteredUpload",
           "LinkedInOAuth", "Credentials", "CredentialsStore", "CredentialError", "OAuthError",
           "AuthorizationError"]
