from .credentials import Credentials, CredentialsStore, CredentialError, CredentialsParseError
from .oauth import OAuth
from .oauth_flow import OAuthFlow, OAuthError, AuthorizationError, TokenRequestError
from .oauth_callback_handler import OAuthCallbackHandler

__all__ = ["Credentials", "CredentialsStore", "CredentialError", "CredentialsParseError", "OAuth",
           "OAuthFlow", "OAuthError", "AuthorizationError", "TokenRequestError", "OAuthCallbackHandler"]
