import logging

from typing import Any, Callable, Dict, Optional

from .config import LinkedInConfig, DEFAULT_CALLBACK_PORT, redirect_uri_for
from .content_publisher import Content, PostResult
from .linkedin.linkedin_client import LinkedInClient, LinkedInError
from .linkedin.linkedin_content_publisher import LinkedInContentPublisher
from .linkedin.linkedin_oauth import LinkedInOAuth
from .oauth import Credentials, CredentialsStore
from .output import Output, TABLE

logger = logging.getLogger(__name__)

SETUP_INSTRUCTIONS = f"""
{'='*70}
LINKEDIN PUBLISHER SETUP
{'='*70}

Before you can login, you need to set up OAuth credentials.

STEP 1: Create a LinkedIn App
  1. Go to https://www.linkedin.com/developers/apps
  2. Click "Create app"
  3. Fill in app details and create

STEP 2: Configure OAuth
  1. Go to your app's "Auth" tab
  2. Add OAuth 2.0 redirect URL: {redirect_uri_for(DEFAULT_CALLBACK_PORT)}
  3. Request the following products:
     - Sign In with LinkedIn using OpenID Connect
     - Share on LinkedIn

STEP 3: Get Credentials
  Copy the "Client ID" and "Client Secret" from the "Auth" tab

STEP 4: Configure this app
  export LINKEDIN_CLIENT_ID="your_client_id"
  export LINKEDIN_CLIENT_SECRET="your_client_secret"

  Or put the same variables in a .env file in the working directory.
  Optional: LINKEDIN_OAUTH_PORT (default {DEFAULT_CALLBACK_PORT}), LINKEDIN_SCOPES (comma separated)

STEP 5: Login
  Run: linkedin-publisher auth login
  Without a local browser, run: linkedin-publisher auth login --manual
"""


class App:
    def __init__(self,
                 config: Optional[LinkedInConfig] = None,
                 credentials_store: Optional[CredentialsStore] = None,
                 echo: Callable[[str], Any] = print):
        self.config = config if config else LinkedInConfig()
        self.credentials_store = credentials_store if credentials_store else CredentialsStore()
        self.echo = echo

    def oauth(self, port: Optional[int] = None) -> LinkedInOAuth:
        return LinkedInOAuth(self.config.oauth_config(port), self.credentials_store)

    def client(self) -> LinkedInClient:
        return LinkedInClient(self.credentials_store,
                              api_endpoint=self.config.endpoint,
                              api_version=self.config.api_version)

    def publisher(self) -> LinkedInContentPublisher:
        return LinkedInContentPublisher(self.client())

    def setup(self):
        self.echo(SETUP_INSTRUCTIONS)

    def login(self, port: Optional[int] = None, manual: bool = False) -> Optional[Credentials]:
        stored = self.credentials_store.load()
        if stored and not self.credentials_store.is_expired(stored):
            self.echo("You are already logged in to LinkedIn.\n"
                      "  Check status:  linkedin-publisher auth status\n"
                      "  Log out:       linkedin-publisher auth logout")
            return None

        credentials = self.oauth(port).login(manual=manual)
        self.echo(Output.success("Successfully logged in to LinkedIn!"))
        return credentials

    def logout(self) -> bool:
        deleted = self.credentials_store.delete()
        if deleted:
            self.echo(Output.success("Your LinkedIn credentials have been deleted. "
                                     "To log in again, run: linkedin-publisher auth login"))
        else:
            self.echo("No credentials found to delete.")
        return deleted

    def status(self) -> bool:
        credentials = self.credentials_store.load()
        if not credentials:
            self.echo(Output.auth_status(False))
            return False

        if self.credentials_store.is_expired(credentials):
            self.echo(Output.auth_status(False))
            self.echo("\nYour token has expired. Run: linkedin-publisher auth refresh (or auth login)")
            return False

        try:
            profile = LinkedInClient(self.credentials_store, credentials,
                                     api_endpoint=self.config.endpoint,
                                     api_version=self.config.api_version).get_profile()
        except LinkedInError as ex:
            logger.debug("Failed to fetch profile", exc_info=ex)
            self.echo(Output.auth_status(False))
            self.echo(f"\nError checking status: {ex}")
            return False

        self.echo(Output.auth_status(True, profile.get('sub'), credentials.seconds_remaining(), profile.get('name')))
        if self.credentials_store.is_expiring_soon(credentials):
            self.echo("\nWarning: your token will expire soon. Run: linkedin-publisher auth refresh")
        return True

    def refresh(self) -> Credentials:
        self.echo("Refreshing token...")
        credentials = self.oauth().refresh()
        self.echo(Output.success("Token refreshed successfully!"))
        return credentials

    def profile(self, output_format: str = TABLE) -> Dict[str, Any]:
        profile = self.client().get_profile()
        self.echo(Output.profile(profile, output_format))
        return profile

    def list_posts(self, limit: int = 10, output_format: str = TABLE):
        posts = self.client().get_posts(limit)
        self.echo(Output.posts(posts, output_format))
        return posts

    def create_post(self, content: Content, organization_id: Optional[str] = None) -> PostResult:
        publisher = self.publisher()
        if content.image:
            self.echo("Uploading image...")
        self.echo("Creating organization post..." if organization_id else "Creating post...")
        result = publisher.publish(content, organization_id)
        self.echo(Output.success("Organization post created successfully!" if organization_id
                                 else "Post created successfully!"))
        self.echo(Output.result(result.platform_response))
        return result

    def delete_post(self, post_id: str):
        self.client().delete_post(post_id)
        self.echo(Output.success("Post deleted successfully!"))

    def list_organizations(self, output_format: str = TABLE):
        organizations = self.client().get_organizations()
        self.echo(Output.organizations(organizations, output_format))
        return organizations
