#!/usr/bin/env python3
"""
Usage:
    linkedin-publisher auth setup
    linkedin-publisher auth login [--port PORT] [--manual]
    linkedin-publisher auth logout
    linkedin-publisher auth status
    linkedin-publisher auth refresh
    linkedin-publisher profile [--format json|table]
    linkedin-publisher posts list [--limit N] [--format json|table]
    linkedin-publisher posts create --text TEXT [--image PATH_OR_URL] [--visibility PUBLIC|CONNECTIONS]
                                    [--article-url URL] [--article-title TITLE] [--article-description DESC]
    linkedin-publisher posts delete POST_ID
    linkedin-publisher orgs list [--format json|table]
    linkedin-publisher orgs post ORG_ID --text TEXT [--image PATH_OR_URL] [--visibility PUBLIC|CONNECTIONS]

Options:
    --env-file PATH   Load environment variables from PATH (default: ./.env)
    --verbose         Log debug output
    --help            Show this message
"""
import logging
import sys

from typing import Any, Optional

from .app.app import App
from .app.config import ConfigurationError, load_environment
from .app.content_publisher import Content
from .app.linkedin.linkedin_client import LinkedInError
from .app.oauth import CredentialError, OAuthError
from .app.output import Output, TABLE
from .app.run_arg import RunArg

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_USAGE = 2

_FAILURES = (ConfigurationError, OAuthError, CredentialError, LinkedInError, FileNotFoundError, ValueError, OSError)


class UsageError(ValueError):
    pass


def _content_of(run_args: dict[RunArg, Any]) -> Content:
    text = RunArg.TEXT.get_from(run_args)
    if not text:
        raise UsageError("Option --text is required")
    return Content(
        text=text,
        visibility=RunArg.VISIBILITY.get_from(run_args),
        image=RunArg.IMAGE.get_from(run_args),
        article_url=RunArg.ARTICLE_URL.get_from(run_args),
        article_title=RunArg.ARTICLE_TITLE.get_from(run_args),
        article_description=RunArg.ARTICLE_DESCRIPTION.get_from(run_args)
    )


def _argument(positionals: list[str], index: int, name: str) -> str:
    if len(positionals) <= index:
        raise UsageError(f"Missing argument: {name}")
    return positionals[index]


def run(app: App, run_args: dict[RunArg, Any], positionals: list[str]) -> int:
    command = positionals[0] if positionals else None
    action = positionals[1] if len(positionals) > 1 else None

    if command == 'auth':
        if action == 'setup':
            app.setup()
        elif action == 'login':
            app.login(RunArg.PORT.get_from(run_args), RunArg.MANUAL.get_from(run_args))
        elif action == 'logout':
            app.logout()
        elif action == 'status':
            return EXIT_OK if app.status() else EXIT_FAILURE
        elif action == 'refresh':
            app.refresh()
        else:
            raise UsageError(f"Unknown auth command: {action}")
    elif command == 'profile':
        app.profile(Output.validate_format(RunArg.FORMAT.get_from(run_args), TABLE))
    elif command == 'posts':
        if action == 'list':
            app.list_posts(RunArg.LIMIT.get_from(run_args),
                           Output.validate_format(RunArg.FORMAT.get_from(run_args), TABLE))
        elif action == 'create':
            app.create_post(_content_of(run_args))
        elif action == 'delete':
            app.delete_post(_argument(positionals, 2, "POST_ID"))
        else:
            raise UsageError(f"Unknown posts command: {action}")
    elif command in ('orgs', 'organizations'):
        if action == 'list':
            app.list_organizations(Output.validate_format(RunArg.FORMAT.get_from(run_args), TABLE))
        elif action == 'post':
            app.create_post(_content_of(run_args), _argument(positionals, 2, "ORG_ID"))
        else:
            raise UsageError(f"Unknown orgs command: {action}")
    else:
        raise UsageError(f"Unknown command: {command}")
    return EXIT_OK


def main(argv: Optional[list[str]] = None, app: Optional[App] = None) -> int:
    try:
        run_args, positionals = RunArg.parse(sys.argv[1:] if argv is None else argv)
    except ValueError as ex:
        print(Output.error(str(ex)), file=sys.stderr)
        print(__doc__, file=sys.stderr)
        return EXIT_USAGE

    verbose = RunArg.VERBOSE.get_from(run_args)
    logging.basicConfig(
        level=logging.DEBUG if verbose is True else logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    if RunArg.HELP.get_from(run_args) or not positionals:
        print(__doc__)
        return EXIT_OK

    try:
        load_environment(RunArg.ENV_FILE.get_from(run_args))
        return run(app if app else App(), run_args, positionals)
    except UsageError as ex:
        print(Output.error(str(ex)), file=sys.stderr)
        print(__doc__, file=sys.stderr)
        return EXIT_USAGE
    except _FAILURES as ex:
        logger.debug("Command failed", exc_info=ex)
        print(Output.error(str(ex)), file=sys.stderr)
        return EXIT_FAILURE
    except KeyboardInterrupt:
        print(Output.error("Cancelled"), file=sys.stderr)
        return EXIT_FAILURE


if __name__ == "__main__":
    sys.exit(main())
