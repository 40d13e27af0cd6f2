import json

from datetime import datetime
from typing import Any, Dict, List, Optional

JSON = "json"
TABLE = "table"

_RULE = '=' * 70
_SEPARATOR = '  ' + '-' * 40


def _banner(title: str) -> List[str]:
    return [_RULE, title, _RULE, '']


def _as_json(value: Any) -> str:
    return json.dumps(value, indent=2, ensure_ascii=False)


class Output:
    @staticmethod
    def validate_format(output_format: Optional[str], default: str = TABLE) -> str:
        output_format = (output_format or default).lower()
        if output_format not in (JSON, TABLE):
            raise ValueError(f"Invalid format: {output_format}, expected one of: {JSON}, {TABLE}")
        return output_format

    @staticmethod
    def profile(profile: Dict[str, Any], output_format: str = TABLE) -> str:
        if output_format == JSON:
            return _as_json(profile)

        lines = _banner("PROFILE INFORMATION") + [
            f"  Name:          {profile.get('name', '')}",
            f"  Member ID:     {profile.get('sub', '')}",
        ]
        if profile.get('email'):
            lines.append(f"  Email:         {profile['email']}")
        if profile.get('picture'):
            lines.append(f"  Profile Pic:   {profile['picture']}")
        locale = profile.get('locale')
        if isinstance(locale, dict):
            lines.append(f"  Locale:        {locale.get('language', '')}_{locale.get('country', '')}")
        elif locale:
            lines.append(f"  Locale:        {locale}")
        return '\n'.join(lines)

    @staticmethod
    def posts(posts: List[Dict[str, Any]], output_format: str = TABLE) -> str:
        if output_format == JSON:
            return _as_json(posts)
        if not posts:
            return "No posts found."

        lines = _banner("YOUR POSTS")
        for post in posts:
            share = (post.get('specificContent') or {}).get('com.linkedin.ugc.ShareContent') or {}
            text = (share.get('shareCommentary') or {}).get('text') or '(no text)'
            created = (post.get('created') or {}).get('time')
            lines.append(f"  ID: {post.get('id')}")
            if created:
                lines.append(f"  Created: {datetime.fromtimestamp(created / 1000).strftime('%Y-%m-%d %H:%M:%S')}")
            lines.append(f"  Content: {Output.truncate(text, 60)}")
            lines.append(f"  Status: {post.get('lifecycleState', '')}")
            lines.append(_SEPARATOR)
        return '\n'.join(lines)

    @staticmethod
    def organizations(organizations: List[Dict[str, Any]], output_format: str = TABLE) -> str:
        if output_format == JSON:
            return _as_json(organizations)
        if not organizations:
            return "No organizations found."

        lines = _banner("YOUR ORGANIZATIONS")
        for element in organizations:
            # Role assignments carry the organization in the projected "organizationalTarget~"
            organization = element.get('organizationalTarget~') or element
            organization_id = organization.get('id') or str(element.get('organizationalTarget', '')).split(':')[-1]
            lines.append(f"  ID: {organization_id}")
            lines.append(f"  Name: {organization.get('localizedName', '')}")
            if organization.get('vanityName'):
                lines.append(f"  Vanity: {organization['vanityName']}")
            if element.get('role'):
                lines.append(f"  Role: {element['role']}")
            lines.append(_SEPARATOR)
        return '\n'.join(lines)

    @staticmethod
    def auth_status(authenticated: bool,
                    member_id: Optional[str] = None,
                    seconds_remaining: Optional[float] = None,
                    name: Optional[str] = None) -> str:
        if not authenticated:
            return '\n'.join(_banner("NOT LOGGED IN") + [
                "You are not currently authenticated.",
                "",
                "To get started:",
                "  First time?    Run: linkedin-publisher auth setup",
                "  Ready to go?   Run: linkedin-publisher auth login"
            ])

        days_left = int(seconds_remaining // (24 * 60 * 60)) if seconds_remaining else 0
        return '\n'.join(_banner("AUTHENTICATION STATUS") + [
            "  Status:        Authenticated",
            f"  Member ID:     {member_id or 'Unknown'}",
            f"  Name:          {name or 'Unknown'}",
            f"  Days Left:     {days_left}"
        ])

    @staticmethod
    def result(value: Dict[str, Any]) -> str:
        return _as_json(value)

    @staticmethod
    def success(message: str) -> str:
        return f"OK: {message}"

    @staticmethod
    def error(message: str) -> str:
        return f"Error: {' '.join(str(message).split())}"

    @staticmethod
    def truncate(text: str, max_len: int) -> str:
        return text if len(text) <= max_len else f"{text[:max_len]}..."
