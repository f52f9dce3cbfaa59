"""
User-agent parser strategies.

The extractor only depends on ``UserAgentParserStrategy``; the concrete
parser can be swapped (or faked in tests) without touching ingestion.
"""

from abc import ABC, abstractmethod

from user_agents import parse as parse_user_agent

from .models import ParsedUserAgent


class UserAgentParserStrategy(ABC):
    """Turns a raw user-agent string into device/OS/browser fields."""

    @abstractmethod
    def parse(self, user_agent: str) -> ParsedUserAgent:
        """
        Parse a user-agent string.

        Must not raise for unrecognised input: unknown fields come back
        as None.
        """
        pass


class UserAgentsParser(UserAgentParserStrategy):
    """
    Parser backed by the ``user-agents`` library (ua-parser regexes).

    Device type is reported only for phones and tablets; desktops and
    anything unrecognised come back without one.
    """

    def parse(self, user_agent: str) -> ParsedUserAgent:
        ua = parse_user_agent(user_agent or "")

        device_type = None
        if ua.is_tablet:
            device_type = "tablet"
        elif ua.is_mobile:
            device_type = "mobile"

        return ParsedUserAgent(
            device_type=device_type,
            os_name=_known(ua.os.family),
            os_version=ua.os.version_string or None,
            browser_name=_known(ua.browser.family),
            browser_version=ua.browser.version_string or None,
        )


def _known(family: str):
    # ua-parser reports unmatched families as "Other"
    if not family or family == "Other":
        return None
    return family
