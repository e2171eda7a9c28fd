"""
User-Agent Parsing

Derives the client facts stored on each visit from the raw User-Agent header.
The parser is a plain, side-effect-free function so the ingest path can be
given a different one (tests, a faster parser, a remote service).

Device types are limited to "mobile", "tablet" and "desktop". The user-agents
library has no notion of smart TVs, consoles or wearables, so those agents are
recorded as "desktop" along with every other agent that is neither a phone nor
a tablet. A parser that tells them apart can be passed to the visit logger.
"""

from typing import Callable, NamedTuple, Optional

from user_agents import parse

DEFAULT_DEVICE_TYPE = "desktop"

# ua-parser reports unknown families as "Other"
UNKNOWN_FAMILY = "Other"


class ClientInfo(NamedTuple):
    browser: Optional[str]
    os: Optional[str]
    device_type: str


UserAgentParser = Callable[[Optional[str]], ClientInfo]


def _family(value: Optional[str]) -> Optional[str]:
    if not value or value == UNKNOWN_FAMILY:
        return None
    return value


def parse_user_agent(user_agent: Optional[str]) -> ClientInfo:
    """
    Classify a User-Agent string.

    Browser and OS are None when unrecognized. Device type is "mobile" or
    "tablet" when detected and falls back to "desktop" otherwise, so desktop
    also covers agents that could not be classified at all.
    """
    if not user_agent:
        return ClientInfo(browser=None, os=None, device_type=DEFAULT_DEVICE_TYPE)

    parsed = parse(user_agent)

    if parsed.is_tablet:
        device_type = "tablet"
    elif parsed.is_mobile:
        device_type = "mobile"
    else:
        device_type = DEFAULT_DEVICE_TYPE

    return ClientInfo(
        browser=_family(parsed.browser.family),
        os=_family(parsed.os.family),
        device_type=device_type,
    )
