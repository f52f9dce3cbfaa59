"""
Bot / crawler detection from the user-agent string.

Heuristic only: a case-insensitive substring match against known
signatures. False positives and negatives are accepted.
"""

BOT_SIGNATURES = (
    # Search engine crawlers
    "googlebot",
    "bingbot",
    "slurp",
    "duckduckbot",
    "baiduspider",
    "yandexbot",
    # Link-preview fetchers
    "facebookexternalhit",
    "twitterbot",
    "linkedinbot",
    "whatsapp",
    "telegram",
    "discord",
    # Generic
    "crawler",
    "spider",
    "bot",
)


def detect_bot(user_agent: str) -> bool:
    """Return True if the user agent contains any known bot signature."""
    lowered = (user_agent or "").lower()
    return any(signature in lowered for signature in BOT_SIGNATURES)
