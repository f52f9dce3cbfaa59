"""
Short code generation strategies for links.
Uses Strategy Pattern to allow different generation algorithms.
"""

import secrets
import string
from abc import ABC, abstractmethod
from sqlalchemy.orm import Session
from linkstats_app.models.link import Link


class ShortCodeStrategy(ABC):
    """Abstract base class for short code generation strategies"""

    @abstractmethod
    def generate(self, link_id: int, db_session: Session) -> str:
        """
        Generate a short code.

        Args:
            link_id: The database ID of the link record
            db_session: Database session for strategies that need to check uniqueness

        Returns:
            A short code string
        """
        pass


def code_taken(db_session: Session, short_code: str) -> bool:
    return db_session.query(Link.id).filter(Link.short_code == short_code).first() is not None


class RandomShortCodeStrategy(ShortCodeStrategy):
    """
    Random Base62 codes with a uniqueness check against the links table.

    Pros: unpredictable
    Cons: one query per attempt, can run out of retries
    """

    def __init__(self, length: int = 6, max_retries: int = 5):
        self.length = length
        self.max_retries = max_retries
        self.characters = string.ascii_letters + string.digits

    def generate(self, link_id: int, db_session: Session) -> str:
        for _ in range(self.max_retries):
            short_code = "".join(secrets.choice(self.characters) for _ in range(self.length))
            if not code_taken(db_session, short_code):
                return short_code

        raise RuntimeError(
            f"Could not generate unique short code after {self.max_retries} attempts"
        )


class Base62ShortCodeStrategy(ShortCodeStrategy):
    """
    Salted id → Base62 encoding.

    Unique per id without any query; the salt only hides how many links
    exist. Can still collide with a custom code, which LinkService checks.
    """

    BASE62_CHARS = "0123456789abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ"

    def __init__(self, salt: int = 238328, max_length: int = 6):
        self.salt = salt
        self.max_length = max_length

    def generate(self, link_id: int, db_session: Session) -> str:
        encoded = self._base62_encode(link_id + self.salt)

        # Truncating would create duplicates
        if len(encoded) > self.max_length:
            raise ValueError(
                f"Generated code '{encoded}' exceeds max length {self.max_length} "
                f"for link {link_id}; increase short_url_length."
            )
        return encoded

    def _base62_encode(self, number: int) -> str:
        if number == 0:
            return self.BASE62_CHARS[0]

        digits = []
        while number > 0:
            number, remainder = divmod(number, 62)
            digits.append(self.BASE62_CHARS[remainder])
        return "".join(reversed(digits))
