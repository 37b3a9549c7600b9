"""Data model for email subscribers."""

from dataclasses import dataclass, field
from datetime import datetime


@dataclass
class Subscriber:
    """A user who receives release notifications."""

    email: str
    confirmed: bool = False
    created_at: str = field(default_factory=lambda: datetime.now().isoformat())

    @property
    def name(self) -> str:
        """Local part of the email address, used in greetings."""
        return self.email.split("@")[0]
