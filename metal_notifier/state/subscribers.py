"""Subscriber persistence in a JSON file."""

import json
import logging
import threading
from dataclasses import asdict
from datetime import datetime
from pathlib import Path
from typing import Dict, List

from ..config import MAX_SUBSCRIBERS, is_valid_email
from ..models import Subscriber

logger = logging.getLogger(__name__)


class SubscriberStoreError(Exception):
    """Raised when the subscriber store cannot be read or updated."""

    pass


class SubscriberStore:
    """Manage subscribers: register, confirm, unregister and clean up."""

    def __init__(self, state_file: Path, max_subscribers: int = MAX_SUBSCRIBERS):
        self.state_file = Path(state_file)
        self.max_subscribers = max_subscribers
        self._lock = threading.Lock()

    def _load_state(self) -> Dict:
        """Load state from JSON file."""
        if not self.state_file.exists():
            return {"subscribers": [], "last_clean": None}

        try:
            with open(self.state_file, "r", encoding="utf-8") as f:
                return json.load(f)
        except (json.JSONDecodeError, IOError) as e:
            raise SubscriberStoreError(f"Failed to load {self.state_file}: {e}") from e

    def _save_state(self, state: Dict):
        """Persist state to JSON file."""
        self.state_file.parent.mkdir(parents=True, exist_ok=True)
        try:
            with open(self.state_file, "w", encoding="utf-8") as f:
                json.dump(state, f, indent=2, ensure_ascii=False)
        except IOError as e:
            raise SubscriberStoreError(f"Failed to save {self.state_file}: {e}") from e

    def _subscribers(self, state: Dict) -> List[Subscriber]:
        try:
            return [Subscriber(**entry) for entry in state.get("subscribers", [])]
        except TypeError as e:
            raise SubscriberStoreError(f"Corrupt subscriber entry: {e}") from e

    def users(self) -> List[Subscriber]:
        """Confirmed subscribers in registration order."""
        with self._lock:
            subscribers = self._subscribers(self._load_state())
        return [s for s in subscribers if s.confirmed]

    def register(self, email: str) -> Subscriber:
        """
        Add an unconfirmed subscriber.

        Raises:
            SubscriberStoreError: if the address is invalid, already
                registered, or the store is full
        """
        email = email.strip().lower()
        if not is_valid_email(email):
            raise SubscriberStoreError(f"Invalid email address: {email!r}")

        with self._lock:
            state = self._load_state()
            subscribers = self._subscribers(state)
            if any(s.email == email for s in subscribers):
                raise SubscriberStoreError(f"{email} is already registered")
            if len(subscribers) >= self.max_subscribers:
                raise SubscriberStoreError("Maximum number of subscribers reached")

            subscriber = Subscriber(email=email)
            subscribers.append(subscriber)
            self._write(state, subscribers)

        logger.info(f"Registered {email}")
        return subscriber

    def confirm(self, email: str):
        """Mark a registered subscriber as confirmed."""
        email = email.strip().lower()
        with self._lock:
            state = self._load_state()
            subscribers = self._subscribers(state)
            for subscriber in subscribers:
                if subscriber.email == email:
                    subscriber.confirmed = True
                    break
            else:
                raise SubscriberStoreError(f"{email} is not registered")
            self._write(state, subscribers)

        logger.info(f"Confirmed {email}")

    def unregister(self, email: str):
        """Remove a subscriber. Unknown addresses are ignored."""
        email = email.strip().lower()
        with self._lock:
            state = self._load_state()
            subscribers = self._subscribers(state)
            remaining = [s for s in subscribers if s.email != email]
            if len(remaining) != len(subscribers):
                self._write(state, remaining)
                logger.info(f"Unregistered {email}")

    def clean(self) -> int:
        """Delete unconfirmed subscribers, returning how many were removed."""
        with self._lock:
            state = self._load_state()
            subscribers = self._subscribers(state)
            confirmed = [s for s in subscribers if s.confirmed]
            state["last_clean"] = datetime.now().isoformat()
            self._write(state, confirmed)

        removed = len(subscribers) - len(confirmed)
        logger.info(f"Removed {removed} unconfirmed subscribers")
        return removed

    def _write(self, state: Dict, subscribers: List[Subscriber]):
        state["subscribers"] = [asdict(s) for s in subscribers]
        self._save_state(state)
