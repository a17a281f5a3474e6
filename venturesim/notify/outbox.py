from __future__ import annotations
from typing import List
import logging
import threading

from venturesim.notify.messages import EmailMessage

logger = logging.getLogger(__name__)


class OutboxNotifier:
    """Default notifier: keeps messages in memory for an external mail function to pick up."""

    def __init__(self):
        self._sent: List[EmailMessage] = []
        self._lock = threading.Lock()

    def send(self, message: EmailMessage) -> None:
        with self._lock:
            self._sent.append(message)
        logger.info(f"queued '{message.subject}' for {', '.join(message.to)}")

    @property
    def sent(self) -> List[EmailMessage]:
        with self._lock:
            return list(self._sent)

    def clear(self) -> None:
        with self._lock:
            self._sent.clear()
