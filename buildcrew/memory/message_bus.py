import itertools
from datetime import datetime, timezone
from typing import Callable, List, Optional, Tuple

from ..models import Message, MessageType, RunEvent


class MessageBus:
    """
    Append-only, ordered log of inter-agent messages.

    Used for audit and observability only; nothing in the pipeline reads it to
    make decisions. Sequence ids keep increasing across resets so an id is
    never reused within the process.
    """

    def __init__(self, on_change: Optional[Callable[[RunEvent], None]] = None):
        self._on_change = on_change
        self._sequence = itertools.count(1)
        self._log: List[Message] = []

    def reset(self) -> None:
        self._log = []

    def append(self, message: Message) -> Message:
        """Stamp the message with the next sequence id and the current time, then store it."""
        stored = message.model_copy(
            update={"id": next(self._sequence), "timestamp": datetime.now(timezone.utc)}
        )
        self._log.append(stored)

        if self._on_change is not None:
            self._on_change(RunEvent(kind="message", message=stored))

        return stored

    def post(
        self,
        sender: str,
        content: str,
        message_type: MessageType,
        recipient: Optional[str] = None,
    ) -> Message:
        return self.append(
            Message(sender=sender, recipient=recipient, content=content, type=message_type)
        )

    def all(self) -> Tuple[Message, ...]:
        return tuple(self._log)

    def __len__(self) -> int:
        return len(self._log)
