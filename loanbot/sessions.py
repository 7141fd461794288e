"""Chat sessions kept in memory.

A session holds an append-only list of messages. The only way to add to it is
``record_exchange``, which appends one user message and the assistant's reply
together, so the two always alternate.
"""
import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, List, Tuple

from loanbot import config
from loanbot.exceptions import SessionNotFoundError

logger = logging.getLogger(__name__)

USER = "user"
ASSISTANT = "assistant"

MESSAGE_TYPES = ("text", "loan-application", "document", "system")
STATUSES = ("active", "completed", "archived")


def _now():
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class Message:
    sender: str
    content: str
    timestamp: datetime = field(default_factory=_now)
    message_type: str = "text"
    metadata: Dict = field(default_factory=dict)

    def __post_init__(self):
        if self.sender not in (USER, ASSISTANT):
            raise ValueError(f"Invalid sender: {self.sender}")
        if self.message_type not in MESSAGE_TYPES:
            raise ValueError(f"Invalid message type: {self.message_type}")

    def to_dict(self):
        return {
            "sender": self.sender,
            "content": self.content,
            "timestamp": self.timestamp.isoformat(),
            "messageType": self.message_type,
            "metadata": dict(self.metadata),
        }


class ChatSession:
    def __init__(self, user_id, title=None):
        self._session_id = str(uuid.uuid4())
        self.user_id = user_id
        self.title = title or config.DEFAULT_SESSION_TITLE
        self.status = "active"
        self.tags = []
        self.created_at = _now()
        self.last_activity = self.created_at
        self._messages = [Message(ASSISTANT, config.WELCOME_MESSAGE, self.created_at)]

    @property
    def session_id(self):
        return self._session_id

    @property
    def messages(self) -> Tuple[Message, ...]:
        return tuple(self._messages)

    def record_exchange(self, user_message: Message, assistant_message: Message):
        if user_message.sender != USER or assistant_message.sender != ASSISTANT:
            raise ValueError("An exchange is one user message followed by one assistant message")
        self._messages.append(user_message)
        self._messages.append(assistant_message)
        self.last_activity = assistant_message.timestamp

    def to_dict(self):
        return {
            "sessionId": self.session_id,
            "userId": self.user_id,
            "title": self.title,
            "status": self.status,
            "tags": list(self.tags),
            "createdAt": self.created_at.isoformat(),
            "lastActivity": self.last_activity.isoformat(),
            "messages": [m.to_dict() for m in self._messages],
        }


class SessionStore:
    def __init__(self):
        self._sessions: Dict[str, ChatSession] = {}

    def start(self, user_id, title=None):
        session = ChatSession(user_id, title)
        self._sessions[session.session_id] = session
        logger.debug("Started chat session %s for user %s", session.session_id, user_id)
        return session

    def get(self, session_id, user_id):
        session = self._sessions.get(session_id)
        if session is None or session.user_id != user_id:
            raise SessionNotFoundError(session_id, user_id)
        return session

    def list(self, user_id, status=None, page=1, limit=10) -> List[ChatSession]:
        if status is not None and status not in STATUSES:
            raise ValueError(f"Invalid status: {status}")
        found = [
            s for s in self._sessions.values()
            if s.user_id == user_id and (status is None or s.status == status)
        ]
        found.sort(key=lambda s: s.last_activity, reverse=True)
        start = (max(page, 1) - 1) * limit
        return found[start:start + limit]

    def update(self, session_id, user_id, title=None, status=None, tags=None):
        session = self.get(session_id, user_id)
        if status is not None and status not in STATUSES:
            raise ValueError(f"Invalid status: {status}")
        if title is not None:
            session.title = title
        if status is not None:
            session.status = status
        if tags is not None:
            session.tags = list(tags)
        return session

    def delete(self, session_id, user_id):
        self.get(session_id, user_id)
        del self._sessions[session_id]
        logger.debug("Deleted chat session %s", session_id)

    def send(self, session_id, user_id, content, assistant, message_type="text"):
        """Ask ``assistant`` to answer ``content`` and record both messages.

        Returns the assistant ``Reply``.
        """
        session = self.get(session_id, user_id)
        user_message = Message(USER, content, message_type=message_type)
        reply = assistant.reply(content, session.messages, account=user_id)
        assistant_message = Message(
            ASSISTANT,
            reply.text,
            metadata={"intent": reply.intent, "confidence": reply.confidence, "source": reply.source},
        )
        session.record_exchange(user_message, assistant_message)
        return reply
