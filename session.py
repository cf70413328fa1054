import logging
import time
from dataclasses import dataclass, field
from typing import Dict

from rates import RateCache

logger = logging.getLogger(__name__)


@dataclass
class ChatSession:
    """
    Состояние одного чата: курсы и антиспам.
    """
    rates: RateCache = field(default_factory=RateCache)
    throttle_map: Dict[str, float] = field(default_factory=dict)

    def throttle(self, key: str, limit: float, now: float = None) -> bool:
        """
        True -> команду надо пропустить.
        Время обновляется и при пропуске, чтобы спам продлевал паузу.
        """
        now = time.time() if now is None else now
        last = self.throttle_map.get(key)
        self.throttle_map[key] = now

        if last is None:
            return False

        if now - last < limit:
            logger.debug("skip -- %s", key)
            return True

        return False


class SessionStore:
    """Сессии по chat_id, создаются при первом обращении."""

    def __init__(self):
        self._sessions: Dict[int, ChatSession] = {}

    def get(self, chat_id: int) -> ChatSession:
        session = self._sessions.get(chat_id)
        if session is None:
            session = ChatSession()
            self._sessions[chat_id] = session
        return session

    def __contains__(self, chat_id) -> bool:
        return chat_id in self._sessions

    def __len__(self) -> int:
        return len(self._sessions)
