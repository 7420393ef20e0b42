"""Registry of in-memory admin code issuance dialogs.

Sessions live only in this process; a restart or cancel discards them.
"""

import threading
from typing import Dict, List, Optional

from loguru import logger

from verifybot.models import AdminCodeSession


class AdminSessionRegistry:
    """Thread-safe map of admin id -> active code issuance dialog."""

    def __init__(self) -> None:
        self._sessions: Dict[int, AdminCodeSession] = {}
        self._lock = threading.RLock()

    def start(self, admin_id: int) -> AdminCodeSession:
        """
        Start a fresh dialog, discarding any previous one for the admin.

        Args:
            admin_id: Telegram id of the admin

        Returns:
            New session at the first step
        """
        session = AdminCodeSession(admin_id=admin_id)
        with self._lock:
            replaced = self._sessions.get(admin_id) is not None
            self._sessions[admin_id] = session

        if replaced:
            logger.info(f"Admin session restarted for {admin_id}, previous dialog discarded")
        else:
            logger.info(f"Admin session started for {admin_id}")
        return session

    def get(self, admin_id: int) -> Optional[AdminCodeSession]:
        """Get the active session of an admin."""
        with self._lock:
            return self._sessions.get(admin_id)

    def discard(self, admin_id: int) -> bool:
        """
        Remove the session of an admin.

        Returns:
            True if a session was found and removed
        """
        with self._lock:
            session = self._sessions.pop(admin_id, None)

        if session is None:
            return False
        logger.debug(f"Admin session discarded for {admin_id}")
        return True

    def discard_if(self, admin_id: int, session: AdminCodeSession) -> bool:
        """
        Remove the session of an admin only if it is still ``session``.

        A dialog restarted in the meantime is left in place.

        Returns:
            True if ``session`` was current and has been removed
        """
        with self._lock:
            if self._sessions.get(admin_id) is not session:
                return False
            del self._sessions[admin_id]

        logger.debug(f"Admin session discarded for {admin_id}")
        return True

    def get_all_sessions(self) -> List[AdminCodeSession]:
        """Get all active sessions."""
        with self._lock:
            return list(self._sessions.values())

    def __contains__(self, admin_id: object) -> bool:
        with self._lock:
            return admin_id in self._sessions

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)
