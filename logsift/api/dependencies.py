"""
Shared state for the API: the single active log session.
"""

from functools import lru_cache
from typing import Optional

from logsift.session import LogSession


class SessionHolder:
    """
    Holds at most one loaded LogSession.

    The schema is frozen after the first load, so a new session can only
    be installed after the current one is closed.
    """

    def __init__(self):
        self.session: Optional[LogSession] = None

    @property
    def is_loaded(self) -> bool:
        return self.session is not None

    def install(self, session: LogSession) -> None:
        self.session = session

    def close(self) -> None:
        if self.session is not None:
            self.session.close()
            self.session = None


@lru_cache()
def get_session_holder() -> SessionHolder:
    """Get the process-wide session holder."""
    return SessionHolder()
