"""In-memory student sessions: profile gate, view routing and view controllers.

Like the transcript it owns, nothing here survives a restart.
"""
from __future__ import annotations

import logging
import time
import uuid
from typing import Callable, Dict, Optional

from . import config
from .errors import SessionNotFound, ViewNotActive
from .models import Subject, UserProfile, View
from .quiz import QuizController
from .tutor import TutorChat

logger = logging.getLogger(__name__)


class StudentSession:
    def __init__(self, session_id: str, profile: UserProfile, provider) -> None:
        self.session_id = session_id
        self.profile = profile
        self.provider = provider
        self.view = View.DASHBOARD
        self.active_subject = Subject.MATHEMATICS
        self.last_seen = 0.0
        self._chat: Optional[TutorChat] = None
        self._quiz: Optional[QuizController] = None

    def navigate(self, view: View) -> None:
        view = View(view)
        if view is self.view:
            return
        self._teardown(self.view)
        logger.info(f"Session {self.session_id[:8]}: {self.view.value} -> {view.value}")
        self.view = view

    def select_subject(self, subject: Subject) -> None:
        self.active_subject = Subject(subject)
        if self._chat is not None:
            self._chat.set_subject(self.active_subject)
        self.navigate(View.TUTOR)

    def chat(self) -> TutorChat:
        if self.view is not View.TUTOR:
            raise ViewNotActive("tutor view is not open")
        if self._chat is None:
            self._chat = TutorChat(self.provider, self.profile, self.active_subject)
        return self._chat

    def quiz(self) -> QuizController:
        if self.view is not View.QUIZ:
            raise ViewNotActive("quiz view is not open")
        if self._quiz is None:
            self._quiz = QuizController(self.provider, self.profile)
        return self._quiz

    def _teardown(self, view: View) -> None:
        if view is View.TUTOR and self._chat is not None:
            self._chat.close()
            self._chat = None
        elif view is View.QUIZ and self._quiz is not None:
            self._quiz.close()
            self._quiz = None

    def close(self) -> None:
        self._teardown(View.TUTOR)
        self._teardown(View.QUIZ)


class SessionStore:
    def __init__(self, provider, ttl_s: Optional[float] = None, clock: Callable[[], float] = time.monotonic) -> None:
        self.provider = provider
        self.ttl_s = config.SESSION_TTL_S if ttl_s is None else ttl_s
        self._clock = clock
        self._sessions: Dict[str, StudentSession] = {}

    def login(self, profile: UserProfile) -> StudentSession:
        self._expire()
        session_id = str(uuid.uuid4())
        session = StudentSession(session_id, profile, self.provider)
        session.last_seen = self._clock()
        self._sessions[session_id] = session
        logger.info(f"Student '{profile.name}' logged in ({profile.standard.value}, {profile.board.value})")
        return session

    def get(self, session_id: Optional[str]) -> StudentSession:
        self._expire()
        session = self._sessions.get(session_id or "")
        if session is None:
            raise SessionNotFound("unknown session")
        session.last_seen = self._clock()
        return session

    def logout(self, session_id: Optional[str]) -> None:
        session = self._sessions.pop(session_id or "", None)
        if session is None:
            raise SessionNotFound("unknown session")
        session.close()

    def _expire(self) -> None:
        cutoff = self._clock() - self.ttl_s
        stale = [sid for sid, s in self._sessions.items() if s.last_seen < cutoff]
        for session_id in stale:
            self._sessions.pop(session_id).close()
        if stale:
            logger.info(f"Expired {len(stale)} idle session(s)")

    def __len__(self) -> int:
        return len(self._sessions)
