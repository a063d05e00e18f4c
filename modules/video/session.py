"""Per-chat state of the video flow.

Sessions live in memory only.  The API key a user sends is kept here for as
long as the chat session exists (or until the user asks the bot to forget
it) and is never written anywhere else.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from typing import Dict, Optional

from .artifact import VideoArtifact
from .settings import PHASE_IDLE, PHASE_RUNNING, SAMPLE_PROMPT

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GenerationRequest:
    chat_id: int
    run_id: int
    prompt: str
    api_key: str = field(repr=False)


@dataclass
class VideoSession:
    chat_id: int
    lang: str = ""
    prompt: str = SAMPLE_PROMPT
    api_key: str = field(default="", repr=False)
    awaiting: Optional[str] = None
    phase: str = PHASE_IDLE
    progress: str = ""
    artifact: Optional[VideoArtifact] = None
    error: Optional[str] = None
    run_id: int = 0
    status_message_id: Optional[int] = None
    # Serialises edits of the status message between the worker and /cancel.
    status_lock: threading.Lock = field(default_factory=threading.Lock, repr=False, compare=False)

    @property
    def running(self) -> bool:
        return self.phase == PHASE_RUNNING

    def _release_artifact(self) -> None:
        if self.artifact is not None:
            self.artifact.release()
            self.artifact = None


class SessionStore:
    """Thread-safe registry of :class:`VideoSession` objects keyed by chat."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._sessions: Dict[int, VideoSession] = {}

    def get(self, chat_id: int) -> VideoSession:
        with self._lock:
            session = self._sessions.get(chat_id)
            if session is None:
                session = VideoSession(chat_id=chat_id)
                self._sessions[chat_id] = session
            return session

    def set_lang(self, chat_id: int, lang: str) -> None:
        self.get(chat_id).lang = lang

    def set_awaiting(self, chat_id: int, awaiting: Optional[str]) -> None:
        self.get(chat_id).awaiting = awaiting

    def set_api_key(self, chat_id: int, api_key: str) -> None:
        self.get(chat_id).api_key = (api_key or "").strip()

    def forget_api_key(self, chat_id: int) -> None:
        self.get(chat_id).api_key = ""

    def set_prompt(self, chat_id: int, prompt: str) -> None:
        self.get(chat_id).prompt = (prompt or "").strip()

    def begin(self, chat_id: int) -> Optional[GenerationRequest]:
        """Start a run, or return ``None`` if the chat cannot start one now.

        A chat that is already running, or that lacks a prompt or a key,
        gets ``None``.  Starting a run clears the previous result.
        """

        session = self.get(chat_id)
        with self._lock:
            if session.running:
                return None
            prompt = session.prompt.strip()
            api_key = session.api_key.strip()
            if not prompt or not api_key:
                return None

            session.run_id += 1
            session.phase = PHASE_RUNNING
            session.progress = ""
            session.error = None
            session.awaiting = None
            session._release_artifact()
            request = GenerationRequest(
                chat_id=chat_id,
                run_id=session.run_id,
                prompt=prompt,
                api_key=api_key,
            )

        logger.info("Video run started", extra={"chat_id": chat_id, "run_id": request.run_id})
        return request

    def report_progress(self, request: GenerationRequest, message: str) -> bool:
        session = self.get(request.chat_id)
        with self._lock:
            if not (session.running and session.run_id == request.run_id):
                return False
            session.progress = message
            return True

    def complete(self, request: GenerationRequest, artifact: VideoArtifact) -> bool:
        """Store the result of ``request``; a stale result is released instead."""

        session = self.get(request.chat_id)
        with self._lock:
            if not (session.running and session.run_id == request.run_id):
                artifact.release()
                return False
            session._release_artifact()
            session.artifact = artifact
            session.error = None
            session.phase = PHASE_IDLE
            return True

    def fail(self, request: GenerationRequest, message: str) -> bool:
        session = self.get(request.chat_id)
        with self._lock:
            if not (session.running and session.run_id == request.run_id):
                return False
            session._release_artifact()
            session.error = message
            session.phase = PHASE_IDLE
            return True

    def cancel(self, chat_id: int) -> bool:
        """Detach the running request; its late progress and result are ignored."""

        session = self.get(chat_id)
        with self._lock:
            if not session.running:
                return False
            session.run_id += 1
            session.phase = PHASE_IDLE
            session.progress = ""
            session.status_message_id = None
        logger.info("Video run cancelled", extra={"chat_id": chat_id})
        return True

    def drop(self, chat_id: int) -> None:
        with self._lock:
            session = self._sessions.pop(chat_id, None)
            if session is not None:
                session.run_id += 1
                session._release_artifact()


sessions = SessionStore()
