"""Tutor chat: transcript ownership and the per-turn round trip to the model."""
from __future__ import annotations

import asyncio
import logging
from typing import List, Optional, Sequence

from . import config, prompts
from .camera import BrowserCamera, CameraSession, decode_base64_image, to_jpeg
from .errors import GuruError, UserInputInvalid, ViewClosed
from .lifecycle import ViewController
from .models import ChatMessage, Role, Subject, UserProfile
from .solver import CAPTURE_HINT, DEFAULT_HINT, solve_from_image

logger = logging.getLogger(__name__)

FALLBACK_REPLY = "I'm sorry, I couldn't process that."

SUGGESTIONS = [
    "Explain Pythagoras Theorem",
    "Newton's Third Law",
    "The French Revolution summary",
]


def send_turn(
    provider,
    transcript: Sequence[ChatMessage],
    user_text: str,
    profile: UserProfile,
    subject: Subject,
) -> str:
    """Single attempt: prior transcript plus the new turn, returns the reply text."""
    text = (user_text or "").strip()
    if not text:
        raise UserInputInvalid("Message is empty.")
    instruction = prompts.tutor_system_instruction(profile.standard, profile.board, subject)
    return provider.generate_text(list(transcript), text, instruction, config.TUTOR_TEMPERATURE)


class TutorChat(ViewController):
    view_name = "tutor"

    def __init__(self, provider, profile: UserProfile, subject: Subject = Subject.MATHEMATICS) -> None:
        super().__init__()
        self.provider = provider
        self.profile = profile
        self.subject = Subject(subject)
        self.transcript: List[ChatMessage] = []
        self.camera = CameraSession()

    def set_subject(self, subject: Subject) -> None:
        self.subject = Subject(subject)

    async def send(self, user_text: str) -> ChatMessage:
        """Append the user turn and exactly one assistant turn (reply or fallback)."""
        text = (user_text or "").strip()
        if not text:
            raise UserInputInvalid("Message is empty.")
        self._ensure_ready()

        history = list(self.transcript)
        question = ChatMessage(role=Role.USER, content=text)
        self.transcript.append(question)
        try:
            reply = await self._run(send_turn, self.provider, history, text, self.profile, self.subject)
        except ViewClosed:
            raise
        except asyncio.CancelledError:
            # Unanswered turns are dropped whole
            if self.transcript and self.transcript[-1] is question:
                self.transcript.pop()
            raise
        except GuruError as e:
            logger.error(f"Chat error: {e}")
            reply = FALLBACK_REPLY
        except Exception:
            logger.exception("Chat error")
            reply = FALLBACK_REPLY

        message = ChatMessage(role=Role.ASSISTANT, content=reply or FALLBACK_REPLY)
        self.transcript.append(message)
        return message

    async def solve_image(self, image_bytes: bytes, hint_text: Optional[str] = None) -> ChatMessage:
        """Explain a photographed problem; the transcript only changes on success."""
        self._ensure_ready()
        hint = (hint_text or "").strip() or DEFAULT_HINT
        try:
            explanation = await self._run(
                solve_from_image, self.provider, image_bytes, hint, self.profile.standard
            )
        except ViewClosed:
            raise
        except GuruError as e:
            logger.error(f"Image solve error: {e}")
            raise

        self.transcript.append(ChatMessage(role=Role.USER, content=hint))
        message = ChatMessage(role=Role.ASSISTANT, content=explanation)
        self.transcript.append(message)
        return message

    async def solve_uploaded_image(self, image_base64: str, hint_text: Optional[str] = None) -> ChatMessage:
        return await self.solve_image(to_jpeg(decode_base64_image(image_base64)), hint_text)

    def start_camera(self, permission_granted: bool = True) -> None:
        self._ensure_ready()
        self.camera.start(BrowserCamera(permission_granted=permission_granted))

    async def capture_camera(self, frame_base64: str, hint_text: Optional[str] = None) -> ChatMessage:
        self._ensure_ready()
        try:
            jpeg = self.camera.capture(decode_base64_image(frame_base64))
        finally:
            self.camera.stop()
        return await self.solve_image(jpeg, hint_text or CAPTURE_HINT)

    def cancel_camera(self) -> None:
        self.camera.stop()

    def _on_close(self) -> None:
        self.camera.stop()
        self.transcript = []
