"""Thin wrapper over google-generativeai for the three calls the app makes.

Every SDK failure leaves this module as a ``GuruError`` subclass so the
orchestrators only ever handle the app's own taxonomy.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Sequence

import google.generativeai as genai
from google.api_core import exceptions as google_exceptions

from . import config
from .errors import (
    AuthenticationError,
    GuruError,
    MalformedResponse,
    NetworkFailure,
    ProviderError,
    QuotaExceeded,
)
from .models import ChatMessage, Role

logger = logging.getLogger(__name__)

_PROVIDER_ROLES = {Role.USER: "user", Role.ASSISTANT: "model"}


def to_provider_turns(history: Sequence[ChatMessage], prompt: str) -> List[Dict[str, Any]]:
    """Role-tag the transcript the way the Gemini contents API expects it."""
    turns = [{"role": _PROVIDER_ROLES[m.role], "parts": [{"text": m.content}]} for m in history]
    turns.append({"role": "user", "parts": [{"text": prompt}]})
    return turns


def classify_provider_error(exc: BaseException) -> GuruError:
    if isinstance(exc, GuruError):
        return exc
    if isinstance(exc, (google_exceptions.Unauthenticated, google_exceptions.PermissionDenied)):
        return AuthenticationError(str(exc))
    if isinstance(exc, google_exceptions.ResourceExhausted):
        return QuotaExceeded(str(exc))
    if isinstance(exc, google_exceptions.InvalidArgument) and "API key" in str(exc):
        return AuthenticationError(str(exc))
    if isinstance(
        exc,
        (
            google_exceptions.ServiceUnavailable,
            google_exceptions.DeadlineExceeded,
            google_exceptions.RetryError,
            OSError,
        ),
    ):
        return NetworkFailure(str(exc))
    error_msg = str(exc)
    if "429" in error_msg or "Quota" in error_msg:
        return QuotaExceeded(error_msg)
    return ProviderError(error_msg)


class GeminiProvider:
    def __init__(
        self,
        api_key: Optional[str] = None,
        model_name: Optional[str] = None,
        timeout_s: Optional[float] = None,
    ) -> None:
        self.api_key = api_key if api_key is not None else config.GEMINI_API_KEY
        self.model_name = model_name or config.GEMINI_MODEL
        self.timeout_s = timeout_s if timeout_s is not None else config.REQUEST_TIMEOUT_S
        self._configured = False
        logger.info(f"Gemini provider for {self.model_name}, key present: {bool(self.api_key)}")

    def _ensure_configured(self) -> None:
        if not self.api_key:
            raise AuthenticationError("GOOGLE_API_KEY not set.")
        if not self._configured:
            genai.configure(api_key=self.api_key)
            self._configured = True

    def _model(self, system_instruction: Optional[str] = None, generation_config=None):
        return genai.GenerativeModel(
            self.model_name,
            system_instruction=system_instruction,
            generation_config=generation_config,
        )

    def _generate(self, label: str, model, contents) -> str:
        try:
            response = model.generate_content(contents, request_options={"timeout": self.timeout_s})
        except Exception as e:
            error = classify_provider_error(e)
            logger.error(f"Gemini {label} call failed ({type(error).__name__}): {e}")
            raise error from e

        try:
            text = response.text
        except ValueError as e:
            # Raised by the SDK when the candidate was blocked or carries no parts
            logger.error(f"Gemini {label} returned no usable text: {e}")
            raise MalformedResponse(f"{label}: no text in response") from e
        if not text or not text.strip():
            raise MalformedResponse(f"{label}: empty response")
        return text

    def generate_text(
        self,
        history: Sequence[ChatMessage],
        prompt: str,
        system_instruction: str,
        temperature: float,
    ) -> str:
        self._ensure_configured()
        model = self._model(
            system_instruction=system_instruction,
            generation_config=genai.types.GenerationConfig(temperature=temperature),
        )
        return self._generate("text", model, to_provider_turns(history, prompt))

    def generate_structured(self, prompt: str, response_schema: Dict[str, Any]) -> str:
        self._ensure_configured()
        model = self._model(
            generation_config=genai.types.GenerationConfig(
                response_mime_type="application/json",
                response_schema=response_schema,
            ),
        )
        return self._generate("structured", model, prompt)

    def generate_multimodal(
        self,
        image_bytes: bytes,
        mime_type: str,
        prompt: str,
        system_instruction: str,
    ) -> str:
        self._ensure_configured()
        model = self._model(system_instruction=system_instruction)
        contents = [{"mime_type": mime_type, "data": image_bytes}, prompt]
        return self._generate("multimodal", model, contents)
