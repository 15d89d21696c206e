from __future__ import annotations

import logging

from . import prompts
from .camera import JPEG_MIME
from .errors import UserInputInvalid
from .models import Standard

logger = logging.getLogger(__name__)

DEFAULT_HINT = "What is in this image?"
CAPTURE_HINT = "Please explain this problem from the image:"


def solve_from_image(provider, image_bytes: bytes, hint_text: str, standard: Standard) -> str:
    """Ask the multimodal model to explain a photographed problem step by step."""
    if not image_bytes:
        raise UserInputInvalid("No image to solve.")
    hint = (hint_text or "").strip() or DEFAULT_HINT
    logger.info(f"Solving image problem ({len(image_bytes)} bytes) for {Standard(standard).value}")
    return provider.generate_multimodal(
        image_bytes,
        JPEG_MIME,
        prompts.image_prompt(standard, hint),
        prompts.IMAGE_SYSTEM_INSTRUCTION,
    )
