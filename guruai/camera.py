"""One-shot camera capture for photographing a textbook problem.

The camera is an exclusive device: a chat view holds at most one open capture
session, and the device is released on capture, cancel, error and teardown.
"""
from __future__ import annotations

import base64
import binascii
import io
import logging
from typing import Optional

from PIL import Image, UnidentifiedImageError

from .errors import CameraBusy, CameraPermissionDenied, ResourceUnavailable, UserInputInvalid

logger = logging.getLogger(__name__)

JPEG_MIME = "image/jpeg"


def decode_base64_image(payload: str) -> bytes:
    """Accept raw base64 or a ``data:image/...;base64,`` URL from a canvas dump."""
    if not payload or not payload.strip():
        raise UserInputInvalid("Image payload is empty.")
    data = payload.strip()
    if data.startswith("data:"):
        data = data.split(",", 1)[-1]
    try:
        raw = base64.b64decode(data, validate=True)
    except (binascii.Error, ValueError) as e:
        raise UserInputInvalid("Image payload is not valid base64.") from e
    if not raw:
        raise UserInputInvalid("Image payload is empty.")
    return raw


def load_image(raw: bytes) -> Image.Image:
    try:
        image = Image.open(io.BytesIO(raw))
        image.load()
    except (UnidentifiedImageError, OSError) as e:
        raise UserInputInvalid("Could not read the image.") from e
    return image


def encode_jpeg(image: Image.Image, quality: int = 90) -> bytes:
    if image.mode != "RGB":
        image = image.convert("RGB")
    buffered = io.BytesIO()
    image.save(buffered, format="JPEG", quality=quality)
    return buffered.getvalue()


def to_jpeg(raw: bytes) -> bytes:
    """Normalise any still image to JPEG bytes, passing real JPEGs through untouched."""
    image = load_image(raw)
    if image.format == "JPEG":
        return raw
    return encode_jpeg(image)


class BrowserCamera:
    """Rear camera stream opened on the student's device.

    The client asks for ``facingMode: environment`` and reports whether the
    permission prompt was granted. Frames arrive as still images rasterised
    from the live video element.
    """

    facing_mode = "environment"

    def __init__(self, permission_granted: bool = True) -> None:
        self.permission_granted = permission_granted
        self.streaming = False

    def acquire(self) -> None:
        if not self.permission_granted:
            raise CameraPermissionDenied("camera permission denied")
        self.streaming = True

    def grab_frame(self, frame: bytes) -> Image.Image:
        if not self.streaming:
            raise ResourceUnavailable("camera stream is not running")
        return load_image(frame)

    def release(self) -> None:
        # Stop the stream's tracks
        self.streaming = False


class CameraSession:
    def __init__(self) -> None:
        self._device: Optional[BrowserCamera] = None

    @property
    def active(self) -> bool:
        return self._device is not None

    @property
    def facing_mode(self) -> Optional[str]:
        return self._device.facing_mode if self._device is not None else None

    def start(self, device: BrowserCamera) -> None:
        if self._device is not None:
            raise CameraBusy("a capture session is already open")
        device.acquire()
        self._device = device
        logger.info("Camera capture session opened")

    def capture(self, frame: bytes) -> bytes:
        """Take one still, encode it as JPEG and close the session."""
        if self._device is None:
            raise ResourceUnavailable("no capture session is open")
        try:
            image = self._device.grab_frame(frame)
            return encode_jpeg(image)
        finally:
            self.stop()

    def stop(self) -> None:
        if self._device is None:
            return
        device, self._device = self._device, None
        device.release()
        logger.info("Camera capture session released")
