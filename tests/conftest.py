import base64
import io
import json
import threading

import pytest
from PIL import Image

from guruai.models import Board, Standard, UserProfile


def make_questions(count=5):
    return [
        {
            "question": f"Question {i + 1} about photosynthesis?",
            "options": ["Chlorophyll", "Glucose", "Oxygen", "Sunlight"],
            "correctAnswer": i % 4,
            "explanation": f"Explanation {i + 1}.",
        }
        for i in range(count)
    ]


def image_base64(fmt="PNG"):
    buf = io.BytesIO()
    Image.new("RGB", (8, 8), "white").save(buf, format=fmt)
    return base64.b64encode(buf.getvalue()).decode("ascii")


class FakeProvider:
    """Stands in for GeminiProvider and records every call."""

    def __init__(self):
        self.text_reply = "Namaste! Photosynthesis is how plants make food."
        self.structured_reply = json.dumps(make_questions())
        self.image_reply = "Step 1: read the diagram."
        self.error = None
        self.calls = []
        self.started = threading.Event()
        self.release = None

    def _respond(self, reply):
        self.started.set()
        if self.release is not None:
            self.release.wait(timeout=5)
        if self.error is not None:
            raise self.error
        return reply

    def generate_text(self, history, prompt, system_instruction, temperature):
        self.calls.append(("text", list(history), prompt, system_instruction, temperature))
        return self._respond(self.text_reply)

    def generate_structured(self, prompt, response_schema):
        self.calls.append(("structured", prompt, response_schema))
        return self._respond(self.structured_reply)

    def generate_multimodal(self, image_bytes, mime_type, prompt, system_instruction):
        self.calls.append(("multimodal", image_bytes, mime_type, prompt, system_instruction))
        return self._respond(self.image_reply)


@pytest.fixture
def provider():
    return FakeProvider()


@pytest.fixture
def profile():
    return UserProfile(name="Aarav", standard=Standard.NINTH, board=Board.CBSE)
