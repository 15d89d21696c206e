import os

from dotenv import load_dotenv

load_dotenv()

GEMINI_API_KEY = os.environ.get("GOOGLE_API_KEY") or os.environ.get("GEMINI_API_KEY")
GEMINI_MODEL = os.environ.get("GEMINI_MODEL", "gemini-3-flash-preview")
REQUEST_TIMEOUT_S = float(os.environ.get("GURU_REQUEST_TIMEOUT", "60"))
SESSION_TTL_S = float(os.environ.get("GURU_SESSION_TTL", "3600"))

# Fixed by the tutoring persona, not an operator knob
TUTOR_TEMPERATURE = 0.7

ALLOWED_ORIGINS = [o.strip() for o in os.environ.get("GURU_ALLOWED_ORIGINS", "*").split(",") if o.strip()]
LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()

HOST = os.environ.get("GURU_HOST", "0.0.0.0")
PORT = int(os.environ.get("GURU_PORT", "8000"))
