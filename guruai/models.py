from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import List, Optional
from datetime import datetime
from enum import Enum


class Standard(str, Enum):
    EIGHTH = "8th"
    NINTH = "9th"
    TENTH = "10th"


class Board(str, Enum):
    CBSE = "CBSE"
    ICSE = "ICSE"
    STATE_BOARD = "State Board"


class Subject(str, Enum):
    MATHEMATICS = "Mathematics"
    SCIENCE = "Science"
    SOCIAL_SCIENCE = "Social Science"
    ENGLISH = "English"
    HINDI = "Hindi"


class View(str, Enum):
    DASHBOARD = "dashboard"
    TUTOR = "tutor"
    QUIZ = "quiz"
    ANALYTICS = "analytics"


class Role(str, Enum):
    USER = "user"
    ASSISTANT = "assistant"


class UserProfile(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1)
    standard: Standard = Standard.TENTH
    board: Board = Board.CBSE

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, value):
        return value.strip() if isinstance(value, str) else value


class ChatMessage(BaseModel):
    model_config = ConfigDict(frozen=True)

    role: Role
    content: str
    timestamp: datetime = Field(default_factory=datetime.now)


class QuizQuestion(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    question: str = Field(min_length=1)
    options: List[str] = Field(min_length=4, max_length=4)
    correct_answer: int = Field(alias="correctAnswer", ge=0, le=3)
    explanation: str


class PerformanceData(BaseModel):
    subject: str
    score: float
    full_mark: float = Field(alias="fullMark")
    date: str

    model_config = ConfigDict(populate_by_name=True)


class WeeklyScore(BaseModel):
    day: str
    score: int


class SubjectMastery(BaseModel):
    subject: str
    score: int
    full_mark: int = Field(alias="fullMark")

    model_config = ConfigDict(populate_by_name=True)


class SubjectCard(BaseModel):
    name: Subject
    icon: str
    chapters: int
    completion_percent: int


# Requests

class LoginRequest(BaseModel):
    name: str
    standard: Standard = Standard.TENTH
    board: Board = Board.CBSE


class ViewChangeRequest(BaseModel):
    view: View


class SubjectRequest(BaseModel):
    subject: Subject


class ChatRequest(BaseModel):
    message: str = ""


class ImageSolveRequest(BaseModel):
    image_base64: str
    prompt: Optional[str] = None


class CameraStartRequest(BaseModel):
    permission_granted: bool = True


class CameraCaptureRequest(BaseModel):
    frame_base64: str
    prompt: Optional[str] = None


class QuizGenerationRequest(BaseModel):
    topic: str = ""
    subject: Subject = Subject.MATHEMATICS


class AnswerRequest(BaseModel):
    option: int


# Responses

class SessionResponse(BaseModel):
    session_id: str
    profile: UserProfile
    view: View
    active_subject: Subject


class DashboardResponse(BaseModel):
    greeting: str
    summary: str
    subjects: List[SubjectCard]


class ChatStateResponse(BaseModel):
    subject: Subject
    messages: List[ChatMessage]
    busy: bool
    camera_active: bool
    suggestions: List[str] = []


class CameraStateResponse(BaseModel):
    camera_active: bool
    facing_mode: Optional[str] = None


class QuizStateResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    topic: Optional[str] = None
    subject: Subject
    status: Optional[str] = None
    question_state: Optional[str] = None
    question_index: int = 0
    total: int = 0
    score: int = 0
    question: Optional[QuizQuestion] = None
    selected_option: Optional[int] = None
    is_correct: Optional[bool] = None
    busy: bool = False


class ProgressResponse(BaseModel):
    weekly_scores: List[WeeklyScore]
    subject_mastery: List[SubjectMastery]
    recent: List[PerformanceData]
