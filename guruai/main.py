from fastapi import Depends, FastAPI, Header, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import uvicorn
from pydantic import ValidationError
from typing import Optional
import logging

from . import config
from .errors import GuruError, UserInputInvalid
from .gemini_client import GeminiProvider
from .models import (
    AnswerRequest,
    CameraCaptureRequest,
    CameraStartRequest,
    ChatRequest,
    ChatStateResponse,
    CameraStateResponse,
    DashboardResponse,
    ImageSolveRequest,
    LoginRequest,
    ProgressResponse,
    QuizGenerationRequest,
    QuizStateResponse,
    SessionResponse,
    SubjectRequest,
    UserProfile,
    ViewChangeRequest,
)
from .progress import dashboard_for, progress_report
from .session import SessionStore, StudentSession
from .tutor import SUGGESTIONS, TutorChat

# Configure logging
logging.basicConfig(level=config.LOG_LEVEL)
logger = logging.getLogger(__name__)

logger.info(f"GOOGLE_API_KEY present in env: {bool(config.GEMINI_API_KEY)}")

app = FastAPI(title="GuruAI Backend")

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.on_event("startup")
async def startup_event():
    # Tests install their own store before the app starts
    if getattr(app.state, "store", None) is None:
        app.state.store = SessionStore(GeminiProvider())
        logger.info(f"Session store ready (model {config.GEMINI_MODEL})")


@app.exception_handler(GuruError)
async def guru_error_handler(request: Request, exc: GuruError):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {type(exc).__name__}: {exc}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.user_message, "error": type(exc).__name__},
    )


def get_store(request: Request) -> SessionStore:
    return request.app.state.store


def get_session(
    store: SessionStore = Depends(get_store),
    session_id: Optional[str] = Header(default=None, alias="X-Session-Id"),
) -> StudentSession:
    return store.get(session_id)


def session_state(session: StudentSession) -> SessionResponse:
    return SessionResponse(
        session_id=session.session_id,
        profile=session.profile,
        view=session.view,
        active_subject=session.active_subject,
    )


def chat_state(chat: TutorChat) -> ChatStateResponse:
    return ChatStateResponse(
        subject=chat.subject,
        messages=chat.transcript,
        busy=chat.busy,
        camera_active=chat.camera.active,
        suggestions=SUGGESTIONS if not chat.transcript else [],
    )


@app.get("/")
def home():
    return {"status": "GuruAI Backend Running"}


# Profile gate

@app.post("/auth/login", response_model=SessionResponse)
async def auth_login(request: LoginRequest, store: SessionStore = Depends(get_store)):
    try:
        profile = UserProfile(name=request.name, standard=request.standard, board=request.board)
    except ValidationError as e:
        raise UserInputInvalid("Please enter your name.") from e
    return session_state(store.login(profile))


@app.post("/auth/logout")
async def auth_logout(
    store: SessionStore = Depends(get_store),
    session_id: Optional[str] = Header(default=None, alias="X-Session-Id"),
):
    store.logout(session_id)
    return {"status": "success", "message": "Logged out"}


@app.get("/session", response_model=SessionResponse)
async def get_session_state(session: StudentSession = Depends(get_session)):
    return session_state(session)


# View router

@app.post("/view", response_model=SessionResponse)
async def change_view(request: ViewChangeRequest, session: StudentSession = Depends(get_session)):
    session.navigate(request.view)
    return session_state(session)


@app.get("/dashboard", response_model=DashboardResponse)
async def dashboard(session: StudentSession = Depends(get_session)):
    return dashboard_for(session.profile)


@app.post("/dashboard/subject", response_model=SessionResponse)
async def select_subject(request: SubjectRequest, session: StudentSession = Depends(get_session)):
    session.select_subject(request.subject)
    return session_state(session)


# Tutor chat

@app.get("/chat", response_model=ChatStateResponse)
async def get_chat(session: StudentSession = Depends(get_session)):
    return chat_state(session.chat())


@app.post("/chat", response_model=ChatStateResponse)
async def chat(request: ChatRequest, session: StudentSession = Depends(get_session)):
    tutor = session.chat()
    await tutor.send(request.message)
    return chat_state(tutor)


@app.post("/chat/subject", response_model=ChatStateResponse)
async def chat_subject(request: SubjectRequest, session: StudentSession = Depends(get_session)):
    tutor = session.chat()
    tutor.set_subject(request.subject)
    return chat_state(tutor)


@app.post("/chat/image", response_model=ChatStateResponse)
async def chat_image(request: ImageSolveRequest, session: StudentSession = Depends(get_session)):
    tutor = session.chat()
    await tutor.solve_uploaded_image(request.image_base64, request.prompt)
    return chat_state(tutor)


@app.post("/chat/camera/start", response_model=CameraStateResponse)
async def camera_start(request: CameraStartRequest, session: StudentSession = Depends(get_session)):
    tutor = session.chat()
    tutor.start_camera(permission_granted=request.permission_granted)
    return CameraStateResponse(camera_active=tutor.camera.active, facing_mode=tutor.camera.facing_mode)


@app.post("/chat/camera/capture", response_model=ChatStateResponse)
async def camera_capture(request: CameraCaptureRequest, session: StudentSession = Depends(get_session)):
    tutor = session.chat()
    await tutor.capture_camera(request.frame_base64, request.prompt)
    return chat_state(tutor)


@app.post("/chat/camera/cancel", response_model=CameraStateResponse)
async def camera_cancel(session: StudentSession = Depends(get_session)):
    tutor = session.chat()
    tutor.cancel_camera()
    return CameraStateResponse(camera_active=tutor.camera.active)


# Quiz

@app.get("/quiz", response_model=QuizStateResponse)
async def get_quiz(session: StudentSession = Depends(get_session)):
    return session.quiz().state()


@app.post("/quiz/generate", response_model=QuizStateResponse)
async def quiz_generate(request: QuizGenerationRequest, session: StudentSession = Depends(get_session)):
    quiz = session.quiz()
    await quiz.start(request.topic, request.subject)
    return quiz.state()


@app.post("/quiz/retake", response_model=QuizStateResponse)
async def quiz_retake(session: StudentSession = Depends(get_session)):
    quiz = session.quiz()
    await quiz.retake()
    return quiz.state()


@app.post("/quiz/answer", response_model=QuizStateResponse)
async def quiz_answer(request: AnswerRequest, session: StudentSession = Depends(get_session)):
    quiz = session.quiz()
    quiz.answer(request.option)
    return quiz.state()


@app.post("/quiz/continue", response_model=QuizStateResponse)
async def quiz_continue(session: StudentSession = Depends(get_session)):
    quiz = session.quiz()
    quiz.advance()
    return quiz.state()


@app.post("/quiz/reset", response_model=QuizStateResponse)
async def quiz_reset(session: StudentSession = Depends(get_session)):
    quiz = session.quiz()
    quiz.clear()
    return quiz.state()


# Progress

@app.get("/progress", response_model=ProgressResponse)
async def progress(session: StudentSession = Depends(get_session)):
    return progress_report()


if __name__ == "__main__":
    uvicorn.run("guruai.main:app", host=config.HOST, port=config.PORT, reload=True)
