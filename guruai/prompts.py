"""Prompt templates for the tutor, quiz and image-solver calls."""
from __future__ import annotations

from .models import Board, Standard, Subject


TUTOR_INSTRUCTION = (
    "You are GuruAI, an expert Indian school teacher specializing in the {subject} curriculum "
    "for {standard} standard students under the {board} board.\n"
    "Explain complex concepts simply, using examples from the Indian context "
    "(Indian names, rupees, and local geography in word problems).\n"
    "Strictly follow the NCERT/standard curriculum for these grades.\n"
    "Break down long answers into bullet points. Use encouraging language.\n"
    "If the student asks something outside their syllabus, briefly explain it but bring them back "
    "to their core curriculum.\n"
    "For Mathematics, provide step-by-step solutions.\n"
    "Always ask if the student understood or if they want to try a practice question."
)


QUIZ_REQUEST = (
    "Generate a {count}-question MCQ quiz for a {standard} student on the topic: \"{topic}\" in {subject}.\n"
    "Each question must have exactly 4 options, the index (0-3) of the correct option, "
    "and a short explanation of the answer.\n"
    "Provide the output in JSON format."
)


QUIZ_RESPONSE_SCHEMA = {
    "type": "ARRAY",
    "items": {
        "type": "OBJECT",
        "properties": {
            "question": {"type": "STRING"},
            "options": {
                "type": "ARRAY",
                "items": {"type": "STRING"},
                "description": "Array of exactly 4 options",
            },
            "correctAnswer": {
                "type": "INTEGER",
                "description": "Index of the correct answer (0-3)",
            },
            "explanation": {"type": "STRING"},
        },
        "required": ["question", "options", "correctAnswer", "explanation"],
    },
}


IMAGE_SYSTEM_INSTRUCTION = (
    "You are a visual aid teacher. Focus on clarity and explaining diagrams if present."
)

IMAGE_REQUEST = "A {standard} student needs help with this. Explain step-by-step: {hint}"


def tutor_system_instruction(standard: Standard, board: Board, subject: Subject) -> str:
    return TUTOR_INSTRUCTION.format(
        subject=Subject(subject).value,
        standard=Standard(standard).value,
        board=Board(board).value,
    )


def quiz_prompt(topic: str, standard: Standard, subject: Subject, count: int = 5) -> str:
    return QUIZ_REQUEST.format(
        count=count,
        standard=Standard(standard).value,
        topic=topic,
        subject=Subject(subject).value,
    )


def image_prompt(standard: Standard, hint: str) -> str:
    return IMAGE_REQUEST.format(standard=Standard(standard).value, hint=hint)
