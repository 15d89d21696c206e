"""Sample figures for the dashboard and progress screens.

Nothing here is computed from real activity; the numbers are fixed demo data.
"""
from __future__ import annotations

from .models import (
    DashboardResponse,
    PerformanceData,
    ProgressResponse,
    Subject,
    SubjectCard,
    SubjectMastery,
    UserProfile,
    WeeklyScore,
)

SYLLABUS_COMPLETION = 15

SUBJECT_CARDS = [
    (Subject.MATHEMATICS, "📐", 15),
    (Subject.SCIENCE, "🧪", 18),
    (Subject.SOCIAL_SCIENCE, "🌍", 22),
    (Subject.ENGLISH, "📖", 12),
    (Subject.HINDI, "✍️", 10),
]

WEEKLY_SCORES = [
    ("Mon", 65),
    ("Tue", 72),
    ("Wed", 85),
    ("Thu", 78),
    ("Fri", 90),
    ("Sat", 95),
    ("Sun", 88),
]

MASTERY_FULL_MARK = 150

SUBJECT_MASTERY = [
    ("Maths", 120),
    ("Science", 98),
    ("Social", 86),
    ("English", 99),
    ("Hindi", 85),
]

RECENT_RESULTS = [
    ("Mathematics", 4, 5, "2025-01-13"),
    ("Science", 3, 5, "2025-01-15"),
    ("Social Science", 5, 5, "2025-01-17"),
]


def dashboard_for(profile: UserProfile) -> DashboardResponse:
    return DashboardResponse(
        greeting=f"Namaste, {profile.name}! 🙏",
        summary=(
            f"You're studying for {profile.standard.value} ({profile.board.value}). "
            "Ready to learn something new today?"
        ),
        subjects=[
            SubjectCard(name=name, icon=icon, chapters=chapters, completion_percent=SYLLABUS_COMPLETION)
            for name, icon, chapters in SUBJECT_CARDS
        ],
    )


def progress_report() -> ProgressResponse:
    return ProgressResponse(
        weekly_scores=[WeeklyScore(day=day, score=score) for day, score in WEEKLY_SCORES],
        subject_mastery=[
            SubjectMastery(subject=subject, score=score, full_mark=MASTERY_FULL_MARK)
            for subject, score in SUBJECT_MASTERY
        ],
        recent=[
            PerformanceData(subject=subject, score=score, full_mark=full, date=date)
            for subject, score, full, date in RECENT_RESULTS
        ],
    )
