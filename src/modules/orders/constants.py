"""Order domain constants.

Defines the order attribute enumerations, the lifecycle statuses and the
capability-keyed transition table that drives the order state machine.
"""

from django.db import models

from modules.core.actors import Capability


class OrderStatus(models.TextChoices):
    PENDING = "pending", "Pending"
    IN_PROGRESS = "in_progress", "In progress"
    REVIEW = "review", "Review"
    COMPLETED = "completed", "Completed"
    CANCELLED = "cancelled", "Cancelled"


class EducationLevel(models.TextChoices):
    HIGH_SCHOOL = "high_school", "High School"
    UNDERGRADUATE = "undergraduate", "Undergraduate"
    GRADUATE = "graduate", "Graduate"
    PHD = "phd", "PhD"


class TaskType(models.TextChoices):
    QUIZ = "quiz", "Quiz"
    ESSAY = "essay", "Essay"
    RESEARCH_PAPER = "research_paper", "Research Paper"
    TECHNICAL_WRITING = "technical_writing", "Technical Writing"
    EDITING = "editing", "Editing"
    PROOFREADING = "proofreading", "Proofreading"
    RESEARCH_ASSISTANCE = "research_assistance", "Research Assistance"
    TUTORING = "tutoring", "Tutoring"
    FORMATTING = "formatting", "Formatting"
    STUDY_SUPPORT = "study_support", "Study Support"
    THESIS = "thesis", "Thesis"
    DISSERTATION = "dissertation", "Dissertation"
    CASE_STUDY = "case_study", "Case Study"
    REPORT = "report", "Report"
    PRESENTATION = "presentation", "Presentation"


class Urgency(models.TextChoices):
    STANDARD = "standard", "Standard"
    RUSH = "rush", "Rush"
    URGENT = "urgent", "Urgent"


class ComplexityLevel(models.TextChoices):
    BASIC = "basic", "Basic"
    STANDARD = "standard", "Standard"
    ADVANCED = "advanced", "Advanced"
    EXPERT = "expert", "Expert"


class CitationStyle(models.TextChoices):
    APA = "apa", "APA"
    MLA = "mla", "MLA"
    CHICAGO = "chicago", "Chicago"
    HARVARD = "harvard", "Harvard"
    IEEE = "ieee", "IEEE"
    OTHER = "other", "Other"
    NONE = "none", "None"


TERMINAL_STATES: set[str] = {OrderStatus.COMPLETED, OrderStatus.CANCELLED}

NON_TERMINAL_STATES: set[str] = set(OrderStatus.values) - TERMINAL_STATES

# Forward progression (administrator only).
FORWARD_FLOW: dict[str, str] = {
    OrderStatus.PENDING: OrderStatus.IN_PROGRESS,
    OrderStatus.IN_PROGRESS: OrderStatus.REVIEW,
    OrderStatus.REVIEW: OrderStatus.COMPLETED,
}

# Capability -> current status -> statuses it may move to.
# Terminal states have no outgoing transitions for anyone.
VALID_TRANSITIONS: dict[str, dict[str, set[str]]] = {
    Capability.OWNER: {
        **{status: {OrderStatus.CANCELLED} for status in NON_TERMINAL_STATES},
        **{status: set() for status in TERMINAL_STATES},
    },
    Capability.ADMINISTRATOR: {
        **{
            status: set(OrderStatus.values) - {status}
            for status in NON_TERMINAL_STATES
        },
        **{status: set() for status in TERMINAL_STATES},
    },
}

# Fields each capability may change through a generic order update.
UPDATABLE_FIELDS: dict[str, frozenset[str]] = {
    Capability.OWNER: frozenset({"status", "status_note", "additional_instructions"}),
    Capability.ADMINISTRATOR: frozenset(
        {"status", "status_note", "admin_notes", "progress"}
    ),
}

# Urgency is derived from hours left until the deadline.
URGENT_WITHIN_HOURS = 24
RUSH_WITHIN_HOURS = 72

ORDER_NUMBER_PREFIX = "ORD"
ORDER_NUMBER_MAX_ATTEMPTS = 3
ORDER_NUMBER_SPACE = 1_000_000

PAGE_COUNT_MIN = 1
PAGE_COUNT_MAX = 200
PROGRESS_MIN = 0
PROGRESS_MAX = 100
RATING_MIN = 1
RATING_MAX = 5

SUBJECT_MAX_LENGTH = 100
TITLE_MAX_LENGTH = 200
DESCRIPTION_MAX_LENGTH = 5000
INSTRUCTIONS_MAX_LENGTH = 2000
ADMIN_NOTES_MAX_LENGTH = 2000
REVIEW_MAX_LENGTH = 1000
STATUS_NOTE_MAX_LENGTH = 500
