"""Models Package - Export all models for easy imports"""

from study_portal.models.base import BaseModel, StatusMixin
from study_portal.models.enums import (
    UserRole,
    DocumentType,
    FeedbackType,
    SubmissionStatus,
    Difficulty,
    ActivityAction,
    MaterialType,
)
from study_portal.models.user import User, UserPreferences
from study_portal.models.academic import Subject, Class, ClassEnrollment
from study_portal.models.document import Document, DocumentVersion, Feedback, Tag, document_tags
from study_portal.models.assessment import Assignment, Submission, Grade, assignment_documents
from study_portal.models.activity import ActivityLog
from study_portal.models.study import FlashcardDeck, Flashcard, DeckStats, Note, StudyMaterial


__all__ = [
    # Base classes
    "BaseModel",
    "StatusMixin",

    # Enums
    "UserRole",
    "DocumentType",
    "FeedbackType",
    "SubmissionStatus",
    "Difficulty",
    "ActivityAction",
    "MaterialType",

    # User
    "User",
    "UserPreferences",

    # Academic
    "Subject",
    "Class",
    "ClassEnrollment",

    # Documents
    "Document",
    "DocumentVersion",
    "Feedback",
    "Tag",
    "document_tags",

    # Assessment
    "Assignment",
    "Submission",
    "Grade",
    "assignment_documents",

    # Activity
    "ActivityLog",

    # Study tools
    "FlashcardDeck",
    "Flashcard",
    "DeckStats",
    "Note",
    "StudyMaterial",
]
