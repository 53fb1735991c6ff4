"""Centralized Enum Definitions"""

import enum


class UserRole(str, enum.Enum):
    """User roles for access decisions"""
    STUDENT = "STUDENT"
    TEACHER = "TEACHER"


class DocumentType(str, enum.Enum):
    """Kinds of uploaded study material"""
    NOTES = "NOTES"
    CODE = "CODE"
    VIDEO = "VIDEO"
    OTHER = "OTHER"


class FeedbackType(str, enum.Enum):
    """Feedback origin, derived from the author's role"""
    PEER = "PEER"
    TEACHER = "TEACHER"


class SubmissionStatus(str, enum.Enum):
    """Submission lifecycle: SUBMITTED -> GRADED"""
    SUBMITTED = "SUBMITTED"
    GRADED = "GRADED"


class Difficulty(str, enum.Enum):
    """Flashcard difficulty"""
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


class ActivityAction(str, enum.Enum):
    """Audit log actions"""
    DOCUMENT_VIEW = "DOCUMENT_VIEW"
    DOCUMENT_UPLOAD = "DOCUMENT_UPLOAD"


class MaterialType(str, enum.Enum):
    """Kind of personal study material"""
    PDF = "pdf"
    DOC = "doc"
    VIDEO = "video"
    AUDIO = "audio"
    IMAGE = "image"
    URL = "url"
    OTHER = "other"
