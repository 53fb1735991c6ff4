"""
Access Policy

Pure decision functions of (actor, resource snapshot) -> bool. No I/O:
callers load whatever the rule needs (enrollment, owning teacher) and
pass it in. Services translate a False into ForbiddenError.
"""

from typing import Optional

from study_portal.models.enums import UserRole
from study_portal.models.user import User
from study_portal.models.academic import Class
from study_portal.models.document import Document
from study_portal.models.assessment import Assignment, Submission


def is_teacher(actor: User) -> bool:
    return actor.role == UserRole.TEACHER


def is_student(actor: User) -> bool:
    return actor.role == UserRole.STUDENT


# Documents

def can_read_document(actor: User, document: Document) -> bool:
    """Owner, anyone for shared documents, or any teacher."""
    return (
        document.uploader_id == actor.id
        or bool(document.is_shared)
        or is_teacher(actor)
    )


def can_write_document(actor: User, document: Document) -> bool:
    """Update and delete: owner or any teacher."""
    return document.uploader_id == actor.id or is_teacher(actor)


def can_add_version(actor: User, document: Document) -> bool:
    """Only the uploader may add new file versions."""
    return document.uploader_id == actor.id


# Feedback

def peer_feedback_allowed(actor: User, document: Document) -> bool:
    """Students leave PEER feedback, which the uploader can switch off."""
    return is_teacher(actor) or bool(document.allow_peer_feedback)


def self_feedback_allowed(actor: User, document: Document) -> bool:
    """Rating your own document is reserved for teachers."""
    return document.uploader_id != actor.id or is_teacher(actor)


# Classes & enrollments

def can_read_class(actor: User, class_: Class, is_enrolled: bool) -> bool:
    return class_.teacher_id == actor.id or (is_student(actor) and is_enrolled)


def can_manage_class(actor: User, class_: Class) -> bool:
    """Update, delete and enroll students: owning teacher only."""
    return is_teacher(actor) and class_.teacher_id == actor.id


# Assignments

def can_read_assignment(actor: User, assignment: Assignment, is_enrolled: bool) -> bool:
    """Owning teacher, or a student enrolled in the assignment's class."""
    return assignment.teacher_id == actor.id or (is_student(actor) and is_enrolled)


def can_manage_assignment(actor: User, assignment: Assignment) -> bool:
    return is_teacher(actor) and assignment.teacher_id == actor.id


# Submissions & grades

def can_submit(actor: User, is_enrolled: bool) -> bool:
    """Deadline is checked separately so it can report its own error."""
    return is_student(actor) and is_enrolled


def can_read_submission(actor: User, submission: Submission, assignment_teacher_id: Optional[object]) -> bool:
    return submission.student_id == actor.id or (
        is_teacher(actor) and assignment_teacher_id == actor.id
    )


def can_grade(actor: User, assignment: Assignment) -> bool:
    return is_teacher(actor) and assignment.teacher_id == actor.id


# Personal resources (decks, notes)

def owns(actor: User, owner_id: object) -> bool:
    return owner_id == actor.id
