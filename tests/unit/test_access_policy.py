"""Unit tests for the access policy (pure functions, no DB)."""

import uuid
from types import SimpleNamespace

from study_portal.models.enums import UserRole
from study_portal.policy import access


def _user(role=UserRole.STUDENT):
    return SimpleNamespace(id=uuid.uuid4(), role=role)


def _document(owner, is_shared=False, allow_peer_feedback=True):
    return SimpleNamespace(uploader_id=owner.id, is_shared=is_shared, allow_peer_feedback=allow_peer_feedback)


def test_private_document_hidden_from_other_student():
    owner, other = _user(), _user()
    doc = _document(owner)
    assert access.can_read_document(owner, doc)
    assert not access.can_read_document(other, doc)


def test_private_document_visible_to_any_teacher():
    doc = _document(_user())
    assert access.can_read_document(_user(UserRole.TEACHER), doc)


def test_shared_document_visible_to_everyone():
    doc = _document(_user(), is_shared=True)
    assert access.can_read_document(_user(), doc)


def test_write_is_owner_or_teacher_but_versions_owner_only():
    owner, teacher, other = _user(), _user(UserRole.TEACHER), _user()
    doc = _document(owner, is_shared=True)
    assert access.can_write_document(owner, doc)
    assert access.can_write_document(teacher, doc)
    assert not access.can_write_document(other, doc)
    assert access.can_add_version(owner, doc)
    assert not access.can_add_version(teacher, doc)


def test_peer_feedback_switch_only_binds_students():
    doc = _document(_user(), is_shared=True, allow_peer_feedback=False)
    assert not access.peer_feedback_allowed(_user(), doc)
    assert access.peer_feedback_allowed(_user(UserRole.TEACHER), doc)


def test_self_feedback_reserved_for_teachers():
    student_owner = _user()
    teacher_owner = _user(UserRole.TEACHER)
    assert not access.self_feedback_allowed(student_owner, _document(student_owner))
    assert access.self_feedback_allowed(teacher_owner, _document(teacher_owner))


def test_class_read_and_manage():
    teacher, other_teacher, student = _user(UserRole.TEACHER), _user(UserRole.TEACHER), _user()
    class_ = SimpleNamespace(teacher_id=teacher.id)
    assert access.can_read_class(teacher, class_, False)
    assert access.can_read_class(student, class_, True)
    assert not access.can_read_class(student, class_, False)
    assert not access.can_read_class(other_teacher, class_, False)
    assert access.can_manage_class(teacher, class_)
    assert not access.can_manage_class(other_teacher, class_)


def test_enrollment_flag_does_not_open_assignment_to_other_teacher():
    teacher, other_teacher = _user(UserRole.TEACHER), _user(UserRole.TEACHER)
    assignment = SimpleNamespace(teacher_id=teacher.id)
    assert access.can_read_assignment(teacher, assignment, False)
    assert not access.can_read_assignment(other_teacher, assignment, True)


def test_submit_requires_enrolled_student():
    assert access.can_submit(_user(), True)
    assert not access.can_submit(_user(), False)
    assert not access.can_submit(_user(UserRole.TEACHER), True)


def test_submission_read_and_grade():
    teacher, student, other = _user(UserRole.TEACHER), _user(), _user()
    submission = SimpleNamespace(student_id=student.id)
    assignment = SimpleNamespace(teacher_id=teacher.id)
    assert access.can_read_submission(student, submission, teacher.id)
    assert access.can_read_submission(teacher, submission, teacher.id)
    assert not access.can_read_submission(other, submission, teacher.id)
    assert access.can_grade(teacher, assignment)
    assert not access.can_grade(_user(UserRole.TEACHER), assignment)


def test_owns():
    user = _user()
    assert access.owns(user, user.id)
    assert not access.owns(user, uuid.uuid4())
