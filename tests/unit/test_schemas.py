"""Unit tests for request/response schemas."""

import uuid
from datetime import datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from study_portal.models.enums import DocumentType, UserRole
from study_portal.schemas.academic import ClassCreate, EnrollmentRequest
from study_portal.schemas.assessment import AssignmentCreate, GradeCreate, GradeResponse
from study_portal.schemas.auth import RegisterRequest
from study_portal.schemas.document import DocumentResponse, FeedbackCreate
from study_portal.schemas.responses import PaginationMeta
from study_portal.schemas.user import PreferencesUpdate


def test_register_defaults_to_student():
    req = RegisterRequest(email="a@example.com", password="secret1", name="Alice")
    assert req.role == UserRole.STUDENT


def test_register_rejects_short_password():
    with pytest.raises(ValidationError):
        RegisterRequest(email="a@example.com", password="123", name="Alice")


def test_camel_case_input_accepted():
    subject_id = uuid.uuid4()
    data = ClassCreate.model_validate({
        "name": "Section A",
        "semester": "Fall",
        "year": 2025,
        "subjectId": str(subject_id),
    })
    assert data.subject_id == subject_id


def test_class_year_bounds():
    with pytest.raises(ValidationError):
        ClassCreate(name="A", semester="Fall", year=1999, subject_id=uuid.uuid4())


def test_enrollment_request_needs_valid_emails():
    with pytest.raises(ValidationError):
        EnrollmentRequest(student_emails=["not-an-email"])
    with pytest.raises(ValidationError):
        EnrollmentRequest(student_emails=[])


def test_assignment_due_date_normalized_to_naive_utc():
    due = datetime(2030, 1, 1, 12, 0, tzinfo=timezone(timedelta(hours=2)))
    data = AssignmentCreate(
        title="HW1",
        due_date=due,
        subject_id=uuid.uuid4(),
        class_id=uuid.uuid4(),
    )
    assert data.due_date == datetime(2030, 1, 1, 10, 0)
    assert data.max_points == 100


@pytest.mark.parametrize("rating", [0, 6])
def test_feedback_rating_range(rating):
    with pytest.raises(ValidationError):
        FeedbackCreate(rating=rating)


def test_grade_rejects_negative_points():
    with pytest.raises(ValidationError):
        GradeCreate(points=-1)


def test_grade_response_computes_percentage():
    grade = GradeResponse(
        id=uuid.uuid4(),
        submission_id=uuid.uuid4(),
        student_id=uuid.uuid4(),
        teacher_id=uuid.uuid4(),
        points=85,
        max_points=100,
        graded_at=datetime(2025, 1, 1),
    )
    assert grade.percentage == 85.0
    assert grade.model_dump(by_alias=True)["maxPoints"] == 100


def test_document_file_size_serialized_as_string():
    now = datetime(2025, 1, 1)
    doc = DocumentResponse(
        id=uuid.uuid4(),
        title="Notes",
        file_name="notes.pdf",
        file_path="documents/x/notes.pdf",
        file_size=5_000_000_000,
        mime_type="application/pdf",
        type=DocumentType.NOTES,
        subject_id=uuid.uuid4(),
        uploader_id=uuid.uuid4(),
        is_shared=False,
        allow_peer_feedback=True,
        download_count=0,
        average_rating=0.0,
        total_ratings=0,
        created_at=now,
        updated_at=now,
        tags=None,
    )
    dumped = doc.model_dump(by_alias=True)
    assert dumped["fileSize"] == "5000000000"
    assert dumped["tags"] == []


def test_preferences_update_validates_theme():
    assert PreferencesUpdate(theme="dark").theme == "dark"
    with pytest.raises(ValidationError):
        PreferencesUpdate(theme="purple")


@pytest.mark.parametrize(
    "total,expected_pages",
    [(0, 0), (1, 1), (20, 1), (21, 2)],
)
def test_pagination_meta_pages(total, expected_pages):
    meta = PaginationMeta.build(page=1, page_size=20, total=total)
    assert meta.total_pages == expected_pages
