"""Integration tests: dashboard stats and analytics."""

from datetime import timedelta

import pytest
from httpx import AsyncClient

from study_portal.models import Feedback, FeedbackType, Grade, Submission, SubmissionStatus
from study_portal.utils.time import get_utc_now
from tests.factories import auth_headers, make_assignment, make_class, make_document


@pytest.fixture
async def graded_course(db, teacher, student, other_student, subject):
    """One class, two assignments; the student's HW2 graded 85/100."""
    class_ = await make_class(db, teacher, subject, students=[student, other_student])
    pending = await make_assignment(db, class_, title="HW1")
    graded = await make_assignment(db, class_, due_in=timedelta(days=3), title="HW2")

    submission = Submission(
        assignment_id=graded.id,
        student_id=student.id,
        content="answer",
        status=SubmissionStatus.GRADED,
    )
    db.add(submission)
    await db.commit()
    db.add(Grade(
        submission_id=submission.id,
        student_id=student.id,
        teacher_id=teacher.id,
        points=85,
        max_points=100,
        feedback="Good work",
    ))
    db.add(Submission(assignment_id=graded.id, student_id=other_student.id, content="mine"))
    await db.commit()
    return class_, pending, graded


@pytest.mark.asyncio
async def test_student_dashboard(async_client: AsyncClient, api_base: str, db, student, other_student, subject, graded_course):
    document = await make_document(db, student, subject, is_shared=True)
    db.add(Feedback(
        document_id=document.id,
        author_id=other_student.id,
        rating=4,
        type=FeedbackType.PEER,
    ))
    await db.commit()

    resp = await async_client.get(f"{api_base}/dashboard/stats", headers=auth_headers(student))
    assert resp.status_code == 200, resp.text
    data = resp.json()["data"]
    assert data["role"] == "STUDENT"
    stats = data["stats"]
    assert stats["totalDocuments"] == 1
    assert stats["totalFeedbackGiven"] == 0
    assert stats["totalFeedbackReceived"] == 1
    assert stats["enrolledClasses"] == 1
    assert stats["pendingAssignments"] == 1
    assert [d["id"] for d in data["recentActivity"]] == [str(document.id)]
    assert data["recentGrades"][0]["assignmentTitle"] == "HW2"
    assert data["recentGrades"][0]["percentage"] == 85.0
    assert data["recentGrades"][0]["subjectName"] == subject.name


@pytest.mark.asyncio
async def test_teacher_dashboard(async_client: AsyncClient, api_base: str, db, teacher, subject, graded_course):
    shared = await make_document(db, teacher, subject, is_shared=True, title="Syllabus")
    await make_document(db, teacher, subject, is_shared=False, title="Answer key")

    resp = await async_client.get(f"{api_base}/dashboard/stats", headers=auth_headers(teacher))
    assert resp.status_code == 200, resp.text
    data = resp.json()["data"]
    assert data["role"] == "TEACHER"
    assert data["stats"] == {
        "totalClasses": 1,
        "totalStudents": 2,
        "totalAssignments": 2,
        "pendingGrading": 1,
    }
    assert [d["id"] for d in data["recentDocuments"]] == [str(shared.id)]
    assert len(data["recentSubmissions"]) == 2


@pytest.mark.asyncio
async def test_dashboard_requires_auth(async_client: AsyncClient, api_base: str):
    resp = await async_client.get(f"{api_base}/dashboard/stats")
    assert resp.status_code == 401


@pytest.mark.asyncio
async def test_student_analytics(async_client: AsyncClient, api_base: str, db, student, subject, graded_course):
    await make_document(db, student, subject)
    await make_document(db, student, subject, title="More notes")

    resp = await async_client.get(f"{api_base}/analytics", headers=auth_headers(student), params={"period": 7})
    assert resp.status_code == 200, resp.text
    data = resp.json()["data"]
    assert data["role"] == "STUDENT"
    assert data["periodDays"] == 7
    assert data["documentTrends"] == [
        {"date": get_utc_now().date().isoformat(), "count": 2, "averageRating": None}
    ]
    assert data["gradeDistribution"] == {"B": 1}


@pytest.mark.asyncio
async def test_teacher_analytics(async_client: AsyncClient, api_base: str, teacher, graded_course):
    class_, _, _ = graded_course

    resp = await async_client.get(f"{api_base}/analytics", headers=auth_headers(teacher))
    assert resp.status_code == 200, resp.text
    data = resp.json()["data"]
    assert data["role"] == "TEACHER"
    assert data["periodDays"] == 30
    assert data["assignmentTrends"][0]["count"] == 2
    assert sum(p["count"] for p in data["enrollmentTrends"]) == 2
    assert {s["status"]: s["count"] for s in data["submissionStats"]} == {"GRADED": 1, "SUBMITTED": 1}

    performance = data["classPerformance"]
    assert len(performance) == 1
    assert performance[0]["id"] == str(class_.id)
    assert performance[0]["students"] == 2
    assert performance[0]["assignments"] == 2
    assert performance[0]["averageGrade"] == 85


@pytest.mark.asyncio
async def test_analytics_period_bounds(async_client: AsyncClient, api_base: str, student):
    resp = await async_client.get(f"{api_base}/analytics", headers=auth_headers(student), params={"period": 0})
    assert resp.status_code == 400
    assert resp.json()["error"] == "Invalid data"
