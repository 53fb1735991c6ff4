"""Integration tests: assignments, submissions and grading."""

from datetime import timedelta
from uuid import UUID

import pytest
from httpx import AsyncClient
from sqlalchemy import func, select

from study_portal.models import Grade, Submission, SubmissionStatus, UserRole
from study_portal.utils.time import get_utc_now
from tests.factories import auth_headers, make_assignment, make_class, make_document, make_user


@pytest.fixture
async def enrolled_class(db, teacher, student, subject):
    return await make_class(db, teacher, subject, students=[student])


@pytest.fixture
async def assignment(db, enrolled_class):
    return await make_assignment(db, enrolled_class, title="HW1")


@pytest.fixture
async def overdue_assignment(db, enrolled_class):
    return await make_assignment(db, enrolled_class, due_in=-timedelta(days=1), title="HW0")


async def _submit(client, api_base, user, assignment, **data):
    return await client.post(
        f"{api_base}/assignments/{assignment.id}/submissions",
        headers=auth_headers(user),
        data=data,
    )


@pytest.mark.asyncio
async def test_create_assignment(async_client: AsyncClient, api_base: str, db, teacher, student, subject, enrolled_class):
    doc = await make_document(db, teacher, subject, is_shared=True)
    due = (get_utc_now() + timedelta(days=3)).isoformat() + "Z"

    resp = await async_client.post(
        f"{api_base}/assignments",
        headers=auth_headers(teacher),
        json={
            "title": "Essay",
            "description": "Write 500 words",
            "dueDate": due,
            "maxPoints": 50,
            "subjectId": str(subject.id),
            "classId": str(enrolled_class.id),
            "documentIds": [str(doc.id)],
        },
    )
    assert resp.status_code == 201, resp.text
    data = resp.json()["data"]
    assert data["maxPoints"] == 50
    assert data["class"]["id"] == str(enrolled_class.id)
    assert [d["id"] for d in data["documents"]] == [str(doc.id)]
    assert data["submissionCount"] == 0


@pytest.mark.asyncio
async def test_create_assignment_in_foreign_class(async_client: AsyncClient, api_base: str, db, subject, enrolled_class):
    other_teacher = await make_user(db, UserRole.TEACHER)
    resp = await async_client.post(
        f"{api_base}/assignments",
        headers=auth_headers(other_teacher),
        json={
            "title": "Essay",
            "dueDate": (get_utc_now() + timedelta(days=3)).isoformat(),
            "subjectId": str(subject.id),
            "classId": str(enrolled_class.id),
        },
    )
    assert resp.status_code == 403


@pytest.mark.asyncio
async def test_create_assignment_unknown_document(async_client: AsyncClient, api_base: str, teacher, subject, enrolled_class):
    resp = await async_client.post(
        f"{api_base}/assignments",
        headers=auth_headers(teacher),
        json={
            "title": "Essay",
            "dueDate": (get_utc_now() + timedelta(days=3)).isoformat(),
            "subjectId": str(subject.id),
            "classId": str(enrolled_class.id),
            "documentIds": ["00000000-0000-0000-0000-000000000000"],
        },
    )
    assert resp.status_code == 400
    assert resp.json() == {"error": "One or more documents not found"}


@pytest.mark.asyncio
async def test_student_cannot_create_assignment(async_client: AsyncClient, api_base: str, student, subject, enrolled_class):
    resp = await async_client.post(
        f"{api_base}/assignments",
        headers=auth_headers(student),
        json={
            "title": "Essay",
            "dueDate": (get_utc_now() + timedelta(days=3)).isoformat(),
            "subjectId": str(subject.id),
            "classId": str(enrolled_class.id),
        },
    )
    assert resp.status_code == 403


@pytest.mark.asyncio
async def test_list_assignments_by_role(
    async_client: AsyncClient, api_base: str, db, teacher, student, other_student, subject, enrolled_class, assignment
):
    later = await make_assignment(db, enrolled_class, due_in=timedelta(days=14), title="HW2")
    await _submit(async_client, api_base, student, assignment, content="my answer")

    resp = await async_client.get(f"{api_base}/assignments", headers=auth_headers(student))
    assert resp.status_code == 200
    data = resp.json()["data"]
    assert [a["id"] for a in data] == [str(assignment.id), str(later.id)]
    assert data[0]["mySubmission"]["status"] == "SUBMITTED"
    assert data[1]["mySubmission"] is None

    resp = await async_client.get(f"{api_base}/assignments", headers=auth_headers(teacher))
    data = resp.json()["data"]
    assert len(data) == 2
    assert data[0]["submissionCount"] == 1

    resp = await async_client.get(f"{api_base}/assignments", headers=auth_headers(other_student))
    assert resp.json()["data"] == []


@pytest.mark.asyncio
async def test_list_assignments_filtered_by_class(
    async_client: AsyncClient, api_base: str, db, teacher, subject, enrolled_class, assignment
):
    other_class = await make_class(db, teacher, subject)
    await make_assignment(db, other_class, title="Other")
    resp = await async_client.get(
        f"{api_base}/assignments",
        headers=auth_headers(teacher),
        params={"classId": str(enrolled_class.id)},
    )
    assert [a["id"] for a in resp.json()["data"]] == [str(assignment.id)]


@pytest.mark.asyncio
async def test_assignment_detail_access(
    async_client: AsyncClient, api_base: str, student, other_student, assignment
):
    resp = await async_client.get(f"{api_base}/assignments/{assignment.id}", headers=auth_headers(student))
    assert resp.status_code == 200
    assert resp.json()["data"]["title"] == "HW1"

    resp = await async_client.get(f"{api_base}/assignments/{assignment.id}", headers=auth_headers(other_student))
    assert resp.status_code == 403


@pytest.mark.asyncio
async def test_update_and_delete_assignment(async_client: AsyncClient, api_base: str, teacher, student, assignment):
    resp = await async_client.put(
        f"{api_base}/assignments/{assignment.id}",
        headers=auth_headers(teacher),
        json={"title": "HW1 (revised)", "maxPoints": 20},
    )
    assert resp.status_code == 200, resp.text
    assert resp.json()["data"]["title"] == "HW1 (revised)"
    assert resp.json()["data"]["maxPoints"] == 20

    await _submit(async_client, api_base, student, assignment, content="answer")
    resp = await async_client.delete(f"{api_base}/assignments/{assignment.id}", headers=auth_headers(teacher))
    assert resp.status_code == 200

    resp = await async_client.get(f"{api_base}/assignments/{assignment.id}", headers=auth_headers(teacher))
    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_update_missing_assignment_is_404(async_client: AsyncClient, api_base: str, teacher):
    resp = await async_client.put(
        f"{api_base}/assignments/00000000-0000-0000-0000-000000000000",
        headers=auth_headers(teacher),
        json={"title": "Nope"},
    )
    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_second_submission_updates_in_place(
    async_client: AsyncClient, api_base: str, session_factory, student, assignment
):
    first = await _submit(async_client, api_base, student, assignment, content="draft")
    assert first.status_code == 200, first.text
    second = await _submit(async_client, api_base, student, assignment, content="final")
    assert second.status_code == 200
    assert second.json()["data"]["id"] == first.json()["data"]["id"]
    assert second.json()["data"]["content"] == "final"

    async with session_factory() as s:
        count = (await s.execute(
            select(func.count(Submission.id)).where(
                Submission.assignment_id == assignment.id,
                Submission.student_id == student.id,
            )
        )).scalar_one()
    assert count == 1


@pytest.mark.asyncio
async def test_submission_with_file(async_client: AsyncClient, api_base: str, student, assignment, upload_dir):
    resp = await async_client.post(
        f"{api_base}/assignments/{assignment.id}/submissions",
        headers=auth_headers(student),
        files={"file": ("answer.pdf", b"%PDF-1.4 answer", "application/pdf")},
    )
    assert resp.status_code == 200, resp.text
    data = resp.json()["data"]
    assert data["fileName"] == "answer.pdf"
    assert data["fileSize"] == str(len(b"%PDF-1.4 answer"))
    assert (upload_dir / data["filePath"]).exists()


@pytest.mark.asyncio
async def test_submission_needs_file_or_content(async_client: AsyncClient, api_base: str, student, assignment):
    resp = await _submit(async_client, api_base, student, assignment)
    assert resp.status_code == 400
    assert resp.json() == {"error": "Either file or content is required"}


@pytest.mark.asyncio
async def test_submission_after_deadline_rejected(
    async_client: AsyncClient, api_base: str, db, session_factory, student, overdue_assignment
):
    existing = Submission(
        assignment_id=overdue_assignment.id,
        student_id=student.id,
        content="on time",
        submitted_at=get_utc_now() - timedelta(days=2),
    )
    db.add(existing)
    await db.commit()

    resp = await _submit(async_client, api_base, student, overdue_assignment, content="late")
    assert resp.status_code == 400
    assert resp.json() == {"error": "Assignment deadline has passed"}

    async with session_factory() as s:
        stored = await s.get(Submission, existing.id)
    assert stored.content == "on time"


@pytest.mark.asyncio
async def test_teacher_cannot_submit(async_client: AsyncClient, api_base: str, teacher, assignment):
    resp = await _submit(async_client, api_base, teacher, assignment, content="answer")
    assert resp.status_code == 403
    assert resp.json() == {"error": "Student access required"}


@pytest.mark.asyncio
async def test_unenrolled_student_cannot_submit(async_client: AsyncClient, api_base: str, other_student, assignment):
    resp = await _submit(async_client, api_base, other_student, assignment, content="answer")
    assert resp.status_code == 403
    assert resp.json() == {"error": "Not enrolled in class"}


@pytest.mark.asyncio
async def test_submission_lists_by_role(
    async_client: AsyncClient, api_base: str, db, teacher, student, enrolled_class, assignment
):
    classmate = await make_user(db, UserRole.STUDENT)
    await async_client.post(
        f"{api_base}/classes/{enrolled_class.id}/enrollments",
        headers=auth_headers(teacher),
        json={"studentEmails": [classmate.email]},
    )
    await _submit(async_client, api_base, student, assignment, content="mine")
    await _submit(async_client, api_base, classmate, assignment, content="theirs")

    resp = await async_client.get(f"{api_base}/assignments/{assignment.id}/submissions", headers=auth_headers(teacher))
    assert len(resp.json()["data"]) == 2

    resp = await async_client.get(f"{api_base}/assignments/{assignment.id}/submissions", headers=auth_headers(student))
    data = resp.json()["data"]
    assert [s["studentId"] for s in data] == [str(student.id)]


@pytest.mark.asyncio
async def test_grade_over_maximum_rejected(
    async_client: AsyncClient, api_base: str, session_factory, teacher, student, assignment
):
    submitted = await _submit(async_client, api_base, student, assignment, content="answer")
    submission_id = submitted.json()["data"]["id"]

    resp = await async_client.post(
        f"{api_base}/submissions/{submission_id}/grade",
        headers=auth_headers(teacher),
        json={"points": 120, "maxPoints": 100},
    )
    assert resp.status_code == 400
    assert resp.json() == {"error": "Points cannot exceed maximum"}

    async with session_factory() as s:
        grades = (await s.execute(select(func.count(Grade.id)))).scalar_one()
    assert grades == 0


@pytest.mark.asyncio
async def test_grade_marks_submission_graded(
    async_client: AsyncClient, api_base: str, session_factory, teacher, student, assignment
):
    submitted = await _submit(async_client, api_base, student, assignment, content="answer")
    submission_id = submitted.json()["data"]["id"]

    resp = await async_client.post(
        f"{api_base}/submissions/{submission_id}/grade",
        headers=auth_headers(teacher),
        json={"points": 85, "maxPoints": 100, "feedback": "Good work"},
    )
    assert resp.status_code == 200, resp.text
    assert resp.json()["data"]["percentage"] == 85.0

    resp = await async_client.get(f"{api_base}/submissions/{submission_id}", headers=auth_headers(student))
    assert resp.status_code == 200
    data = resp.json()["data"]
    assert data["status"] == "GRADED"
    assert data["grade"]["percentage"] == 85.0
    assert data["grade"]["feedback"] == "Good work"
    assert data["assignment"]["title"] == "HW1"

    # Regrade rewrites the same row; maxPoints falls back to the assignment's
    resp = await async_client.post(
        f"{api_base}/submissions/{submission_id}/grade",
        headers=auth_headers(teacher),
        json={"points": 90},
    )
    assert resp.json()["data"]["maxPoints"] == 100
    assert resp.json()["data"]["percentage"] == 90.0
    async with session_factory() as s:
        grades = (await s.execute(select(func.count(Grade.id)))).scalar_one()
    assert grades == 1


@pytest.mark.asyncio
async def test_resubmission_keeps_graded_status(
    async_client: AsyncClient, api_base: str, session_factory, teacher, student, assignment
):
    submitted = await _submit(async_client, api_base, student, assignment, content="v1")
    submission_id = submitted.json()["data"]["id"]
    await async_client.post(
        f"{api_base}/submissions/{submission_id}/grade",
        headers=auth_headers(teacher),
        json={"points": 70},
    )

    resp = await async_client.put(
        f"{api_base}/submissions/{submission_id}",
        headers=auth_headers(student),
        data={"content": "v2"},
    )
    assert resp.status_code == 200, resp.text
    assert resp.json()["data"]["content"] == "v2"
    assert resp.json()["data"]["status"] == "GRADED"

    async with session_factory() as s:
        stored = await s.get(Submission, UUID(submission_id))
    assert stored.status == SubmissionStatus.GRADED


@pytest.mark.asyncio
async def test_submission_detail_hidden_from_classmates(
    async_client: AsyncClient, api_base: str, other_student, student, assignment
):
    submitted = await _submit(async_client, api_base, student, assignment, content="answer")
    submission_id = submitted.json()["data"]["id"]

    resp = await async_client.get(f"{api_base}/submissions/{submission_id}", headers=auth_headers(other_student))
    assert resp.status_code == 403

    resp = await async_client.put(
        f"{api_base}/submissions/{submission_id}",
        headers=auth_headers(other_student),
        data={"content": "overwrite"},
    )
    assert resp.status_code == 403


@pytest.mark.asyncio
async def test_only_owning_teacher_grades(async_client: AsyncClient, api_base: str, db, student, assignment):
    submitted = await _submit(async_client, api_base, student, assignment, content="answer")
    other_teacher = await make_user(db, UserRole.TEACHER)
    resp = await async_client.post(
        f"{api_base}/submissions/{submitted.json()['data']['id']}/grade",
        headers=auth_headers(other_teacher),
        json={"points": 10},
    )
    assert resp.status_code == 403
