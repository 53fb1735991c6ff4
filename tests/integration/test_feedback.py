"""Integration tests: document feedback and the rating aggregate."""

import pytest
from httpx import AsyncClient
from sqlalchemy import func, select

from study_portal.models import Document, Feedback, UserRole
from tests.factories import auth_headers, make_document, make_user


@pytest.mark.asyncio
async def test_second_feedback_updates_existing(
    async_client: AsyncClient, api_base: str, db, session_factory, student, other_student, subject
):
    doc = await make_document(db, student, subject, is_shared=True)
    url = f"{api_base}/documents/{doc.id}/feedback"

    first = await async_client.post(url, headers=auth_headers(other_student), json={"rating": 2, "comment": "meh"})
    assert first.status_code == 200, first.text
    second = await async_client.post(url, headers=auth_headers(other_student), json={"rating": 5, "comment": "great"})
    assert second.status_code == 200
    assert second.json()["data"]["id"] == first.json()["data"]["id"]
    assert second.json()["data"]["type"] == "PEER"

    async with session_factory() as s:
        rows = (await s.execute(
            select(func.count(Feedback.id)).where(Feedback.document_id == doc.id)
        )).scalar_one()
        stored = await s.get(Document, doc.id)
    assert rows == 1
    assert stored.average_rating == 5.0
    assert stored.total_ratings == 1


@pytest.mark.asyncio
async def test_average_rating_tracks_all_authors(
    async_client: AsyncClient, api_base: str, db, session_factory, teacher, student, other_student, subject
):
    doc = await make_document(db, student, subject, is_shared=True)
    url = f"{api_base}/documents/{doc.id}/feedback"

    await async_client.post(url, headers=auth_headers(other_student), json={"rating": 5})
    resp = await async_client.post(url, headers=auth_headers(teacher), json={"rating": 2})
    assert resp.json()["data"]["type"] == "TEACHER"
    assert resp.json()["data"]["teacherId"] == str(teacher.id)

    async with session_factory() as s:
        stored = await s.get(Document, doc.id)
    assert stored.average_rating == 3.5
    assert stored.total_ratings == 2

    resp = await async_client.get(url, headers=auth_headers(student))
    assert resp.status_code == 200
    data = resp.json()["data"]
    assert data["averageRating"] == 3.5
    assert data["totalRatings"] == 2
    assert len(data["feedback"]) == 2
    assert {f["author"]["id"] for f in data["feedback"]} == {str(teacher.id), str(other_student.id)}


@pytest.mark.asyncio
async def test_peer_feedback_disabled(
    async_client: AsyncClient, api_base: str, db, teacher, student, other_student, subject
):
    doc = await make_document(db, student, subject, is_shared=True, allow_peer_feedback=False)
    url = f"{api_base}/documents/{doc.id}/feedback"

    resp = await async_client.post(url, headers=auth_headers(other_student), json={"rating": 4})
    assert resp.status_code == 403
    assert resp.json() == {"error": "Peer feedback not allowed"}

    resp = await async_client.post(url, headers=auth_headers(teacher), json={"rating": 4})
    assert resp.status_code == 200


@pytest.mark.asyncio
async def test_cannot_rate_own_document(async_client: AsyncClient, api_base: str, db, student, subject):
    doc = await make_document(db, student, subject, is_shared=True)
    resp = await async_client.post(
        f"{api_base}/documents/{doc.id}/feedback",
        headers=auth_headers(student),
        json={"rating": 5},
    )
    assert resp.status_code == 403
    assert resp.json() == {"error": "Cannot rate your own document"}


@pytest.mark.asyncio
async def test_teacher_may_rate_own_document(async_client: AsyncClient, api_base: str, db, teacher, subject):
    doc = await make_document(db, teacher, subject)
    resp = await async_client.post(
        f"{api_base}/documents/{doc.id}/feedback",
        headers=auth_headers(teacher),
        json={"rating": 4},
    )
    assert resp.status_code == 200


@pytest.mark.asyncio
async def test_rating_out_of_range(async_client: AsyncClient, api_base: str, db, student, other_student, subject):
    doc = await make_document(db, student, subject, is_shared=True)
    resp = await async_client.post(
        f"{api_base}/documents/{doc.id}/feedback",
        headers=auth_headers(other_student),
        json={"rating": 9},
    )
    assert resp.status_code == 400
    assert resp.json()["details"][0]["field"] == "rating"


@pytest.mark.asyncio
async def test_feedback_on_private_document_hidden(
    async_client: AsyncClient, api_base: str, db, student, other_student, subject
):
    doc = await make_document(db, student, subject, is_shared=False)
    resp = await async_client.get(
        f"{api_base}/documents/{doc.id}/feedback",
        headers=auth_headers(other_student),
    )
    assert resp.status_code == 403


@pytest.mark.asyncio
async def test_feedback_counts_in_document_detail(
    async_client: AsyncClient, api_base: str, db, student, subject
):
    doc = await make_document(db, student, subject, is_shared=True)
    for _ in range(2):
        reviewer = await make_user(db, UserRole.STUDENT)
        await async_client.post(
            f"{api_base}/documents/{doc.id}/feedback",
            headers=auth_headers(reviewer),
            json={"rating": 4},
        )
    resp = await async_client.get(f"{api_base}/documents/{doc.id}", headers=auth_headers(student))
    data = resp.json()["data"]
    assert data["feedbackCount"] == 2
    assert data["totalRatings"] == 2
    assert data["averageRating"] == 4.0
