"""Integration tests: flashcard decks and notes."""

import pytest
from httpx import AsyncClient
from sqlalchemy import event, func, select

from study_portal.models import DeckStats, Flashcard, FlashcardDeck, User
from study_portal.schemas.study import DeckCreate
from study_portal.services.study_service import FlashcardService
from tests.factories import auth_headers


def _deck_payload(name="Biology"):
    return {
        "name": name,
        "description": "Cells and organelles",
        "flashcards": [
            {"front": "Powerhouse of the cell?", "back": "Mitochondria", "difficulty": "easy"},
            {"front": "Site of protein synthesis?", "back": "Ribosome", "tags": ["organelles"]},
        ],
    }


@pytest.mark.asyncio
async def test_create_deck_with_cards(async_client: AsyncClient, api_base: str, student):
    resp = await async_client.post(f"{api_base}/flashcards", headers=auth_headers(student), json=_deck_payload())
    assert resp.status_code == 201, resp.text
    body = resp.json()
    assert body["message"] == "Deck created successfully"
    data = body["data"]
    assert data["color"] == "#3b82f6"
    assert len(data["cards"]) == 2
    assert data["cards"][1]["difficulty"] == "medium"
    assert data["cards"][1]["tags"] == ["organelles"]
    assert data["cards"][0]["easeFactor"] == 2.5
    assert data["stats"]["totalCards"] == 2
    assert data["stats"]["newCards"] == 2


@pytest.mark.asyncio
async def test_list_decks_is_per_user(async_client: AsyncClient, api_base: str, student, other_student):
    await async_client.post(f"{api_base}/flashcards", headers=auth_headers(student), json=_deck_payload())
    await async_client.post(f"{api_base}/flashcards", headers=auth_headers(other_student), json=_deck_payload("History"))

    resp = await async_client.get(f"{api_base}/flashcards", headers=auth_headers(student))
    assert resp.status_code == 200
    assert [d["name"] for d in resp.json()["data"]] == ["Biology"]


@pytest.mark.asyncio
async def test_delete_deck(async_client: AsyncClient, api_base: str, session_factory, student, other_student):
    created = await async_client.post(f"{api_base}/flashcards", headers=auth_headers(student), json=_deck_payload())
    deck_id = created.json()["data"]["id"]

    resp = await async_client.delete(
        f"{api_base}/flashcards", headers=auth_headers(other_student), params={"deckId": deck_id}
    )
    assert resp.status_code == 403

    resp = await async_client.delete(f"{api_base}/flashcards", headers=auth_headers(student), params={"deckId": deck_id})
    assert resp.status_code == 200
    assert resp.json()["message"] == "Deck deleted successfully"

    async with session_factory() as s:
        cards = (await s.execute(select(func.count(Flashcard.id)))).scalar_one()
    assert cards == 0

    resp = await async_client.delete(f"{api_base}/flashcards", headers=auth_headers(student), params={"deckId": deck_id})
    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_delete_deck_requires_id(async_client: AsyncClient, api_base: str, student):
    resp = await async_client.delete(f"{api_base}/flashcards", headers=auth_headers(student))
    assert resp.status_code == 400


@pytest.mark.asyncio
async def test_deck_validation(async_client: AsyncClient, api_base: str, student):
    payload = _deck_payload()
    payload["flashcards"][0]["back"] = ""
    resp = await async_client.post(f"{api_base}/flashcards", headers=auth_headers(student), json=payload)
    assert resp.status_code == 400
    assert resp.json()["details"][0]["field"] == "flashcards.0.back"


@pytest.mark.asyncio
async def test_notes_lifecycle(async_client: AsyncClient, api_base: str, student, other_student):
    resp = await async_client.post(
        f"{api_base}/notes",
        headers=auth_headers(student),
        json={"title": "Lecture 1", "content": "Intro to cells", "tags": ["biology"]},
    )
    assert resp.status_code == 201, resp.text
    note = resp.json()["data"]
    assert note["tags"] == ["biology"]

    resp = await async_client.get(f"{api_base}/notes", headers=auth_headers(other_student))
    assert resp.json()["data"] == []

    resp = await async_client.get(f"{api_base}/notes", headers=auth_headers(student))
    assert [n["id"] for n in resp.json()["data"]] == [note["id"]]

    resp = await async_client.delete(f"{api_base}/notes", headers=auth_headers(other_student), params={"noteId": note["id"]})
    assert resp.status_code == 403

    resp = await async_client.delete(f"{api_base}/notes", headers=auth_headers(student), params={"noteId": note["id"]})
    assert resp.status_code == 200

    resp = await async_client.get(f"{api_base}/notes", headers=auth_headers(student))
    assert resp.json()["data"] == []


@pytest.mark.asyncio
async def test_note_requires_title_and_content(async_client: AsyncClient, api_base: str, student):
    resp = await async_client.post(f"{api_base}/notes", headers=auth_headers(student), json={"title": "", "content": ""})
    assert resp.status_code == 400
    fields = {d["field"] for d in resp.json()["details"]}
    assert fields == {"title", "content"}


@pytest.mark.asyncio
async def test_study_tools_require_auth(async_client: AsyncClient, api_base: str):
    assert (await async_client.get(f"{api_base}/flashcards")).status_code == 401
    assert (await async_client.get(f"{api_base}/notes")).status_code == 401


@pytest.mark.asyncio
async def test_deck_creation_rolls_back_as_a_unit(session_factory, student):
    def fail_card_insert(mapper, connection, target):
        raise RuntimeError("card insert failed")

    # The deck row is flushed before its cards, so this fails midway
    event.listen(Flashcard, "before_insert", fail_card_insert)
    try:
        async with session_factory() as session:
            owner = await session.get(User, student.id)
            with pytest.raises(RuntimeError):
                await FlashcardService.create_deck(session, owner, DeckCreate.model_validate(_deck_payload()))
    finally:
        event.remove(Flashcard, "before_insert", fail_card_insert)

    async with session_factory() as s:
        for model in (FlashcardDeck, Flashcard, DeckStats):
            assert (await s.execute(select(func.count(model.id)))).scalar_one() == 0
