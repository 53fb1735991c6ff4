"""Unit tests for upload validation and the local storage backend."""

from types import SimpleNamespace
from unittest.mock import AsyncMock

import pytest

from study_portal.config import settings
from study_portal.core.exceptions import BadRequestError
from study_portal.services import storage_service


def test_validate_upload_accepts_pdf():
    storage_service.validate_upload("notes.pdf", "application/pdf", 1024)


def test_validate_upload_ignores_content_type_parameters():
    storage_service.validate_upload("notes.txt", "text/plain; charset=utf-8", 10)


def test_validate_upload_requires_file():
    with pytest.raises(BadRequestError, match="No file provided"):
        storage_service.validate_upload("", "application/pdf", 10)


def test_validate_upload_rejects_large_file():
    with pytest.raises(BadRequestError, match="File too large"):
        storage_service.validate_upload("big.pdf", "application/pdf", settings.MAX_FILE_SIZE + 1)


def test_validate_upload_rejects_type():
    with pytest.raises(BadRequestError, match="File type not allowed"):
        storage_service.validate_upload("run.exe", "application/x-msdownload", 10)


@pytest.mark.asyncio
async def test_local_upload_and_delete(upload_dir):
    key = await storage_service.upload("documents/user-1", "notes.pdf", b"%PDF-1.4", "application/pdf")
    assert key.startswith("documents/user-1/")
    assert key.endswith(".pdf")
    stored = upload_dir / key
    assert stored.read_bytes() == b"%PDF-1.4"

    await storage_service.delete(key)
    assert not stored.exists()


@pytest.mark.asyncio
async def test_delete_missing_object_is_ignored(upload_dir):
    await storage_service.delete("documents/user-1/missing.pdf")


@pytest.mark.asyncio
async def test_key_cannot_escape_upload_dir(upload_dir):
    with pytest.raises(ValueError):
        await storage_service.delete("../outside.txt")


@pytest.mark.asyncio
async def test_read_upload_refuses_declared_size_before_reading(monkeypatch):
    monkeypatch.setattr(settings, "MAX_FILE_SIZE", 10)
    upload = SimpleNamespace(size=11, read=AsyncMock(return_value=b"x" * 11))
    with pytest.raises(BadRequestError, match="File too large"):
        await storage_service.read_upload(upload)
    upload.read.assert_not_awaited()


@pytest.mark.asyncio
async def test_read_upload_caps_read_when_size_unknown(monkeypatch):
    monkeypatch.setattr(settings, "MAX_FILE_SIZE", 10)
    upload = SimpleNamespace(size=None, read=AsyncMock(return_value=b"x" * 11))
    with pytest.raises(BadRequestError, match="File too large"):
        await storage_service.read_upload(upload)
    upload.read.assert_awaited_once_with(11)


@pytest.mark.asyncio
async def test_read_upload_returns_content_within_limit(monkeypatch):
    monkeypatch.setattr(settings, "MAX_FILE_SIZE", 10)
    upload = SimpleNamespace(size=5, read=AsyncMock(return_value=b"hello"))
    assert await storage_service.read_upload(upload) == b"hello"
