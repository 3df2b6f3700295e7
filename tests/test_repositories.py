"""Tests for the storage adapters."""

import json
import uuid
from datetime import datetime
from pathlib import Path

import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import OperationalError

from easyaccess.db.models import FileImage as FileImageModel
from easyaccess.db.repositories import LocalFileRepository
from easyaccess.db.repositories.local_repository import STORAGE_KEY
from easyaccess.domains.files.entities import File, FileContent
from easyaccess.domains.files.exceptions import (
    DuplicateNameError,
    NotFoundError,
    StoreUnavailableError,
)


_RECORD = {
    "id": "6f1c1b52-6d5f-4a53-9f0e-3c2a4b1d9e07",
    "name": "notes",
    "passwordDigest": "61",
    "content": {"text": "hello", "images": ["img"]},
    "createdAt": "2024-05-01T09:30:00.000001",
    "updatedAt": "2024-05-01T09:45:00",
}


def _make_file(name: str = "notes") -> File:
    return File.create_file(name=name, password_digest="61")


class TestRepositoryContract:
    async def test_create_and_get_by_id(self, repository):
        file = await repository.create(_make_file())

        fetched = await repository.get_by_id(file.id)
        assert fetched is not None
        assert fetched.name == "notes"
        assert fetched.password_digest == "61"
        assert fetched.content == FileContent()

    async def test_get_by_name_exact_match(self, repository):
        await repository.create(_make_file("notes"))

        assert (await repository.get_by_name("notes")) is not None
        assert await repository.get_by_name("Notes") is None
        assert await repository.get_by_name("note") is None

    async def test_missing_returns_none(self, repository):
        assert await repository.get_by_id(uuid.uuid4()) is None
        assert await repository.get_by_name("nothing") is None

    async def test_duplicate_name_rejected(self, repository):
        await repository.create(_make_file("notes"))

        with pytest.raises(DuplicateNameError):
            await repository.create(_make_file("notes"))

        assert (await repository.get_by_name("notes")) is not None

    async def test_update_replaces_content(self, repository):
        file = await repository.create(_make_file())
        file.update_content(FileContent(text="one", images=["a", "b"]))
        await repository.update(file)
        file.update_content(FileContent(text="two", images=["c"]))
        await repository.update(file)

        fetched = await repository.get_by_id(file.id)
        assert fetched.content == FileContent(text="two", images=["c"])
        assert fetched.updated_at == file.updated_at

    async def test_update_keeps_image_order(self, repository):
        file = await repository.create(_make_file())
        file.update_content(FileContent(images=["3", "1", "2"]))
        await repository.update(file)

        fetched = await repository.get_by_id(file.id)
        assert fetched.content.images == ["3", "1", "2"]

    async def test_update_missing_raises(self, repository):
        with pytest.raises(NotFoundError):
            await repository.update(_make_file())

    async def test_delete(self, repository):
        file = await repository.create(_make_file())

        assert await repository.delete(file.id) is True
        assert await repository.get_by_id(file.id) is None
        assert await repository.get_by_name("notes") is None
        assert await repository.delete(file.id) is False

    async def test_name_reusable_after_delete(self, repository):
        first = await repository.create(_make_file())
        await repository.delete(first.id)

        second = await repository.create(_make_file())
        assert second.id != first.id


class TestLocalFileRepository:
    async def test_persists_to_disk(self, store_path: Path):
        repository = LocalFileRepository(store_path)
        file = await repository.create(_make_file())

        data = json.loads(store_path.read_text(encoding="utf-8"))
        assert len(data[STORAGE_KEY]) == 1
        assert data[STORAGE_KEY][0]["id"] == str(file.id)
        assert data[STORAGE_KEY][0]["passwordDigest"] == "61"
        assert set(data[STORAGE_KEY][0]) == {
            "id", "name", "passwordDigest", "content", "createdAt", "updatedAt"
        }
        assert data[STORAGE_KEY][0]["content"] == {"text": "", "images": []}

    async def test_reloads_from_disk(self, store_path: Path):
        file = await LocalFileRepository(store_path).create(_make_file())

        reopened = LocalFileRepository(store_path)
        fetched = await reopened.get_by_id(file.id)
        assert fetched is not None
        assert fetched.created_at == file.created_at
        assert len(reopened) == 1

    async def test_memory_only(self):
        repository = LocalFileRepository()
        file = await repository.create(_make_file())

        assert await repository.get_by_id(file.id) is not None

    async def test_returns_copies(self, store_path: Path):
        repository = LocalFileRepository(store_path)
        file = await repository.create(_make_file())

        fetched = await repository.get_by_id(file.id)
        fetched.content.images.append("not saved")

        assert (await repository.get_by_id(file.id)).content.images == []

    async def test_update_keeps_identity(self, store_path: Path):
        repository = LocalFileRepository(store_path)
        file = await repository.create(_make_file())
        file.name = "renamed"
        file.update_content(FileContent(text="x"))

        updated = await repository.update(file)
        assert updated.name == "notes"

    async def test_corrupt_store_raises(self, store_path: Path):
        store_path.write_text("{not json", encoding="utf-8")

        with pytest.raises(StoreUnavailableError):
            LocalFileRepository(store_path)

    @pytest.mark.parametrize(
        "document",
        [
            [{"name": "x"}],
            {STORAGE_KEY: [{"name": "x"}]},
            {STORAGE_KEY: [{**_RECORD, "id": "not-a-uuid"}]},
            {STORAGE_KEY: [{**_RECORD, "createdAt": 1700000000000}]},
            {STORAGE_KEY: [{**_RECORD, "content": {"text": "t", "images": "a"}}]},
            {STORAGE_KEY: {"id": _RECORD["id"]}},
        ],
    )
    async def test_malformed_records_raise_on_open(self, store_path: Path, document):
        store_path.write_text(json.dumps(document), encoding="utf-8")

        with pytest.raises(StoreUnavailableError):
            LocalFileRepository(store_path)

    async def test_loads_valid_document(self, store_path: Path):
        record = {**_RECORD, "updatedAt": "2024-05-01T12:00:00+02:00"}
        store_path.write_text(json.dumps({STORAGE_KEY: [record]}), encoding="utf-8")

        fetched = await LocalFileRepository(store_path).get_by_name("notes")

        assert fetched.id == uuid.UUID(_RECORD["id"])
        assert fetched.content == FileContent(text="hello", images=["img"])
        assert fetched.updated_at == datetime(2024, 5, 1, 10, 0)
        assert fetched.updated_at.tzinfo is None

    async def test_failed_write_leaves_state_intact(self, store_path: Path, monkeypatch):
        repository = LocalFileRepository(store_path)
        file = await repository.create(_make_file())

        def broken_write(*args, **kwargs):
            raise OSError("disk full")

        monkeypatch.setattr(Path, "write_text", broken_write)

        file.update_content(FileContent(text="lost"))
        with pytest.raises(StoreUnavailableError):
            await repository.update(file)
        with pytest.raises(StoreUnavailableError):
            await repository.create(_make_file("other"))

        assert (await repository.get_by_id(file.id)).content.text == ""
        assert await repository.get_by_name("other") is None


class TestSqlFileRepository:
    async def test_delete_removes_images(self, sql_repository):
        file = await sql_repository.create(_make_file())
        file.update_content(FileContent(images=["a", "b"]))
        await sql_repository.update(file)

        await sql_repository.delete(file.id)

        count = await sql_repository.session.scalar(
            select(func.count()).select_from(FileImageModel)
        )
        assert count == 0

    async def test_update_drops_replaced_images(self, sql_repository):
        file = await sql_repository.create(_make_file())
        file.update_content(FileContent(images=["a", "b", "c"]))
        await sql_repository.update(file)
        file.update_content(FileContent(images=["d"]))
        await sql_repository.update(file)

        count = await sql_repository.session.scalar(
            select(func.count()).select_from(FileImageModel)
        )
        assert count == 1

    async def test_failed_update_rolls_back(self, sql_repository, monkeypatch):
        file = await sql_repository.create(_make_file())
        file.update_content(FileContent(text="kept", images=["a", "b"]))
        await sql_repository.update(file)

        async def broken_commit():
            raise OperationalError("UPDATE files", {}, Exception("database is locked"))

        monkeypatch.setattr(sql_repository.session, "commit", broken_commit)

        file.update_content(FileContent(text="lost", images=["c"]))
        with pytest.raises(StoreUnavailableError) as exc_info:
            await sql_repository.update(file)
        assert isinstance(exc_info.value.__cause__, OperationalError)

        monkeypatch.undo()
        sql_repository.session.expunge_all()

        fetched = await sql_repository.get_by_id(file.id)
        assert fetched.content == FileContent(text="kept", images=["a", "b"])

    async def test_unique_constraint_maps_to_duplicate(self, sql_repository):
        # Bypasses the service-level pre-check, so the unique index fires
        await sql_repository.create(_make_file())

        with pytest.raises(DuplicateNameError):
            await sql_repository.create(_make_file())

        assert (await sql_repository.get_by_name("notes")) is not None
