from __future__ import annotations

import hashlib
import unittest
import uuid
from pathlib import Path
from tempfile import TemporaryDirectory

from app.domain.ingestion import DataType, UploadedFile
from app.errors import ConfigurationError
from app.services.scheduled_ingestion_service import ScheduledIngestionService
from app.validators.upload_validator import validate_upload
from db.repositories.errors import FileStorageError
from db.repositories.storage import LocalFileStorage
from tests.fakes import FakeScheduledIngestionRepository


class TestUploadValidator(unittest.TestCase):
    def test_accepts_supported_extensions_case_insensitively(self) -> None:
        for name in ("a.csv", "b.XLSX", "c.xls", "d.Json"):
            upload = UploadedFile(file_name=name, content=b"x")
            self.assertIs(validate_upload(upload, max_bytes=10), upload)

    def test_rejects_missing_file(self) -> None:
        with self.assertRaises(ConfigurationError) as ctx:
            validate_upload(None, max_bytes=10)
        self.assertEqual(ctx.exception.message, "No file uploaded")

    def test_rejects_unsupported_extension(self) -> None:
        with self.assertRaises(ConfigurationError) as ctx:
            validate_upload(UploadedFile(file_name="report.pdf", content=b"x"), max_bytes=10)
        self.assertIn(".pdf", ctx.exception.message)

    def test_rejects_empty_and_oversize_content(self) -> None:
        with self.assertRaises(ConfigurationError):
            validate_upload(UploadedFile(file_name="a.csv", content=b""), max_bytes=10)
        with self.assertRaises(ConfigurationError):
            validate_upload(UploadedFile(file_name="a.csv", content=b"x" * 11), max_bytes=10)


class TestLocalFileStorage(unittest.TestCase):
    def test_save_writes_file_under_partitioned_dated_path(self) -> None:
        with TemporaryDirectory() as tmp:
            storage = LocalFileStorage(tmp)

            metadata = storage.save(
                file_name="../../inventory.csv",
                content=b"sku\nA1\n",
                partition="inventory_snapshot",
            )

            stored = storage.resolve(metadata.storage_path)
            self.assertTrue(stored.is_file())
            self.assertEqual(stored.read_bytes(), b"sku\nA1\n")
            self.assertTrue(metadata.storage_path.startswith("inventory_snapshot/"))
            self.assertEqual(metadata.partition, "inventory_snapshot")
            self.assertEqual(metadata.file_name, "inventory.csv")
            self.assertEqual(metadata.mime_type, "text/csv")
            self.assertEqual(metadata.file_size_bytes, 7)
            self.assertEqual(metadata.checksum, hashlib.sha256(b"sku\nA1\n").hexdigest())
            self.assertEqual([path for path in Path(tmp).rglob("*") if path.is_file()], [stored])

    def test_unsafe_partition_is_sanitized(self) -> None:
        with TemporaryDirectory() as tmp:
            metadata = LocalFileStorage(tmp).save(file_name="a.csv", content=b"x", partition="../etc")

        self.assertEqual(metadata.partition, "etc")

    def test_resolve_rejects_escaping_paths(self) -> None:
        with self.assertRaises(FileStorageError):
            LocalFileStorage("/tmp/uploads").resolve("../secrets.csv")

    def test_blank_file_name_is_rejected(self) -> None:
        with self.assertRaises(FileStorageError):
            LocalFileStorage("/tmp/uploads").save(file_name="   ", content=b"x")


class TestScheduledIngestionService(unittest.TestCase):
    def setUp(self) -> None:
        self.repository = FakeScheduledIngestionRepository()
        self.service = ScheduledIngestionService(self.repository)

    def test_create_normalizes_and_activates(self) -> None:
        scheduled = self.service.create_schedule(
            name="  Nightly counts ",
            source="manhattan-api",
            connection_config={"b": 2, "a": 1},
            schedule="0 3 * * *",
            data_type=DataType.CYCLE_COUNT_RESULTS,
            mapping_type=None,
        )

        self.assertEqual(scheduled.name, "Nightly counts")
        self.assertEqual(scheduled.connection_config, '{"a": 1, "b": 2}')
        self.assertEqual(scheduled.mapping_type, "generic")
        self.assertEqual(scheduled.data_type, "cycle_count_results")
        self.assertTrue(scheduled.is_active)
        self.assertEqual(self.repository.commit_calls, 1)

    def test_blank_schedule_is_rejected(self) -> None:
        with self.assertRaises(ConfigurationError):
            self.service.create_schedule(
                name="x",
                source="y",
                connection_config=None,
                schedule="  ",
                data_type=DataType.INVENTORY_SNAPSHOT,
                mapping_type="sap",
            )
        self.assertEqual(self.repository.items, {})

    def test_set_active_on_unknown_id_returns_none(self) -> None:
        self.assertIsNone(self.service.set_active(uuid.uuid4(), is_active=False))


if __name__ == "__main__":
    unittest.main()
