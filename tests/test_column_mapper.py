from __future__ import annotations

import unittest

from app.domain.ingestion import DataType
from app.mappers.column_mapper import ColumnMapper
from app.registry.mapping_registry import DEFAULT_COLUMN_MAPPINGS, MappingRegistry
from app.registry.schema_registry import default_schema_registry


class TestColumnMapper(unittest.TestCase):
    def setUp(self) -> None:
        self.mapper = ColumnMapper(
            mapping_registry=MappingRegistry(DEFAULT_COLUMN_MAPPINGS),
            schema_registry=default_schema_registry(),
        )

    def test_maps_manhattan_inventory_columns(self) -> None:
        raw = {
            "SKU": "A1",
            "Location ID": "L-01",
            "On Hand Qty": "10",
            "Allocated Qty": "2",
            "Warehouse": "DC-3",
        }

        [record] = self.mapper.map([raw], "manhattan", DataType.INVENTORY_SNAPSHOT)

        self.assertEqual(
            record.fields,
            {
                "sku": "A1",
                "locationCode": "L-01",
                "quantityOnHand": "10",
                "quantityAllocated": "2",
            },
        )
        self.assertEqual(record.extra_fields, {"Warehouse": "DC-3"})

    def test_no_source_column_is_dropped(self) -> None:
        raw = {"sku": "A1", "location": "L1", "quantity": "4", "Bin Color": "red", "note": ""}

        [record] = self.mapper.map([raw], "generic", DataType.INVENTORY_SNAPSHOT)

        mapping = self.mapper.resolve("generic", DataType.INVENTORY_SNAPSHOT)
        mapped_sources = {column for column in raw if column in mapping}
        self.assertEqual(mapped_sources | set(record.extra_fields), set(raw))
        self.assertEqual(len(record.fields) + len(record.extra_fields), len(raw))

    def test_unmapped_canonical_column_passes_through(self) -> None:
        raw = {"SKU": "A1", "Location ID": "L1", "On Hand Qty": "3", "snapshotDate": "2026-01-05"}

        [record] = self.mapper.map([raw], "manhattan", DataType.INVENTORY_SNAPSHOT)

        self.assertEqual(record.get("snapshotDate"), "2026-01-05")
        self.assertNotIn("snapshotDate", record.extra_fields)

    def test_mapped_value_wins_over_same_named_raw_column(self) -> None:
        raw = {"SKU": "FROM-MAPPING", "sku": "RAW"}

        [record] = self.mapper.map([raw], "manhattan", DataType.INVENTORY_SNAPSHOT)

        self.assertEqual(record.get("sku"), "FROM-MAPPING")
        self.assertEqual(record.extra_fields, {"sku": "RAW"})

    def test_mapping_lookup_is_case_sensitive(self) -> None:
        raw = {"sku": "A1", "location id": "L1"}

        [record] = self.mapper.map([raw], "manhattan", DataType.INVENTORY_SNAPSHOT)

        self.assertNotIn("locationCode", record.fields)
        self.assertEqual(record.extra_fields, {"location id": "L1"})
        self.assertEqual(record.get("sku"), "A1")

    def test_data_type_without_mapping_passes_columns_through(self) -> None:
        raw = {"userId": "u1", "taskType": "pick", "Shift": "B"}

        [record] = self.mapper.map([raw], "manhattan", DataType.LABOR_LOG)

        self.assertEqual(record.fields, {"userId": "u1", "taskType": "pick"})
        self.assertEqual(record.extra_fields, {"Shift": "B"})

    def test_preserves_record_order(self) -> None:
        raws = [{"sku": f"S{index}"} for index in range(5)]

        records = self.mapper.map(raws, "generic", DataType.INVENTORY_SNAPSHOT)

        self.assertEqual([record.get("sku") for record in records], ["S0", "S1", "S2", "S3", "S4"])


if __name__ == "__main__":
    unittest.main()
