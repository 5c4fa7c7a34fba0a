"""Tests for catalog metadata models."""

import asyncio

from conftest import FakeCatalog, make_file, make_mod
from modcat.models.mod import (
    CatalogVariant,
    DependencyEdge,
    DependencyKind,
    EmbeddedFileReference,
    FileRecord,
    ModRecord,
    PointerFileReference,
    normalize_version,
)

CATALOG_PAYLOAD = {
    "id": 238222,
    "name": "Just Enough Items (JEI)",
    "summary": "View Items and Recipes",
    "websiteUrl": "https://minecraft.curseforge.com/projects/jei",
    "downloadCount": 123456789.0,
    "primaryLanguage": "enUS",
    "latestFiles": [
        {
            "id": 2803400,
            "downloadUrl": "https://edge.forgecdn.net/files/2803/400/jei_1.12.2.jar",
            "fileName": "jei_1.12.2-4.15.0.268.jar",
            "fileNameOnDisk": "jei_1.12.2-4.15.0.268.jar",
            "fileLength": 654321,
            "gameVersion": ["1.12.2"],
            "dependencies": [{"addonId": 1, "type": 1}, {"addonId": 2, "type": 2}],
            "isAlternate": False,
        }
    ],
    "gameVersionLatestFiles": [
        {
            "gameVersion": "1.12.2",
            "projectFileId": 2803400,
            "projectFileName": "jei_1.12.2-4.15.0.268.jar",
            "fileType": 1,
        }
    ],
}


class TestParsing:
    def test_parses_catalog_payload_and_ignores_unknown_fields(self):
        record = ModRecord.model_validate(CATALOG_PAYLOAD)

        assert record.id == 238222
        assert record.website_url.endswith("/jei")
        assert record.download_count == 123456789.0
        file = record.latest_files[0]
        assert file.file_length == 654321
        assert file.game_versions == ["1.12.2"]
        assert [d.addon_id for d in file.dependencies] == [1, 2]
        assert record.game_version_latest_files[0].project_file_id == 2803400

    def test_json_dict_uses_catalog_names_and_round_trips(self):
        record = ModRecord.model_validate(CATALOG_PAYLOAD)
        dumped = record.to_json_dict()

        assert "websiteUrl" in dumped
        assert "latestFiles" in dumped
        assert "primaryLanguage" not in dumped
        assert ModRecord.model_validate(dumped) == record

    def test_optional_fields_have_defaults(self):
        record = ModRecord.model_validate({"id": 1, "name": "Bare"})
        file = FileRecord.model_validate({"id": 2, "downloadUrl": "u"})

        assert record.latest_files == []
        assert record.summary == ""
        assert file.file_length is None
        assert file.dependencies == []
        assert file.disk_name == "2.jar"


class TestDependencyKind:
    def test_known_codes_map_to_kinds(self):
        assert DependencyEdge(addon_id=1, type=1).kind is DependencyKind.REQUIRED
        assert DependencyEdge(addon_id=1, type=3).kind is DependencyKind.TOOL

    def test_unknown_codes_have_no_kind(self):
        for code in (0, 2, 4, 5, 6):
            assert DependencyEdge(addon_id=1, type=code).kind is None


class TestFileReference:
    def test_normalize_version(self):
        assert normalize_version("  1.12.2 ") == "1.12.2"
        assert normalize_version("1.12.2-Forge") == "1.12.2-forge"

    def test_embedded_reference_matches_exact_version(self):
        record = make_mod(1, [make_file(10, ["1.12.2"]), make_file(11, ["1.14"])])

        ref = record.file_reference_for("1.14")

        assert isinstance(ref, EmbeddedFileReference)
        assert ref.file_id == 11
        assert record.file_reference_for("1.12") is None
        assert record.file_reference_for("1.12.2.1") is None

    def test_embedded_reference_prefers_highest_file_id(self):
        record = make_mod(
            1, [make_file(10, ["1.12.2"]), make_file(30, ["1.12.2"]), make_file(20, ["1.12.2"])]
        )

        assert record.file_reference_for("1.12.2").file_id == 30

    def test_embedded_reference_resolves_without_catalog_call(self):
        record = make_mod(1, [make_file(10, ["1.12.2"])])
        catalog = FakeCatalog()

        file = asyncio.run(record.file_reference_for("1.12.2").resolve(catalog))

        assert file.id == 10
        assert catalog.calls == []

    def test_pointer_reference_uses_pointer_list(self):
        record = ModRecord.model_validate(CATALOG_PAYLOAD)

        ref = record.file_reference_for(" 1.12.2", CatalogVariant.POINTER)

        assert isinstance(ref, PointerFileReference)
        assert (ref.mod_id, ref.file_id) == (238222, 2803400)
        assert record.file_reference_for("1.14", CatalogVariant.POINTER) is None

    def test_available_versions_are_distinct(self):
        record = make_mod(
            1, [make_file(10, ["1.12.2", "1.12.1"]), make_file(11, ["1.12.2"])]
        )

        assert record.available_versions(CatalogVariant.EMBEDDED) == ["1.12.2", "1.12.1"]
