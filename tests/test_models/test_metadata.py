from __future__ import annotations

import pytest

from pydepth.models import ImportMode, PackageMetadata


@pytest.mark.unit
class TestImportMode:
    """Tests for ImportMode flags."""

    def test_default_is_empty(self) -> None:
        """Test DEFAULT sets no flags."""
        assert not ImportMode.DEFAULT & ImportMode.FIND_ONLY
        assert not ImportMode.DEFAULT & ImportMode.TESTS

    def test_flags_combine(self) -> None:
        """Test flags can be combined."""
        mode = ImportMode.FIND_ONLY | ImportMode.TESTS

        assert mode & ImportMode.FIND_ONLY
        assert mode & ImportMode.TESTS


@pytest.mark.unit
class TestPackageMetadata:
    """Tests for PackageMetadata."""

    def test_defaults(self) -> None:
        """Test a minimal instance is complete and empty."""
        meta = PackageMetadata(import_path="json")

        assert meta.dir is None
        assert meta.imports == []
        assert meta.test_imports == []
        assert meta.is_stdlib is False
        assert meta.is_complete is True

    def test_find_only_is_incomplete(self) -> None:
        """Test find-only metadata is not complete."""
        meta = PackageMetadata(import_path="json", mode=ImportMode.FIND_ONLY)

        assert meta.is_complete is False

    @pytest.mark.parametrize(
        "have,want,expected",
        [
            (ImportMode.DEFAULT, ImportMode.DEFAULT, True),
            (ImportMode.DEFAULT, ImportMode.FIND_ONLY, True),
            (ImportMode.FIND_ONLY, ImportMode.FIND_ONLY, True),
            (ImportMode.FIND_ONLY, ImportMode.DEFAULT, False),
            (ImportMode.DEFAULT, ImportMode.TESTS, False),
            (ImportMode.TESTS, ImportMode.TESTS, True),
            (ImportMode.TESTS, ImportMode.DEFAULT, True),
            (ImportMode.FIND_ONLY | ImportMode.TESTS, ImportMode.TESTS, False),
            (
                ImportMode.DEFAULT,
                ImportMode.FIND_ONLY | ImportMode.TESTS,
                True,
            ),
        ],
    )
    def test_covers(self, have, want, expected) -> None:
        """Test which cached lookups can answer which requests."""
        meta = PackageMetadata(import_path="x", mode=have)

        assert meta.covers(want) is expected

    def test_to_json(self) -> None:
        """Test to_json() copies the import lists."""
        meta = PackageMetadata(
            import_path="requests",
            dir="/site/requests",
            imports=["urllib3"],
            distribution="requests",
        )

        data = meta.to_json()
        data["imports"].append("idna")

        assert data["import_path"] == "requests"
        assert data["distribution"] == "requests"
        assert meta.imports == ["urllib3"]
