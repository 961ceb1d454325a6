"""Tests for marksite package exports and metadata."""

import pytest

import marksite


class TestPackageMetadata:
    """Package-level exports and metadata."""

    def test_version_string(self) -> None:
        assert isinstance(marksite.__version__, str)
        assert "0.1.0" in marksite.__version__

    def test_all_exports_resolvable(self) -> None:
        for name in marksite.__all__:
            assert getattr(marksite, name) is not None

    def test_public_functions_are_callable(self) -> None:
        for name in ("build", "serve", "migrate", "init", "new_post", "resolve_content_root"):
            assert callable(getattr(marksite, name))

    def test_invalid_attribute_raises(self) -> None:
        with pytest.raises(AttributeError, match="no attribute"):
            marksite.nonexistent_thing  # type: ignore[attr-defined]  # noqa: B018
