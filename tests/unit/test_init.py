r"""Unit tests for package initialization and metadata."""

from __future__ import annotations

import arequest


def test_package_version_is_string() -> None:
    """Test that __version__ is a string."""
    assert isinstance(arequest.__version__, str)


def test_package_version_format() -> None:
    """Test that __version__ follows semantic versioning."""
    assert "." in arequest.__version__


def test_all_exports_defined() -> None:
    """Test that all items in __all__ are defined in the module."""
    for name in arequest.__all__:
        assert hasattr(arequest, name), f"{name} is in __all__ but not defined in module"


def test_main_classes_exported() -> None:
    assert arequest.HttpClient.__module__ == "arequest.client"
    assert arequest.JsonRequestOperation.__module__ == "arequest.operation.json_request"
    assert arequest.OperationQueue.__module__ == "arequest.operation.queue"
