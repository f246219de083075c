from __future__ import annotations

import pytest

from pydepth.exceptions import (
    ConfigError,
    PyDepthError,
    PackageNotFoundError,
    RootPackageNotResolvedError,
)


@pytest.mark.unit
class TestPyDepthError:
    """Tests for the base exception."""

    def test_message_only(self) -> None:
        """Test str() is the message when there are no details."""
        error = PyDepthError("something failed")

        assert str(error) == "something failed"
        assert error.details == {}

    def test_details_rendered(self) -> None:
        """Test details are appended to the message."""
        error = PyDepthError("failed", {"package": "json", "depth": 2})

        assert str(error) == "failed (package=json, depth=2)"

    def test_details_copied(self) -> None:
        """Test the caller's mapping is not shared."""
        details = {"a": 1}
        error = PyDepthError("failed", details)
        details["b"] = 2

        assert error.details == {"a": 1}

    def test_repr(self) -> None:
        """Test repr shows the class, message and details."""
        assert repr(PyDepthError("x", {"k": "v"})) == (
            "PyDepthError(message='x', details={'k': 'v'})"
        )


@pytest.mark.unit
class TestSubclasses:
    """Tests for the specific exception types."""

    def test_package_not_found(self) -> None:
        """Test lookup errors carry the package and source directory."""
        error = PackageNotFoundError("Cannot find package", package_name="x", src_dir="/p")

        assert isinstance(error, PyDepthError)
        assert error.package_name == "x"
        assert error.details == {"package": "x", "src_dir": "/p"}

    def test_package_not_found_omits_none(self) -> None:
        """Test missing context is left out of the details."""
        assert PackageNotFoundError("nope").details == {}

    def test_root_not_resolved(self) -> None:
        """Test the root error has a fixed message."""
        error = RootPackageNotResolvedError("json")

        assert error.message == "unable to resolve root package"
        assert str(error) == "unable to resolve root package (package=json)"

    def test_config_error(self) -> None:
        """Test configuration errors carry the path and option."""
        error = ConfigError("bad", config_path="a.toml", option="max_depth")

        assert error.config_path == "a.toml"
        assert error.option == "max_depth"
        assert str(error) == "bad (path=a.toml, option=max_depth)"

    def test_catchable_as_base(self) -> None:
        """Test every error can be caught as PyDepthError."""
        with pytest.raises(PyDepthError):
            raise RootPackageNotResolvedError("x")
