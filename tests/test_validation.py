"""
Tests for Opencode SDK validation module.
"""

import pytest

from opencode_sdk.exceptions import OpencodeError, ParamValidationError
from opencode_sdk.validation import (
    validate_dict,
    validate_in_list,
    validate_path_param,
    validate_required,
)


class TestExceptionInheritance:
    """Tests that ParamValidationError is an SDK error."""

    def test_inherits_from_sdk_error(self):
        assert issubclass(ParamValidationError, OpencodeError)

    def test_carries_field_and_reason(self):
        err = ParamValidationError("sessionID", "is required")
        assert err.field == "sessionID"
        assert err.reason == "is required"
        assert "sessionID" in str(err)


class TestValidateRequired:
    """Tests for validate_required function."""

    def test_none_value_raises(self):
        with pytest.raises(ParamValidationError) as exc:
            validate_required(None, "field")
        assert "is required" in str(exc.value)
        assert exc.value.field == "field"

    def test_empty_string_raises(self):
        with pytest.raises(ParamValidationError) as exc:
            validate_required("", "field")
        assert "cannot be empty" in str(exc.value)

    def test_empty_list_raises(self):
        with pytest.raises(ParamValidationError):
            validate_required([], "parts")

    def test_empty_dict_raises(self):
        with pytest.raises(ParamValidationError):
            validate_required({}, "config")

    def test_valid_string_passes(self):
        validate_required("value", "field")

    def test_zero_and_false_pass(self):
        validate_required(0, "count")
        validate_required(False, "flag")


class TestValidatePathParam:
    """Tests for validate_path_param function."""

    def test_missing_raises(self):
        with pytest.raises(ParamValidationError) as exc:
            validate_path_param(None, "id")
        assert exc.value.field == "id"

    def test_blank_raises(self):
        with pytest.raises(ParamValidationError) as exc:
            validate_path_param("   ", "id")
        assert "blank" in str(exc.value)

    def test_non_string_raises(self):
        with pytest.raises(ParamValidationError):
            validate_path_param(["a"], "id")

    def test_bool_raises(self):
        with pytest.raises(ParamValidationError):
            validate_path_param(True, "id")

    def test_int_passes(self):
        validate_path_param(42, "id")


class TestValidateInList:
    """Tests for validate_in_list function."""

    def test_value_in_list_passes(self):
        validate_in_list("once", "response", ["once", "always", "reject"])

    def test_value_not_in_list_raises(self):
        with pytest.raises(ParamValidationError) as exc:
            validate_in_list("never", "response", ["once", "always", "reject"])
        assert "must be one of" in str(exc.value)

    def test_none_passes(self):
        validate_in_list(None, "response", ["once"])


class TestValidateDict:
    """Tests for validate_dict function."""

    def test_dict_passes(self):
        validate_dict({"a": 1}, "config")

    def test_non_dict_raises(self):
        with pytest.raises(ParamValidationError):
            validate_dict([1], "config")
