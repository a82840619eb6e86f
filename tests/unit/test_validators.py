"""
Unit tests for per-field validators.

Includes property-based testing with hypothesis for validators.
"""

import math

import pytest
from hypothesis import given
from hypothesis import strategies as st

from suggest_validation.core.validators import (
    INVALID_ENUM,
    INVALID_TYPE,
    OUT_OF_RANGE,
    REQUIRED,
    EnumValidator,
    FieldCheckError,
    MonetaryValidator,
    RangeValidator,
    RequiredFieldValidator,
    TypeValidator,
)


class TestRequiredFieldValidator:
    """Tests for RequiredFieldValidator"""

    def test_present_field_passes(self):
        """Test validation passes for present field"""
        validator = RequiredFieldValidator("amenity")
        record = {"amenity": "toilets"}
        validator.validate(record["amenity"], record)  # Should not raise

    def test_missing_field_raises_error(self):
        """Test validation fails for missing field"""
        validator = RequiredFieldValidator("amenity")

        with pytest.raises(FieldCheckError) as exc_info:
            validator.validate(None, {})

        assert exc_info.value.code == REQUIRED
        assert exc_info.value.field_name == "amenity"
        assert exc_info.value.message == "amenity is required"

    def test_null_field_raises_error(self):
        """Test validation fails for an explicit null"""
        validator = RequiredFieldValidator("fee")
        record = {"fee": None}

        with pytest.raises(FieldCheckError) as exc_info:
            validator.validate(record["fee"], record)

        assert exc_info.value.code == REQUIRED

    def test_false_and_empty_string_count_as_present(self):
        """Test falsy but non-null values satisfy the requirement"""
        validator = RequiredFieldValidator("fee")
        validator.validate(False, {"fee": False})
        validator.validate("", {"fee": ""})


class TestTypeValidator:
    """Tests for TypeValidator"""

    def test_number_accepts_int_and_float(self):
        validator = TypeValidator("lat", {"expected_type": "number"})
        validator.validate(51, {})
        validator.validate(51.5, {})

    def test_boolean_is_not_a_number(self):
        """Test booleans are rejected where a number is expected"""
        validator = TypeValidator("lat", {"expected_type": "number"})

        with pytest.raises(FieldCheckError) as exc_info:
            validator.validate(True, {})

        assert exc_info.value.code == INVALID_TYPE
        assert exc_info.value.message == "lat must be a number"

    def test_numeric_string_is_not_coerced(self):
        """Test strict checks never coerce strings"""
        validator = TypeValidator("lat", {"expected_type": "number"})

        with pytest.raises(FieldCheckError):
            validator.validate("51.5", {})

    def test_boolean_type(self):
        validator = TypeValidator("fee", {"expected_type": "boolean"})
        validator.validate(False, {})

        with pytest.raises(FieldCheckError):
            validator.validate("no", {})

    def test_string_type(self):
        validator = TypeValidator("name", {"expected_type": "string"})
        validator.validate("Test Toilet", {})

        with pytest.raises(FieldCheckError):
            validator.validate(42, {})

    def test_missing_expected_type_raises(self):
        with pytest.raises(ValueError, match="expected_type"):
            TypeValidator("lat")

    def test_unsupported_type_raises(self):
        with pytest.raises(ValueError, match="Unsupported type"):
            TypeValidator("lat", {"expected_type": "date"})

    @given(st.text())
    def test_property_any_string_passes_string_check(self, value):
        """Property test: every str passes a string check"""
        TypeValidator("name", {"expected_type": "string"}).validate(value, {})


class TestRangeValidator:
    """Tests for RangeValidator"""

    def test_value_within_range(self):
        validator = RangeValidator("lat", {"min": -90, "max": 90})
        validator.validate(51.5, {})

    def test_bounds_are_inclusive(self):
        validator = RangeValidator("lat", {"min": -90, "max": 90})
        validator.validate(-90, {})
        validator.validate(90, {})

    def test_value_above_max(self):
        validator = RangeValidator(
            "lat", {"min": -90, "max": 90, "message": "Latitude must be between -90 and 90 degrees"}
        )

        with pytest.raises(FieldCheckError) as exc_info:
            validator.validate(95, {})

        assert exc_info.value.code == OUT_OF_RANGE
        assert exc_info.value.message == "Latitude must be between -90 and 90 degrees"

    def test_non_finite_values_are_out_of_range(self):
        validator = RangeValidator("lng", {"min": -180, "max": 180})

        for value in (math.nan, math.inf, -math.inf):
            with pytest.raises(FieldCheckError):
                validator.validate(value, {})

    def test_integers_beyond_float_range_are_out_of_range(self):
        validator = RangeValidator("lat", {"min": -90, "max": 90})

        for value in (10**400, -(10**400)):
            with pytest.raises(FieldCheckError) as exc_info:
                validator.validate(value, {})
            assert exc_info.value.code == OUT_OF_RANGE

    def test_requires_a_bound(self):
        with pytest.raises(ValueError):
            RangeValidator("lat", {})

    @given(st.floats(min_value=-180, max_value=180))
    def test_property_values_in_range_pass(self, value):
        """Property test: all finite values within range should pass"""
        RangeValidator("lng", {"min": -180, "max": 180}).validate(value, {})

    @given(st.floats(min_value=90.0001, max_value=1e6))
    def test_property_values_above_range_fail(self, value):
        """Property test: all values above max should fail"""
        with pytest.raises(FieldCheckError):
            RangeValidator("lat", {"min": -90, "max": 90}).validate(value, {})


class TestEnumValidator:
    """Tests for EnumValidator"""

    def test_allowed_value_passes(self):
        validator = EnumValidator("wheelchair", {"allowed": ["yes", "no", "limited", "unknown"]})
        validator.validate("limited", {})

    def test_disallowed_value_fails(self):
        validator = EnumValidator("access", {"allowed": ["yes", "private", "customers"]})

        with pytest.raises(FieldCheckError) as exc_info:
            validator.validate("public", {})

        assert exc_info.value.code == INVALID_ENUM
        assert exc_info.value.message == 'access must be one of: ["yes", "private", "customers"]'

    def test_boolean_is_never_a_member(self):
        validator = EnumValidator("male", {"allowed": ["yes", "no"]})

        with pytest.raises(FieldCheckError):
            validator.validate(True, {})

    def test_requires_allowed_values(self):
        with pytest.raises(ValueError, match="allowed"):
            EnumValidator("amenity")


class TestMonetaryValidator:
    """Tests for MonetaryValidator"""

    @pytest.mark.parametrize("value", [True, False, "0.50 GBP", 0, 0.5])
    def test_accepted_representations(self, value):
        MonetaryValidator("fee").validate(value, {})

    def test_null_is_rejected(self):
        with pytest.raises(FieldCheckError) as exc_info:
            MonetaryValidator("charge").validate(None, {})

        assert exc_info.value.code == INVALID_TYPE
        assert exc_info.value.message == "charge must be a boolean, string, or number"
