"""
Unit tests for the tiered validator.

Covers the core phase (required + strict checks, fail-fast), the per-tier
dispatch of remaining properties and compatible-mode defaulting.
"""

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from suggest_validation.core.tiers import (
    TYPE_COERCION,
    TYPE_MISMATCH,
    TieredValidator,
    ValidationMode,
)
from suggest_validation.core.validators import INVALID_ENUM, INVALID_TYPE, OUT_OF_RANGE, REQUIRED


@pytest.fixture
def validator(tier_config) -> TieredValidator:
    return TieredValidator(tier_config)


class TestCorePhase:
    """Tests for required core properties"""

    def test_valid_record_in_strict_mode(self, validator, valid_record):
        """Test the canonical happy path"""
        verdict = validator.validate(valid_record, ValidationMode.STRICT)

        assert verdict.is_valid
        assert verdict.errors == ()
        assert verdict.tier_summary["core"].model_dump() == {"provided": 7, "required": 7, "valid": 7}

    def test_strict_mode_does_not_require_id(self, validator, valid_record):
        """Test @id is not a core property"""
        assert "@id" not in valid_record
        assert validator.validate(valid_record, "strict").is_valid

    def test_latitude_out_of_range(self, validator, valid_record):
        valid_record["lat"] = 95
        verdict = validator.validate(valid_record)

        assert not verdict.is_valid
        assert len(verdict.errors) == 1
        error = verdict.errors[0]
        assert (error.field, error.code, error.tier) == ("lat", OUT_OF_RANGE, "core")
        assert error.message == "Latitude must be between -90 and 90 degrees"
        assert verdict.errors_by_tier["core"] == 1

    def test_longitude_out_of_range(self, validator, valid_record):
        valid_record["lng"] = -180.5
        verdict = validator.validate(valid_record)

        assert verdict.error_fields() == ["lng"]
        assert verdict.errors[0].message == "Longitude must be between -180 and 180 degrees"

    def test_missing_core_property(self, validator, valid_record):
        del valid_record["opening_hours"]
        verdict = validator.validate(valid_record)

        assert not verdict.is_valid
        assert verdict.errors[0].code == REQUIRED
        assert verdict.errors[0].field == "opening_hours"
        assert verdict.tier_summary["core"].model_dump() == {"provided": 6, "required": 7, "valid": 6}

    def test_null_core_property_is_required_error(self, validator, valid_record):
        valid_record["amenity"] = None
        verdict = validator.validate(valid_record)

        assert verdict.errors[0].code == REQUIRED

    def test_boolean_latitude_is_invalid_type(self, validator, valid_record):
        valid_record["lat"] = True
        verdict = validator.validate(valid_record)

        assert verdict.errors[0].code == INVALID_TYPE
        assert verdict.errors[0].message == "lat must be a number"

    def test_invalid_enum_value(self, validator, valid_record):
        valid_record["access"] = "public"
        verdict = validator.validate(valid_record)

        assert verdict.errors[0].code == INVALID_ENUM
        assert verdict.errors[0].tier == "core"

    def test_unknown_wheelchair_value_is_allowed(self, validator, valid_record):
        valid_record["wheelchair"] = "unknown"
        assert validator.validate(valid_record).is_valid

    def test_all_core_errors_are_collected(self, validator):
        """Test every core property is checked before the fail-fast stop"""
        verdict = validator.validate({"lat": 95, "lng": 200})

        assert verdict.errors_by_tier["core"] == 7
        assert sorted(verdict.error_fields()) == sorted(
            ["access", "amenity", "fee", "lat", "lng", "opening_hours", "wheelchair"]
        )

    def test_core_fail_fast_skips_other_tiers(self, validator, valid_record):
        """Test no other tier is inspected once core fails under a strict core tier"""
        valid_record.update({"lat": 95, "name": 42, "description": 7})
        verdict = validator.validate(valid_record)

        assert verdict.error_fields() == ["lat"]
        assert verdict.warnings == ()
        assert verdict.tier_summary["high_frequency"].provided == 0
        assert verdict.tier_summary["optional"].provided == 0

    def test_non_strict_core_continues_to_other_tiers(self, tier_builder):
        """Test a non-strict core tier lets later tiers report too"""
        config = tier_builder.core_strict(False).build()
        verdict = TieredValidator(config).validate({"lat": 95, "lng": 0, "amenity": "toilets", "name": 42})

        assert sorted(verdict.error_fields()) == ["lat", "name"]
        assert verdict.errors_by_tier == {"core": 1, "high_frequency": 1, "optional": 0, "specialized": 0}


class TestRemainingTiers:
    """Tests for high-frequency, optional, specialized and unknown properties"""

    def test_high_frequency_checked_strictly(self, validator, valid_record):
        valid_record["male"] = "maybe"
        verdict = validator.validate(valid_record)

        assert not verdict.is_valid
        error = verdict.errors[0]
        assert (error.field, error.code, error.tier) == ("male", INVALID_ENUM, "high_frequency")
        assert verdict.tier_summary["high_frequency"].model_dump() == {"provided": 1, "required": 0, "valid": 0}

    def test_high_frequency_number(self, validator, valid_record):
        valid_record["level"] = "ground"
        verdict = validator.validate(valid_record)

        assert verdict.errors[0].code == INVALID_TYPE

    def test_enum_without_allowed_values_passes(self, validator, valid_record):
        valid_record["toilets:position"] = "seated;urinal"
        assert validator.validate(valid_record).is_valid

    def test_optional_string_coercion_warning(self, validator, valid_record):
        valid_record["description"] = 42
        verdict = validator.validate(valid_record)

        assert verdict.is_valid
        assert len(verdict.warnings) == 1
        warning = verdict.warnings[0]
        assert (warning.field, warning.code, warning.tier) == ("description", TYPE_COERCION, "optional")
        assert verdict.tier_summary["optional"].valid == 1

    def test_optional_non_string_types_never_warn(self, validator, valid_record):
        valid_record["layer"] = "basement"
        verdict = validator.validate(valid_record)

        assert verdict.is_valid
        assert verdict.warnings == ()

    def test_specialized_type_mismatch_warning(self, validator, valid_record):
        valid_record["wikidata"] = 12345
        verdict = validator.validate(valid_record)

        assert verdict.is_valid
        assert verdict.warnings[0].code == TYPE_MISMATCH
        assert verdict.warnings[0].tier == "specialized"

    def test_unknown_property_is_specialized_and_accepted(self, validator, valid_record):
        valid_record["toilets:colour"] = ["not", "checked"]
        verdict = validator.validate(valid_record)

        assert verdict.is_valid
        assert verdict.warnings == ()
        assert verdict.tier_summary["specialized"].model_dump() == {"provided": 1, "required": 0, "valid": 1}

    def test_tier_summary_covers_every_tier(self, validator, valid_record):
        verdict = validator.validate(valid_record)
        assert set(verdict.tier_summary) == {"core", "high_frequency", "optional", "specialized"}

    @settings(max_examples=50)
    @given(st.dictionaries(st.text(min_size=1).map(lambda s: f"x-{s}"), st.text(), max_size=10))
    def test_property_unknown_fields_never_change_validity(self, tier_config, extra):
        """Property test: adding unknown fields never turns a valid record invalid"""
        record = {
            "lat": 51.5, "lng": -0.12, "amenity": "toilets", "wheelchair": "yes",
            "access": "yes", "opening_hours": "24/7", "fee": False,
        }
        record.update(extra)
        verdict = TieredValidator(tier_config).validate(record)

        assert verdict.is_valid
        assert verdict.tier_summary["specialized"].provided == len(extra)


class TestCompatibleMode:
    """Tests for compatible-mode defaulting"""

    def test_minimal_legacy_record_is_valid(self, validator):
        verdict = validator.validate({"lat": 51.5, "lng": -0.12}, ValidationMode.COMPATIBLE)

        assert verdict.is_valid
        assert verdict.tier_summary["core"].valid == 7
        # @id is synthesized into the high-frequency tier
        assert verdict.tier_summary["high_frequency"].provided == 1

    def test_same_record_fails_in_strict_mode(self, validator):
        verdict = validator.validate({"lat": 51.5, "lng": -0.12}, ValidationMode.STRICT)

        assert not verdict.is_valid
        assert all(error.code == REQUIRED for error in verdict.errors)

    def test_supplied_values_are_still_checked(self, validator):
        verdict = validator.validate({"lat": 51.5, "lng": -0.12, "access": "public"}, "compatible")

        assert verdict.error_fields() == ["access"]

    def test_mode_from_api_version(self):
        assert ValidationMode.from_api_version("v2") is ValidationMode.STRICT
        assert ValidationMode.from_api_version("v1") is ValidationMode.COMPATIBLE

    def test_unknown_mode_rejected(self, validator, valid_record):
        with pytest.raises(ValueError):
            validator.validate(valid_record, "lenient")
