"""
Unit tests for the number mapping configuration.
"""

import unittest
from decimal import Decimal

import pytest

from oracle_number.config import NumberMappingConfig
from oracle_number.constants import UNDEFINED_SCALE
from oracle_number.exc import ConfigurationInvalidError
from oracle_number.types import RoundingMode, TargetKind, UnsupportedTypeHandling


class TestNumberMappingConfig(unittest.TestCase):
    def test_defaults(self):
        config = NumberMappingConfig()
        self.assertEqual(
            config.unsupported_type_strategy, UnsupportedTypeHandling.IGNORE
        )
        self.assertEqual(config.number_exceeds_limits, UnsupportedTypeHandling.ROUND)
        self.assertEqual(config.number_default_type, TargetKind.DECIMAL)
        self.assertEqual(config.number_zero_scale_type, TargetKind.UNDEFINED)
        self.assertEqual(config.number_null_scale_type, TargetKind.UNDEFINED)
        self.assertEqual(config.number_round_mode, RoundingMode.HALF_EVEN)
        self.assertEqual(config.decimal_default_scale, UNDEFINED_SCALE)
        self.assertEqual(config.ratio_default_scale, UNDEFINED_SCALE)
        self.assertEqual(config.double_default_scale, UNDEFINED_SCALE)
        self.assertFalse(config.has_decimal_default_scale)
        self.assertFalse(config.has_ratio_default_scale)
        self.assertFalse(config.frozen)

    def test_scale_settings_conflict(self):
        config = NumberMappingConfig()
        config.decimal_default_scale = UNDEFINED_SCALE
        config.ratio_default_scale = UNDEFINED_SCALE
        config.decimal_default_scale = 8
        with self.assertRaises(ConfigurationInvalidError):
            config.ratio_default_scale = 0.3

    def test_scale_settings_conflict_reverse_order(self):
        config = NumberMappingConfig()
        config.ratio_default_scale = 0.3
        with self.assertRaises(ConfigurationInvalidError):
            config.decimal_default_scale = 8
        self.assertEqual(config.decimal_default_scale, UNDEFINED_SCALE)

    def test_scale_settings_can_be_swapped_after_reset(self):
        config = NumberMappingConfig()
        config.decimal_default_scale = 8
        config.decimal_default_scale = UNDEFINED_SCALE
        config.ratio_default_scale = "0.5"
        self.assertEqual(config.ratio_default_scale, Decimal("0.5"))
        config.ratio_default_scale = -127
        config.decimal_default_scale = 4
        self.assertEqual(config.decimal_default_scale, 4)

    def test_rounding_mode_checked_on_read(self):
        config = NumberMappingConfig()
        config.number_exceeds_limits = "ROUND"
        # either setting may come first, so the write itself succeeds
        config.number_round_mode = "UNNECESSARY"
        with self.assertRaises(ConfigurationInvalidError):
            config.number_round_mode

        config.number_exceeds_limits = "VARCHAR"
        self.assertEqual(config.number_round_mode, RoundingMode.UNNECESSARY)

    def test_unknown_enum_values(self):
        config = NumberMappingConfig()
        with self.assertRaises(ConfigurationInvalidError):
            config.number_exceeds_limits = "ASDF"
        with self.assertRaises(ConfigurationInvalidError):
            config.number_round_mode = "ASDF"
        with self.assertRaises(ConfigurationInvalidError):
            config.unsupported_type_strategy = "ASDF"

    def test_round_is_not_an_unsupported_type_strategy(self):
        config = NumberMappingConfig()
        with self.assertRaises(ConfigurationInvalidError) as cm:
            config.unsupported_type_strategy = "ROUND"
        self.assertIn("ROUND", str(cm.exception))
        self.assertEqual(
            config.unsupported_type_strategy, UnsupportedTypeHandling.IGNORE
        )

        config.number_exceeds_limits = "round"
        self.assertEqual(config.number_exceeds_limits, UnsupportedTypeHandling.ROUND)

    def test_number_types_are_case_insensitive(self):
        config = NumberMappingConfig()
        config.number_default_type = "double"
        config.number_zero_scale_type = "Integer"
        config.number_null_scale_type = "VARCHAR"
        self.assertEqual(config.number_default_type, TargetKind.DOUBLE)
        self.assertEqual(config.number_zero_scale_type, TargetKind.INTEGER)
        self.assertEqual(config.number_null_scale_type, TargetKind.VARCHAR)

    def test_number_type_rejects_other_types(self):
        config = NumberMappingConfig()
        for value in ("DATE", "BIGINT", "UNDEFINED", "nonsense"):
            with self.assertRaises(ConfigurationInvalidError) as cm:
                config.number_default_type = value
            message = str(cm.exception)
            self.assertIn("Allowed Values", message)
            for allowed in ("DECIMAL", "DOUBLE", "INTEGER", "VARCHAR"):
                self.assertIn(allowed, message)

    def test_scale_type_overrides_can_be_cleared(self):
        config = NumberMappingConfig()
        config.number_zero_scale_type = "INTEGER"
        config.number_null_scale_type = "DOUBLE"
        config.number_null_scale_type = ""
        # clearing one override leaves the other untouched
        self.assertEqual(config.number_null_scale_type, TargetKind.UNDEFINED)
        self.assertEqual(config.number_zero_scale_type, TargetKind.INTEGER)
        config.number_zero_scale_type = None
        self.assertEqual(config.number_zero_scale_type, TargetKind.UNDEFINED)

    def test_decimal_default_scale_limits(self):
        config = NumberMappingConfig()
        config.decimal_default_scale = 38
        self.assertEqual(config.decimal_default_scale, 38)
        config.decimal_default_scale = "0"
        self.assertEqual(config.decimal_default_scale, 0)
        with self.assertRaises(ConfigurationInvalidError):
            config.decimal_default_scale = 39
        with self.assertRaises(ConfigurationInvalidError):
            config.decimal_default_scale = -1
        with self.assertRaises(ConfigurationInvalidError):
            config.decimal_default_scale = "eight"

    def test_ratio_default_scale_limits(self):
        config = NumberMappingConfig()
        config.ratio_default_scale = 1.0
        self.assertEqual(config.ratio_default_scale, Decimal("1.0"))
        with self.assertRaises(ConfigurationInvalidError):
            config.ratio_default_scale = 1.1
        with self.assertRaises(ConfigurationInvalidError):
            config.ratio_default_scale = -0.5
        with self.assertRaises(ConfigurationInvalidError):
            config.ratio_default_scale = "NaN"
        with self.assertRaises(ConfigurationInvalidError):
            config.ratio_default_scale = "half"

    def test_ratio_keeps_decimal_form_of_floats(self):
        config = NumberMappingConfig()
        config.ratio_default_scale = 0.35
        self.assertEqual(config.ratio_default_scale, Decimal("0.35"))

    def test_double_default_scale_limits(self):
        config = NumberMappingConfig()
        config.double_default_scale = 15
        self.assertEqual(config.double_default_scale, 15)
        with self.assertRaises(ConfigurationInvalidError):
            config.double_default_scale = 16
        with self.assertRaises(ConfigurationInvalidError):
            config.double_default_scale = 39
        config.double_default_scale = UNDEFINED_SCALE
        self.assertEqual(config.double_default_scale, UNDEFINED_SCALE)

    def test_frozen_config_rejects_changes(self):
        config = NumberMappingConfig().freeze()
        self.assertTrue(config.frozen)
        with self.assertRaises(ConfigurationInvalidError):
            config.number_default_type = "DOUBLE"
        with self.assertRaises(ConfigurationInvalidError):
            config.decimal_default_scale = 2
        self.assertEqual(config.number_default_type, TargetKind.DECIMAL)

    def test_error_context(self):
        config = NumberMappingConfig()
        with self.assertRaises(ConfigurationInvalidError) as cm:
            config.decimal_default_scale = 40
        self.assertEqual(
            cm.exception.context["key"], "oracle.number.default-scale.decimal"
        )
        self.assertIn("40", cm.exception.message_with_context())


class TestConfigProperties:
    def test_explicit_property_mappings(self):
        properties = {
            "unsupported-type.handling-strategy": "FAIL",
            "oracle.number.default-type": "DOUBLE",
            "oracle.number.round-mode": "UP",
            "oracle.number.zero-scale-type": "INTEGER",
            "oracle.number.null-scale-type": "DOUBLE",
            "oracle.number.default-scale.ratio": "-127",
            "oracle.number.default-scale.decimal": "14",
            "oracle.number.default-scale.double": "6",
            "oracle.number.exceeds-limits": "IGNORE",
            # owned by the connection layer
            "oracle.row-prefetch": "30",
        }

        expected = NumberMappingConfig()
        expected.unsupported_type_strategy = "FAIL"
        expected.number_default_type = "DOUBLE"
        expected.number_zero_scale_type = "INTEGER"
        expected.number_null_scale_type = "DOUBLE"
        expected.number_round_mode = "UP"
        expected.ratio_default_scale = -127
        expected.decimal_default_scale = 14
        expected.double_default_scale = 6
        expected.number_exceeds_limits = "IGNORE"

        config = NumberMappingConfig.from_properties(properties)
        assert config == expected
        assert config.frozen
        assert config.decimal_default_scale == 14
        assert config.number_round_mode == RoundingMode.UP

    def test_empty_properties_give_defaults(self):
        assert NumberMappingConfig.from_properties({}) == NumberMappingConfig()

    def test_conflicting_properties(self):
        with pytest.raises(ConfigurationInvalidError):
            NumberMappingConfig.from_properties(
                {
                    "oracle.number.default-scale.decimal": "8",
                    "oracle.number.default-scale.ratio": "0.5",
                }
            )

    def test_round_trip_through_properties(self):
        config = NumberMappingConfig()
        config.number_null_scale_type = "DECIMAL"
        config.ratio_default_scale = "0.4"
        config.number_round_mode = "HALF_UP"

        properties = config.to_properties()
        assert properties["oracle.number.default-scale.ratio"] == "0.4"
        assert properties["oracle.number.zero-scale-type"] == ""
        assert properties["oracle.number.round-mode"] == "HALF_UP"
        assert NumberMappingConfig.from_properties(properties) == config


if __name__ == "__main__":
    unittest.main()
