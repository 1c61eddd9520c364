from __future__ import annotations

import unittest

from app.validators.entity_validators import (
    COORDINATES_MESSAGE,
    validate_campaign,
    validate_campaign_name,
    validate_map_settings,
    validate_unit,
    validate_unit_selection,
)


class TestUnitValidator(unittest.TestCase):
    def test_valid_unit_has_no_errors(self) -> None:
        errors = validate_unit(
            {
                "unit_id": "UNI001",
                "location": "Downtown Cairo",
                "governorate": "Cairo",
                "lat_lng": "30.0444,31.2357",
            }
        )
        self.assertEqual(errors, [])

    def test_reports_every_invalid_field_in_order(self) -> None:
        errors = validate_unit({"unit_id": "  ", "location": "", "governorate": None, "lat_lng": "95,0"})

        self.assertEqual(
            [error.field for error in errors],
            ["unit_id", "location", "governorate", "lat_lng"],
        )
        self.assertEqual(errors[0].message, "Unit ID is required")
        self.assertEqual(errors[-1].message, COORDINATES_MESSAGE)

    def test_missing_keys_are_reported(self) -> None:
        errors = validate_unit({})
        self.assertEqual(len(errors), 4)


class TestCampaignValidators(unittest.TestCase):
    def test_empty_name(self) -> None:
        errors = validate_campaign_name("")
        self.assertEqual(len(errors), 1)
        self.assertEqual(errors[0].message, "Campaign name is required")

    def test_short_name(self) -> None:
        errors = validate_campaign_name("ab")
        self.assertEqual(len(errors), 1)
        self.assertIn("at least 3", errors[0].message)

    def test_long_name(self) -> None:
        errors = validate_campaign_name("a" * 101)
        self.assertEqual(len(errors), 1)
        self.assertIn("at most 100", errors[0].message)

    def test_name_is_measured_after_trimming(self) -> None:
        self.assertEqual(len(validate_campaign_name("  ab  ")), 1)
        self.assertEqual(validate_campaign_name("  " + "a" * 100 + "  "), [])

    def test_valid_name(self) -> None:
        self.assertEqual(validate_campaign_name("Summer 2024"), [])

    def test_unit_selection(self) -> None:
        self.assertEqual(len(validate_unit_selection([])), 1)
        self.assertEqual(validate_unit_selection(["u1"]), [])

    def test_campaign_reports_name_and_selection_together(self) -> None:
        errors = validate_campaign("", [])
        self.assertEqual([error.field for error in errors], ["name", "unit_ids"])


class TestMapSettingsValidator(unittest.TestCase):
    def _validate(self, **overrides: object):
        values = {
            "default_zoom": 10,
            "default_center_lat": 30.0444,
            "default_center_lng": 31.2357,
            "map_style": "default",
            "marker_style": "default",
        }
        values.update(overrides)
        return validate_map_settings(**values)

    def test_defaults_are_valid(self) -> None:
        self.assertEqual(self._validate(), [])

    def test_zoom_out_of_range(self) -> None:
        for zoom in (0, 21, 5.5, True):
            with self.subTest(zoom=zoom):
                fields = [error.field for error in self._validate(default_zoom=zoom)]
                self.assertEqual(fields, ["default_zoom"])

    def test_center_out_of_range(self) -> None:
        errors = self._validate(default_center_lat=120.0)
        self.assertEqual([(error.field, error.message) for error in errors], [("coordinates", "Invalid coordinates")])

    def test_center_checked_before_rounding(self) -> None:
        for overrides in (
            {"default_center_lat": 90.0000004},
            {"default_center_lng": -180.0000004},
            {"default_center_lat": float("nan")},
            {"default_center_lng": True},
        ):
            with self.subTest(**overrides):
                errors = self._validate(**overrides)
                self.assertEqual(
                    [(error.field, error.message) for error in errors], [("coordinates", "Invalid coordinates")]
                )

    def test_unsupported_styles(self) -> None:
        fields = [error.field for error in self._validate(map_style="satellite", marker_style="pin")]
        self.assertEqual(fields, ["map_style", "marker_style"])


if __name__ == "__main__":
    unittest.main()
