import pytest

from recipebox.models.recipe_schema import Ingredient
from recipebox.normalize.units import (
    CANONICAL_UNITS,
    convert_ingredient,
    convert_to_metric_base,
    format_quantity,
    normalize_unit,
    parse_quantity,
    unit_system,
)


def test_parse_quantity_forms():
    assert parse_quantity("2") == 2
    assert parse_quantity("2.5") == 2.5
    assert parse_quantity("1/2") == 0.5
    assert parse_quantity("1 1/2") == 1.5
    assert parse_quantity("½") == 0.5
    assert parse_quantity("1½") == 1.5


def test_parse_quantity_unconvertible():
    assert parse_quantity("to taste") is None
    assert parse_quantity("A pinch") is None
    assert parse_quantity("") is None
    assert parse_quantity(None) is None
    assert parse_quantity("1-2") is None
    assert parse_quantity("1/0") is None
    assert parse_quantity("some") is None


def test_normalize_unit_spellings():
    assert normalize_unit("Tablespoons") == "tbsp"
    assert normalize_unit("tbs") == "tbsp"
    assert normalize_unit("Tbs.") == "tbsp"
    assert normalize_unit(" grams ") == "g"
    assert normalize_unit("pound") == "lbs"
    assert normalize_unit("Fluid Ounces") == "fl oz"
    assert normalize_unit("cup") == "cups"
    assert normalize_unit("") == ""


def test_normalize_unit_unknown_passes_through():
    assert normalize_unit("clove") == "clove"
    assert normalize_unit("Handful") == "handful"


def test_known_spellings_land_in_canonical_vocabulary():
    for raw in ["c", "teaspoons", "litres", "kilogram", "ounces", "lb", "each", "ml"]:
        assert normalize_unit(raw) in CANONICAL_UNITS


def test_unit_system():
    assert unit_system("ml") == "metric"
    assert unit_system("kilograms") == "metric"
    assert unit_system("cups") == "imperial"
    assert unit_system("fl oz") == "imperial"
    assert unit_system("unit") == "neutral"
    assert unit_system("clove") == "neutral"


def test_convert_to_metric_base():
    assert convert_to_metric_base("2", "cups") == (500.0, "ml")
    amount = convert_to_metric_base("1", "lbs")
    assert amount.base_unit == "g"
    assert amount.value == pytest.approx(453.592)
    assert convert_to_metric_base("to taste", "cups") is None
    assert convert_to_metric_base("2", "unit") is None
    assert convert_to_metric_base("2", "handful") is None


def test_convert_cups_and_tbsp_to_metric():
    assert convert_ingredient({"quantity": "2", "unit": "cups", "name": "flour"}, "metric") == {
        "quantity": "500",
        "unit": "ml",
    }
    assert convert_ingredient({"quantity": "1", "unit": "tbsp", "name": "sugar"}, "metric") == {
        "quantity": "15",
        "unit": "ml",
    }
    assert convert_ingredient({"quantity": "1/2", "unit": "cups", "name": "milk"}, "metric") == {
        "quantity": "125",
        "unit": "ml",
    }


def test_convert_grams_to_imperial_prefers_oz_below_a_pound():
    result = convert_ingredient(Ingredient(quantity="250", unit="g", name="sugar"), "imperial")
    assert result["unit"] == "oz"
    assert float(result["quantity"]) == pytest.approx(8.8, abs=0.05)


def test_convert_weight_promotions():
    assert convert_ingredient({"quantity": "1", "unit": "kg", "name": "flour"}, "imperial") == {
        "quantity": "2.2",
        "unit": "lbs",
    }
    assert convert_ingredient({"quantity": "3", "unit": "lbs", "name": "beef"}, "metric") == {
        "quantity": "1.36",
        "unit": "kg",
    }


def test_convert_ml_to_cups():
    assert convert_ingredient({"quantity": "500", "unit": "ml", "name": "water"}, "imperial") == {
        "quantity": "2",
        "unit": "cups",
    }


def test_imperial_volume_steps_down_to_spoons():
    assert convert_ingredient({"quantity": "30", "unit": "ml", "name": "oil"}, "imperial") == {
        "quantity": "2",
        "unit": "tbsp",
    }
    assert convert_ingredient({"quantity": "5", "unit": "ml", "name": "vanilla"}, "imperial") == {
        "quantity": "1",
        "unit": "tsp",
    }
    result = convert_ingredient({"quantity": "2", "unit": "ml", "name": "extract"}, "imperial")
    assert result["unit"] == "fl oz"


def test_litre_promotion():
    assert convert_ingredient({"quantity": "4", "unit": "cups", "name": "stock"}, "metric") == {
        "quantity": "1",
        "unit": "l",
    }


def test_no_conversion_cases():
    assert convert_ingredient({"quantity": "2", "unit": "unit", "name": "eggs"}, "metric") is None
    assert convert_ingredient({"quantity": "to taste", "unit": "cups", "name": "salt"}, "metric") is None
    assert convert_ingredient({"quantity": "200", "unit": "g", "name": "rice"}, "metric") is None
    assert convert_ingredient({"quantity": "2", "unit": "cloves", "name": "garlic"}, "imperial") is None


def test_unknown_target_system_rejected():
    with pytest.raises(ValueError):
        convert_ingredient({"quantity": "1", "unit": "cups", "name": "x"}, "nautical")


def test_volume_round_trip_stays_within_a_display_unit():
    for qty in ["100", "250", "330", "750", "1200"]:
        imperial = convert_ingredient({"quantity": qty, "unit": "ml", "name": "water"}, "imperial")
        back = convert_ingredient({"name": "water", **imperial}, "metric")
        back_ml = float(back["quantity"]) * (1000 if back["unit"] == "l" else 1)
        assert abs(back_ml - float(qty)) <= 1


def test_format_quantity():
    assert format_quantity(500.0) == "500"
    assert format_quantity(2.004) == "2"
    assert format_quantity(8.8184) == "8.82"
    assert format_quantity(1.5) == "1.5"
    assert format_quantity(0.333333) == "0.33"
    assert format_quantity(0.0035274) == "0.0035"
    assert format_quantity(0.004) == "0.004"
    assert format_quantity(0.0) == "0"


def test_numeric_quantity_from_a_mapping():
    assert convert_ingredient({"quantity": 2, "unit": "cups", "name": "flour"}, "metric") == {
        "quantity": "500",
        "unit": "ml",
    }
    assert convert_ingredient({"quantity": 1.5, "unit": "tbsp", "name": "oil"}, "metric") == {
        "quantity": "22.5",
        "unit": "ml",
    }


def test_tiny_weight_does_not_show_as_zero():
    result = convert_ingredient({"quantity": "0.1", "unit": "g", "name": "saffron"}, "imperial")
    assert result == {"quantity": "0.0035", "unit": "oz"}
