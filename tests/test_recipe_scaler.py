"""Tests for whole-recipe scaling, scale stepping and export."""

import json

import pytest

from error_handling import InvalidScaleError, ValidationError
from recipe_scaler import (
    RecipeScaler, ScalingOptions, decrement_scale, format_scale_label, increment_scale,
    main, validate_scale
)


@pytest.fixture
def scaler():
    return RecipeScaler()


class TestScaleSteps:

    def test_increment(self):
        assert increment_scale(1) == 1.5
        assert increment_scale(3) == 3.5

    def test_decrement_has_floor(self):
        assert decrement_scale(2) == 1.5
        assert decrement_scale(1) == 0.5
        assert decrement_scale(0.5) == 0.5

    def test_label(self):
        assert format_scale_label(1.0) == "1"
        assert format_scale_label(2.5) == "2.5"
        assert format_scale_label(0.5) == "0.5"


class TestValidateScale:

    @pytest.mark.parametrize("value, expected", [(2, 2.0), ("1.5", 1.5), (0.25, 0.25)])
    def test_valid(self, value, expected):
        assert validate_scale(value) == expected

    @pytest.mark.parametrize("value", [0, -1, "abc", None, "nan", "inf", True])
    def test_invalid(self, value):
        with pytest.raises(InvalidScaleError):
            validate_scale(value)

    def test_options_reject_unknown_mode(self):
        with pytest.raises(ValidationError):
            ScalingOptions(instruction_mode="regex")


class TestRecipeScaler:

    def test_scale_recipe(self, scaler, catalog):
        scaled = scaler.scale_recipe(catalog.get("kimchi-stew"), ScalingOptions(scale_factor=4))

        lines = [ingredient.line for ingredient in scaled.ingredients]
        assert lines == [
            "1.2\u202fkg pork belly",
            "1.2\u202fkg kimchi",
            "2\u202fl stock",
            "1-2 spring onions",
            "sesame seeds",
        ]
        assert scaled.toppings[0].line == "4\u202ftsp sesame oil"
        assert scaled.instructions == [
            "Fry 1.2\u202fkg with 1.2\u202fkg.",
            "Add 2\u202fl and simmer for **20 minutes**.",
            "Serve with {ingredient.9}.",
        ]

    def test_default_options_are_identity(self, scaler, catalog):
        scaled = scaler.scale_recipe(catalog.get("kimchi-stew"))
        assert scaled.scaling_factor == 1.0
        assert scaled.ingredients[0].display == "300\u202fg"
        assert scaled.instruction_mode == "placeholder"

    def test_recipe_without_toppings(self, scaler, catalog):
        scaled = scaler.scale_recipe(catalog.get("checca"), ScalingOptions(scale_factor=2))
        assert scaled.toppings is None

    def test_free_text_mode(self, scaler, catalog):
        options = ScalingOptions(scale_factor=4, instruction_mode="free_text")
        scaled = scaler.scale_recipe(catalog.get("checca"), options)
        assert scaled.instructions == ["Cook 1 kg spaghetti for 10 minutes."]

    def test_configured_default_mode(self, catalog):
        scaler = RecipeScaler({"instruction_mode": "free_text"})
        scaled = scaler.scale_recipe(catalog.get("checca"))
        assert scaled.instruction_mode == "free_text"

    def test_export_json(self, scaler, catalog):
        scaled = scaler.scale_recipe(catalog.get("checca"), ScalingOptions(scale_factor=2))
        exported = json.loads(scaler.export_scaled_recipe(scaled, "json"))
        assert exported["title"] == "pasta alla checca"
        assert exported["ingredients"][0]["amount"] == "500"

    def test_export_text_and_markdown(self, scaler, catalog):
        scaled = scaler.scale_recipe(catalog.get("kimchi-stew"), ScalingOptions(scale_factor=0.5))

        text = scaler.export_scaled_recipe(scaled, "text")
        assert "Scaled 0.5x" in text
        assert "• 150\u202fg pork belly" in text
        assert "Top with:" in text

        markdown = scaler.export_scaled_recipe(scaled, "markdown")
        assert markdown.startswith("# kimchi stew")
        assert "- sesame seeds" in markdown
        assert "1. Fry 150\u202fg with 150\u202fg." in markdown

    def test_export_unknown_format(self, scaler, catalog):
        scaled = scaler.scale_recipe(catalog.get("checca"))
        with pytest.raises(ValueError):
            scaler.export_scaled_recipe(scaled, "pdf")


class TestCommandLine:

    def test_prints_scaled_recipe(self, data_dir, capsys):
        exit_code = main(["--data", str(data_dir / "recipes.json"), "--recipe", "kimchi-stew",
                          "--scale", "2", "--format", "markdown"])
        assert exit_code == 0
        output = capsys.readouterr().out
        assert output.startswith("# kimchi stew")
        assert "600\u202fg pork belly, sliced" in output

    def test_writes_output_file(self, data_dir, tmp_path):
        output = tmp_path / "scaled.json"
        exit_code = main(["--data", str(data_dir / "recipes.json"), "--recipe", "checca",
                          "--format", "json", "--output", str(output)])
        assert exit_code == 0
        assert json.loads(output.read_text(encoding="utf-8"))["scaling_factor"] == 1.0

    def test_unknown_recipe(self, data_dir, capsys):
        exit_code = main(["--data", str(data_dir / "recipes.json"), "--recipe", "lasagne"])
        assert exit_code == 1
        assert "Recipe not found: lasagne" in capsys.readouterr().err

    def test_invalid_scale(self, data_dir):
        assert main(["--data", str(data_dir / "recipes.json"), "--recipe", "checca", "--scale", "0"]) == 1
