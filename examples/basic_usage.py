#!/usr/bin/env python3
"""
Recipe Site - Basic Usage Examples
Demonstrates scaling recipes from the bundled data file.
"""

import sys
from pathlib import Path

# Add src to path
sys.path.append(str(Path(__file__).parent.parent / 'src'))

from quantity_formatter import format_display, scale_free_text, scale_quantity
from recipe_models import RecipeCatalog
from recipe_scaler import RecipeScaler, ScalingOptions

DATA_PATH = Path(__file__).parent.parent / 'data' / 'recipes.json'


def example_1_single_quantities():
    """Example 1: Scaling single quantities."""
    print("🔸 Example 1: Single Quantities")
    print("-" * 50)

    for amount, unit, scale in [(300, 'g', 2), (600, 'g', 2), (750, 'ml', 2), ('1-2', None, 3), (1, 'tbsp', 0.5)]:
        scaled = format_display(*scale_quantity(amount, unit, scale))
        print(f"   {amount} {unit or ''} x{scale} -> {scaled}")


def example_2_scale_recipe():
    """Example 2: Scaling a whole recipe."""
    print("\n🔸 Example 2: Whole Recipe")
    print("-" * 50)

    catalog = RecipeCatalog.from_file(DATA_PATH)
    scaler = RecipeScaler()

    scaled = scaler.scale_recipe(catalog.get('kimchi-stew'), ScalingOptions(scale_factor=2))
    print(scaler.export_scaled_recipe(scaled, 'text'))


def example_3_free_text():
    """Example 3: Scaling quantities written into instructions."""
    print("\n🔸 Example 3: Free Text")
    print("-" * 50)

    text = "Fry 600 g pork for 5 minutes, then add 1-2 tbsp gochujang and 750 ml water."
    print(f"   {text}")
    print(f"   {scale_free_text(text, 2)}")


def main():
    """Run all examples."""
    print("🍲 Recipe Site - Usage Examples")
    print("=" * 50)

    example_1_single_quantities()
    example_2_scale_recipe()
    example_3_free_text()


if __name__ == "__main__":
    main()
