#!/usr/bin/env python3
"""
Recipe Scaling System
Scales every ingredient, topping and instruction of a recipe by one factor
and exports the result as text, Markdown or JSON.
"""

import json
import math
from pathlib import Path
from typing import Dict, List, Optional, Any
from dataclasses import dataclass, asdict
import logging

# Add src to path
import sys
sys.path.append(str(Path(__file__).parent))

from quantity_formatter import (
    format_display, format_number, interpolate_ingredients, scale_free_text, scale_ingredient
)
from recipe_models import Ingredient, Recipe, RecipeCatalog
from error_handling import InvalidScaleError, RecipeSiteError, ValidationError

INSTRUCTION_MODES = ('placeholder', 'free_text')

SCALE_PRESETS = (0.5, 1, 2, 3)
SCALE_STEP = 0.5
MIN_SCALE = 0.5


def validate_scale(value: Any) -> float:
    """Parse a scale factor; it must be a finite positive number."""
    if isinstance(value, bool):
        raise InvalidScaleError(value)
    try:
        scale = float(value)
    except (TypeError, ValueError):
        raise InvalidScaleError(value) from None
    if not math.isfinite(scale) or scale <= 0:
        raise InvalidScaleError(value)
    return scale


def increment_scale(scale: float) -> float:
    return scale + SCALE_STEP


def decrement_scale(scale: float) -> float:
    return max(MIN_SCALE, scale - SCALE_STEP)


def format_scale_label(scale: float) -> str:
    return format_number(scale)


@dataclass
class ScalingOptions:
    """Recipe scaling options."""
    scale_factor: float = 1.0
    instruction_mode: str = "placeholder"  # 'placeholder' or 'free_text'

    def __post_init__(self):
        self.scale_factor = validate_scale(self.scale_factor)
        if self.instruction_mode not in INSTRUCTION_MODES:
            raise ValidationError(
                f"Unknown instruction mode: {self.instruction_mode}",
                validation_errors=[f"instruction_mode must be one of {', '.join(INSTRUCTION_MODES)}"]
            )


@dataclass
class ScaledIngredient:
    """Ingredient with its scaled, formatted quantity."""
    item: str
    amount: str
    unit: str
    display: str

    @property
    def line(self) -> str:
        return f"{self.display} {self.item}" if self.display else self.item


@dataclass
class ScaledRecipe:
    """Complete scaled recipe."""
    title: str
    scaling_factor: float
    instruction_mode: str
    ingredients: List[ScaledIngredient]
    toppings: Optional[List[ScaledIngredient]]
    instructions: List[str]


class RecipeScaler:
    """Scales whole recipes with the quantity formatter."""

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        """
        Initialize recipe scaler.

        Args:
            config: Configuration dictionary
        """
        self.config = config or {}
        self.logger = self._setup_logging()
        self.default_mode = self.config.get('instruction_mode', 'placeholder')

    def _setup_logging(self) -> logging.Logger:
        """Setup logging for scaler."""
        logger = logging.getLogger('recipe_scaler')
        logger.setLevel(logging.INFO)

        formatter = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        )

        if not logger.handlers:
            console_handler = logging.StreamHandler()
            console_handler.setFormatter(formatter)
            logger.addHandler(console_handler)

        return logger

    def scale_recipe(self, recipe: Recipe, options: Optional[ScalingOptions] = None) -> ScaledRecipe:
        """
        Scale a recipe.

        Args:
            recipe: Original recipe
            options: Scaling options; defaults to 1x with the configured
                instruction mode

        Returns:
            Scaled recipe with display strings
        """
        if options is None:
            options = ScalingOptions(instruction_mode=self.default_mode)
        scale = options.scale_factor

        ingredients = [self._scale_ingredient(ingredient, scale) for ingredient in recipe.ingredients]

        toppings = None
        if recipe.toppings is not None:
            toppings = [self._scale_ingredient(topping, scale) for topping in recipe.toppings]

        instructions = self._scale_instructions(recipe, scale, options.instruction_mode)

        self.logger.debug(f"Scaled '{recipe.title}' by {format_scale_label(scale)}")

        return ScaledRecipe(
            title=recipe.title,
            scaling_factor=scale,
            instruction_mode=options.instruction_mode,
            ingredients=ingredients,
            toppings=toppings,
            instructions=instructions
        )

    def _scale_ingredient(self, ingredient: Ingredient, scale: float) -> ScaledIngredient:
        amount, unit = scale_ingredient(ingredient, scale)
        return ScaledIngredient(
            item=ingredient.item,
            amount=amount,
            unit=unit,
            display=format_display(amount, unit)
        )

    def _scale_instructions(self, recipe: Recipe, scale: float, mode: str) -> List[str]:
        if mode == 'free_text':
            return [scale_free_text(step, scale) for step in recipe.instructions]
        return [interpolate_ingredients(step, recipe.ingredients, scale) for step in recipe.instructions]

    def export_scaled_recipe(self, recipe: ScaledRecipe, format: str = "json") -> str:
        """Export scaled recipe in specified format."""
        if format == "json":
            return json.dumps(asdict(recipe), indent=2, ensure_ascii=False)
        elif format == "text":
            return self._format_recipe_as_text(recipe)
        elif format == "markdown":
            return self._format_recipe_as_markdown(recipe)
        else:
            raise ValueError(f"Unsupported format: {format}")

    def _format_recipe_as_text(self, recipe: ScaledRecipe) -> str:
        """Format recipe as plain text."""
        lines = [recipe.title]
        if recipe.scaling_factor != 1:
            lines.append(f"Scaled {format_scale_label(recipe.scaling_factor)}x")
        lines.append("")

        lines.append("Ingredients:")
        lines.append("-" * 20)
        for ingredient in recipe.ingredients:
            lines.append(f"• {ingredient.line}")
        lines.append("")

        if recipe.toppings:
            lines.append("Top with:")
            lines.append("-" * 20)
            for topping in recipe.toppings:
                lines.append(f"• {topping.line}")
            lines.append("")

        if recipe.instructions:
            lines.append("Instructions:")
            lines.append("-" * 20)
            for i, instruction in enumerate(recipe.instructions, 1):
                lines.append(f"{i}. {instruction}")

        return "\n".join(lines)

    def _format_recipe_as_markdown(self, recipe: ScaledRecipe) -> str:
        """Format recipe as Markdown."""
        lines = [f"# {recipe.title}"]
        if recipe.scaling_factor != 1:
            lines.append(f"*Scaled {format_scale_label(recipe.scaling_factor)}x*")
        lines.append("")

        lines.append("## Ingredients")
        lines.append("")
        for ingredient in recipe.ingredients:
            lines.append(f"- {ingredient.line}")
        lines.append("")

        if recipe.toppings:
            lines.append("## Top with")
            lines.append("")
            for topping in recipe.toppings:
                lines.append(f"- {topping.line}")
            lines.append("")

        if recipe.instructions:
            lines.append("## Instructions")
            lines.append("")
            for i, instruction in enumerate(recipe.instructions, 1):
                lines.append(f"{i}. {instruction}")

        return "\n".join(lines)


def main(argv: Optional[List[str]] = None):
    """Main recipe scaling script."""
    import argparse

    from config_loader import load_config

    parser = argparse.ArgumentParser(description='Scale a recipe from the recipe data file')
    parser.add_argument('--recipe', '-r', required=True, help='Recipe slug')
    parser.add_argument('--data', '-d', help='Recipe data file (JSON)')
    parser.add_argument('--scale', '-s', default='1', help='Scale factor')
    parser.add_argument('--mode', choices=INSTRUCTION_MODES, help='Instruction scaling mode')
    parser.add_argument('--format', choices=['json', 'text', 'markdown'], default='text', help='Output format')
    parser.add_argument('--output', '-o', help='Output file')
    parser.add_argument('--config', '-c', help='Configuration file (JSON or YAML)')

    args = parser.parse_args(argv)

    config = load_config(args.config)
    if args.data:
        config['data_path'] = args.data
    if args.mode:
        config['instruction_mode'] = args.mode

    scaler = RecipeScaler(config)

    try:
        catalog = RecipeCatalog.from_file(config['data_path'])
        options = ScalingOptions(scale_factor=args.scale, instruction_mode=config['instruction_mode'])
        scaled = scaler.scale_recipe(catalog.get(args.recipe), options)
    except RecipeSiteError as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return 1

    output = scaler.export_scaled_recipe(scaled, args.format)

    if args.output:
        with open(args.output, 'w', encoding='utf-8') as f:
            f.write(output + "\n")
        scaler.logger.info(f"Scaled recipe written to {args.output}")
    else:
        print(output)

    return 0


if __name__ == "__main__":
    sys.exit(main())
