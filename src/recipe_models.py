#!/usr/bin/env python3
"""
Recipe Data Models
Ingredient and recipe records plus the read-only catalog of recipes loaded
from the static data file.
"""

import json
from pathlib import Path
from typing import Dict, List, Tuple, Optional, Any, Union
from dataclasses import dataclass

# Add src to path
import sys
sys.path.append(str(Path(__file__).parent))

from error_handling import ValidationError, RecipeNotFoundError, handle_known_errors


@dataclass(frozen=True)
class Ingredient:
    """Single ingredient line. amount may be a number or free text."""
    item: str
    amount: Optional[Union[int, float, str]] = None
    unit: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Ingredient":
        if not isinstance(data, dict):
            raise ValidationError(f"Ingredient must be an object, got {type(data).__name__}")

        item = data.get('item')
        if not isinstance(item, str) or not item.strip():
            raise ValidationError("Ingredient is missing 'item'", details={'ingredient': data})

        amount = data.get('amount')
        if amount is not None and (isinstance(amount, bool) or not isinstance(amount, (int, float, str))):
            raise ValidationError(f"Unsupported amount for {item}: {amount!r}")

        unit = data.get('unit')
        if unit is not None and not isinstance(unit, str):
            raise ValidationError(f"Unsupported unit for {item}: {unit!r}")

        return cls(item=item, amount=amount, unit=unit)

    def to_dict(self) -> Dict[str, Any]:
        data = {'item': self.item}
        if self.amount is not None:
            data['amount'] = self.amount
        if self.unit is not None:
            data['unit'] = self.unit
        return data


@dataclass(frozen=True)
class Recipe:
    """Recipe with ordered ingredients, optional toppings and instructions."""
    title: str
    ingredients: Tuple[Ingredient, ...]
    instructions: Tuple[str, ...]
    toppings: Optional[Tuple[Ingredient, ...]] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Recipe":
        title = data.get('title')
        if not isinstance(title, str) or not title.strip():
            raise ValidationError("Recipe is missing 'title'")

        ingredients = _ingredient_list(data.get('ingredients'), title, 'ingredients')

        instructions = data.get('instructions', [])
        if not isinstance(instructions, list) or not all(isinstance(step, str) for step in instructions):
            raise ValidationError(f"Recipe {title!r} needs 'instructions' as a list of strings")

        toppings = None
        if data.get('toppings') is not None:
            toppings = _ingredient_list(data['toppings'], title, 'toppings')

        return cls(
            title=title,
            ingredients=ingredients,
            instructions=tuple(instructions),
            toppings=toppings
        )

    def to_dict(self) -> Dict[str, Any]:
        data = {
            'title': self.title,
            'ingredients': [ingredient.to_dict() for ingredient in self.ingredients],
            'instructions': list(self.instructions),
        }
        if self.toppings is not None:
            data['toppings'] = [topping.to_dict() for topping in self.toppings]
        return data


def _ingredient_list(value: Any, title: str, field: str) -> Tuple[Ingredient, ...]:
    if not isinstance(value, list):
        raise ValidationError(f"Recipe {title!r} needs '{field}' as a list")
    return tuple(Ingredient.from_dict(entry) for entry in value)


@dataclass(frozen=True)
class RecipeEntry:
    """Catalog entry shown on the index page."""
    slug: str
    name: str
    recipe: Recipe
    italic: bool = False


class RecipeCatalog:
    """Read-only collection of recipes keyed by slug, in file order."""

    def __init__(self, entries: List[RecipeEntry]):
        self._entries: Dict[str, RecipeEntry] = {}
        for entry in entries:
            if entry.slug in self._entries:
                raise ValidationError(f"Duplicate recipe slug: {entry.slug}")
            self._entries[entry.slug] = entry

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RecipeCatalog":
        """
        Build a catalog from parsed data.

        Args:
            data: Mapping with a 'recipes' list; each item holds the recipe
                fields plus 'slug' and optional 'name' and 'italic'

        Returns:
            Recipe catalog
        """
        if not isinstance(data, dict) or not isinstance(data.get('recipes'), list):
            raise ValidationError("Recipe data needs a 'recipes' list")

        entries = []
        for raw in data['recipes']:
            if not isinstance(raw, dict):
                raise ValidationError("Each recipe must be an object")
            slug = raw.get('slug')
            if not isinstance(slug, str) or not slug.strip():
                raise ValidationError("Recipe is missing 'slug'", details={'title': raw.get('title')})

            recipe = Recipe.from_dict(raw)
            entries.append(RecipeEntry(
                slug=slug,
                name=raw.get('name') or recipe.title,
                recipe=recipe,
                italic=bool(raw.get('italic', False))
            ))

        return cls(entries)

    @classmethod
    @handle_known_errors
    def from_file(cls, data_path: Union[str, Path]) -> "RecipeCatalog":
        """Load the catalog from a JSON data file."""
        with open(data_path, 'r', encoding='utf-8') as f:
            data = json.load(f)
        return cls.from_dict(data)

    def get(self, slug: str) -> Recipe:
        try:
            return self._entries[slug].recipe
        except KeyError:
            raise RecipeNotFoundError(slug) from None

    def entries(self) -> List[RecipeEntry]:
        return list(self._entries.values())

    def slugs(self) -> List[str]:
        return list(self._entries)

    def __contains__(self, slug: str) -> bool:
        return slug in self._entries

    def __len__(self) -> int:
        return len(self._entries)
