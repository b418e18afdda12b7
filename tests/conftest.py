"""Shared fixtures for the recipe site tests."""

import sys
from pathlib import Path

import pytest

# Add src to path
sys.path.append(str(Path(__file__).parent.parent / "src"))

from recipe_models import RecipeCatalog  # noqa: E402

DATA_DIR = Path(__file__).parent.parent / "data"


@pytest.fixture
def recipe_data():
    return {
        "recipes": [
            {
                "slug": "kimchi-stew",
                "name": "kimchi stew",
                "title": "kimchi stew",
                "ingredients": [
                    {"amount": 300, "unit": "g", "item": "pork belly"},
                    {"amount": "300 g", "item": "kimchi"},
                    {"amount": 500, "unit": "ml", "item": "stock"},
                    {"amount": "1-2", "item": "spring onions"},
                    {"item": "sesame seeds"},
                ],
                "toppings": [
                    {"amount": 1, "unit": "tsp", "item": "sesame oil"},
                ],
                "instructions": [
                    "Fry {ingredient.0} with {ingredient.1}.",
                    "Add {ingredient.2} and simmer for **20 minutes**.",
                    "Serve with {ingredient.9}.",
                ],
            },
            {
                "slug": "checca",
                "name": "checca",
                "italic": True,
                "title": "pasta alla checca",
                "ingredients": [
                    {"amount": 250, "unit": "g", "item": "spaghetti"},
                ],
                "instructions": ["Cook 250 g spaghetti for 10 minutes."],
            },
        ]
    }


@pytest.fixture
def catalog(recipe_data):
    return RecipeCatalog.from_dict(recipe_data)


@pytest.fixture
def data_dir():
    return DATA_DIR
