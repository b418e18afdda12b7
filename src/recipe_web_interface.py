#!/usr/bin/env python3
"""
Recipe Web Interface
Flask application serving the recipe index, recipe pages with an
ingredient scaler, a JSON API, and the recommendations page.
"""

from dataclasses import asdict
from pathlib import Path
from typing import Dict, Optional, Any

from flask import Flask, Response, render_template, request, jsonify, url_for
from jinja2 import DictLoader
import logging

# Add src to path
import sys
sys.path.append(str(Path(__file__).parent))

from config_loader import load_config, DEFAULT_CONFIG
from error_handling import APIErrorHandler, ValidationError
from markdown_renderer import render_instruction
from monitoring_logging import SCALE_REQUESTS, configure_logging, metrics_payload
from recipe_models import RecipeCatalog
from recipe_scaler import (
    RecipeScaler, ScalingOptions, SCALE_PRESETS, decrement_scale, format_scale_label,
    increment_scale, validate_scale
)
from recommendations_loader import RecommendationsLoader


BASE_TEMPLATE = '''<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <meta name="description" content="{{ site_description }}">
    <title>{% block title %}{{ site_title }}{% endblock %}</title>
    <style>
        body { font-family: Georgia, serif; background: #fff; color: #000; margin: 0; }
        a { color: #000; text-decoration: none; }
        a:hover { color: #4b5563; }
        .page { max-width: 1096px; margin: 0 auto; padding: 4rem 2rem; }
        .index { font-size: 2rem; line-height: 1.6; }
        .back { display: inline-block; margin-bottom: 2rem; color: #4b5563; }
        .recipe-header { display: flex; align-items: center; justify-content: space-between; margin-bottom: 2rem; }
        .scale-controls { display: flex; align-items: center; gap: 0.5rem; font-size: 0.875rem; }
        .scale-controls .label { width: 2rem; text-align: center; font-family: monospace; }
        .scale-presets a.active { text-decoration: underline; }
        ul { margin: 0 0 2rem 1.5rem; }
        .instruction { margin-bottom: 1rem; }
    </style>
</head>
<body>
    <div class="page">
        {% block content %}{% endblock %}
    </div>
</body>
</html>
'''

INDEX_TEMPLATE = '''{% extends "base.html" %}
{% block content %}
<main class="index">
    {% for entry in entries %}<a href="{{ url_for('view_recipe', slug=entry.slug) }}"{% if entry.italic %} style="font-style: italic"{% endif %}>{{ entry.name }}</a>{% if not loop.last %} / {% endif %}{% endfor %}
</main>
{% endblock %}
'''

RECIPE_TEMPLATE = '''{% extends "base.html" %}
{% block title %}{{ scaled.title }} · {{ site_title }}{% endblock %}
{% block content %}
<a class="back" href="{{ url_for('index') }}">← back</a>

<div class="recipe-header">
    <h1>{{ scaled.title }}</h1>
    <div class="scale-controls">
        <a class="decrement" href="{{ decrement_url }}">−</a>
        <span class="label">{{ scale_label }}</span>
        <a class="increment" href="{{ increment_url }}">+</a>
        <span class="scale-presets">
            {% for preset in presets %}<a href="{{ preset.url }}"{% if preset.active %} class="active"{% endif %}>{{ preset.label }}×</a> {% endfor %}
        </span>
    </div>
</div>

<ul class="ingredients">
    {% for ingredient in scaled.ingredients %}<li>{{ ingredient.line }}</li>
    {% endfor %}
</ul>

{% if scaled.toppings %}
<h2>top with</h2>
<ul class="toppings">
    {% for topping in scaled.toppings %}<li>{{ topping.line }}</li>
    {% endfor %}
</ul>
{% endif %}

{% for instruction in instructions %}
<div class="instruction">{{ instruction }}</div>
{% endfor %}
{% endblock %}
'''

RECOMMENDATIONS_TEMPLATE = '''{% extends "base.html" %}
{% block title %}recommendations · {{ site_title }}{% endblock %}
{% block content %}
<a class="back" href="{{ url_for('index') }}">← back</a>
<div class="container">{{ content|safe }}</div>
{% endblock %}
'''

ERROR_TEMPLATE = '''{% extends "base.html" %}
{% block title %}{{ status }} · {{ site_title }}{% endblock %}
{% block content %}
<a class="back" href="{{ url_for('index') }}">← back</a>
<h1>{{ status }}</h1>
<p>{{ message }}</p>
{% endblock %}
'''

TEMPLATES = {
    'base.html': BASE_TEMPLATE,
    'index.html': INDEX_TEMPLATE,
    'recipe.html': RECIPE_TEMPLATE,
    'recommendations.html': RECOMMENDATIONS_TEMPLATE,
    'error.html': ERROR_TEMPLATE,
}


class RecipeWebInterface:
    """Flask web interface for the recipe collection."""

    def __init__(self, config: Optional[Dict[str, Any]] = None,
                 catalog: Optional[RecipeCatalog] = None,
                 recommendations: Optional[RecommendationsLoader] = None):
        """
        Initialize web interface.

        Args:
            config: Configuration dictionary
            catalog: Recipe catalog; loaded from config['data_path'] when omitted
            recommendations: Recommendations loader; built from config when omitted
        """
        self.config = {**DEFAULT_CONFIG, **(config or {})}
        self.app = Flask(__name__)
        self.app.secret_key = self.config['secret_key']
        self.app.jinja_loader = DictLoader(TEMPLATES)

        self.logger = self._setup_logging()

        # Initialize components
        self.catalog = catalog if catalog is not None else RecipeCatalog.from_file(self.config['data_path'])
        self.scaler = RecipeScaler(self.config)
        self.recommendations = recommendations if recommendations is not None else RecommendationsLoader(self.config)
        self.instruction_mode = ScalingOptions(
            instruction_mode=self.config['instruction_mode']
        ).instruction_mode

        self._register_routes()
        APIErrorHandler.register(self.app)

        self.logger.info(f"Initialized RecipeWebInterface with {len(self.catalog)} recipes")

    def _setup_logging(self) -> logging.Logger:
        """Setup logging for web interface."""
        logger = logging.getLogger('recipe_web_interface')
        logger.setLevel(logging.INFO)

        formatter = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        )

        if not logger.handlers:
            console_handler = logging.StreamHandler()
            console_handler.setFormatter(formatter)
            logger.addHandler(console_handler)

        return logger

    def _scale_url(self, slug: str, scale: float) -> str:
        return url_for('view_recipe', slug=slug, scale=format_scale_label(scale))

    def _record_scale_request(self, slug: str, scale: float):
        # Off-preset scales share one series
        label = format_scale_label(scale) if scale in SCALE_PRESETS else 'custom'
        SCALE_REQUESTS.labels(recipe=slug, scale=label).inc()

    def _register_routes(self):
        """Register Flask routes."""

        @self.app.context_processor
        def site_context():
            return {
                'site_title': self.config['site_title'],
                'site_description': self.config['site_description'],
            }

        @self.app.route('/')
        def index():
            """Recipe index."""
            return render_template('index.html', entries=self.catalog.entries())

        @self.app.route('/recipes/<slug>')
        def view_recipe(slug: str):
            """Recipe page at the requested scale."""
            recipe = self.catalog.get(slug)
            scale = validate_scale(request.args.get('scale', '1'))
            scaled = self.scaler.scale_recipe(
                recipe, ScalingOptions(scale_factor=scale, instruction_mode=self.instruction_mode)
            )
            self._record_scale_request(slug, scale)

            presets = [
                {
                    'label': format_scale_label(preset),
                    'url': self._scale_url(slug, preset),
                    'active': preset == scale,
                }
                for preset in SCALE_PRESETS
            ]

            return render_template(
                'recipe.html',
                scaled=scaled,
                instructions=[render_instruction(step) for step in scaled.instructions],
                scale_label=format_scale_label(scale),
                increment_url=self._scale_url(slug, increment_scale(scale)),
                decrement_url=self._scale_url(slug, decrement_scale(scale)),
                presets=presets
            )

        @self.app.route('/recommendations')
        def view_recommendations():
            """Recommendations page."""
            return render_template('recommendations.html', content=self.recommendations.load_html())

        @self.app.route('/api/recipes')
        def api_list_recipes():
            """API endpoint listing recipe slugs."""
            return jsonify({
                'recipes': [
                    {'slug': entry.slug, 'name': entry.name, 'title': entry.recipe.title}
                    for entry in self.catalog.entries()
                ]
            })

        @self.app.route('/api/recipes/<slug>')
        def api_get_recipe(slug: str):
            """API endpoint to get recipe data."""
            return jsonify(self.catalog.get(slug).to_dict())

        @self.app.route('/api/scale/<slug>', methods=['GET', 'POST'])
        def api_scale_recipe(slug: str):
            """API endpoint to scale recipe."""
            recipe = self.catalog.get(slug)

            if request.method == 'POST':
                data = request.get_json(silent=True)
                if not isinstance(data, dict):
                    raise ValidationError("Request body must be a JSON object")
            else:
                data = request.args

            options = ScalingOptions(
                scale_factor=data.get('scale_factor', 1),
                instruction_mode=data.get('instruction_mode', self.instruction_mode)
            )
            scaled = self.scaler.scale_recipe(recipe, options)
            self._record_scale_request(slug, options.scale_factor)

            result = asdict(scaled)
            result['scale_label'] = format_scale_label(scaled.scaling_factor)
            return jsonify(result)

        @self.app.route('/health')
        def health():
            return jsonify({'status': 'ok', 'recipes': len(self.catalog)})

        @self.app.route('/metrics')
        def metrics():
            body, content_type = metrics_payload()
            return Response(body, content_type=content_type)

    def run(self, host: str = '0.0.0.0', port: int = 5000, debug: bool = False):
        """
        Run the Flask application.

        Args:
            host: Host address
            port: Port number
            debug: Debug mode
        """
        self.logger.info(f"Starting Recipe Web Interface on {host}:{port}")
        self.app.run(host=host, port=port, debug=debug)


def create_app(config: Optional[Dict[str, Any]] = None) -> Flask:
    """Application factory for WSGI servers."""
    return RecipeWebInterface(config or load_config()).app


def main():
    """Main web interface script."""
    import argparse

    parser = argparse.ArgumentParser(description='Recipe web interface')
    parser.add_argument('--host', default='0.0.0.0', help='Host address')
    parser.add_argument('--port', type=int, default=5000, help='Port number')
    parser.add_argument('--debug', action='store_true', help='Debug mode')
    parser.add_argument('--config', help='Configuration file (JSON or YAML)')

    args = parser.parse_args()

    configure_logging()
    config = load_config(args.config)

    web_interface = RecipeWebInterface(config)
    web_interface.run(host=args.host, port=args.port, debug=args.debug)


if __name__ == "__main__":
    main()
