#!/usr/bin/env python3
"""
Recommendations Loader
Reads the recommendations markdown from a local file or an HTTP URL and
renders it, falling back to a fixed error fragment when it cannot be read.
"""

from pathlib import Path
from typing import Dict, Optional, Any

import requests
import structlog

# Add src to path
import sys
sys.path.append(str(Path(__file__).parent))

from error_handling import (
    ContentFetchError, FallbackManager, RetryStrategy, handle_known_errors, retry_with_backoff
)
from markdown_renderer import render_recommendations

FALLBACK_HTML = '<p>Error loading recommendations</p>'

logger = structlog.get_logger(__name__)


class RecommendationsLoader:
    """Fetches and renders the recommendations page content."""

    def __init__(self, config: Optional[Dict[str, Any]] = None, session: Optional[requests.Session] = None):
        """
        Initialize loader.

        Args:
            config: Configuration dictionary (recommendations_source,
                fetch_timeout, max_retries, retry_base_delay)
            session: Optional requests session used for HTTP sources
        """
        self.config = config or {}
        self.source = str(self.config.get('recommendations_source', 'data/recommendations.md'))
        self.timeout = float(self.config.get('fetch_timeout', 10.0))
        self.max_retries = int(self.config.get('max_retries', 3))
        self.retry_base_delay = float(self.config.get('retry_base_delay', 0.5))
        self.session = session or requests.Session()

        self.fallbacks = FallbackManager()
        self.fallbacks.register_fallback('recommendations', self._fallback)

    @property
    def is_remote(self) -> bool:
        return self.source.startswith(('http://', 'https://'))

    @handle_known_errors
    def _read_source(self) -> str:
        if not self.is_remote:
            return Path(self.source).read_text(encoding='utf-8')

        response = self.session.get(self.source, timeout=self.timeout)
        response.raise_for_status()
        response.encoding = 'utf-8'
        return response.text

    def fetch_markdown(self) -> str:
        """
        Read the markdown source, retrying remote fetches.

        Raises:
            ContentFetchError: if the source cannot be read
        """
        attempts = self.max_retries if self.is_remote else 1
        fetch = retry_with_backoff(
            max_attempts=attempts,
            strategy=RetryStrategy.EXPONENTIAL_BACKOFF,
            base_delay=self.retry_base_delay,
            exceptions=(ContentFetchError,)
        )(self._read_source)
        return fetch()

    def _render(self) -> str:
        return render_recommendations(self.fetch_markdown())

    def _fallback(self) -> str:
        logger.error("Error fetching recommendations", source=self.source)
        return FALLBACK_HTML

    def load_html(self) -> str:
        """Rendered recommendations, or the fallback fragment on failure."""
        return self.fallbacks.execute_with_fallback('recommendations', self._render)
