#!/usr/bin/env python3
"""
Markdown Rendering
Line-oriented renderer for the recommendations page and the inline markup
(bold text and headings) allowed in recipe instructions.
"""

import re
from typing import List, Tuple

from markupsafe import Markup, escape

LINK_ITEM = re.compile(r"- \[(.*?)\]\((.*?)\)")
INSTRUCTION_TOKENS = re.compile(r"(\*\*[^*]+\*\*|^## .*$)", re.MULTILINE)

# Plain (non-category) heading tag per markdown heading prefix
HEADING_TAGS = (
    ('## ', 'h2'),
    ('### ', 'h5'),
)


def _is_link_item(line: str) -> bool:
    return line.startswith('- [')


def _collect_links(lines: List[str], start: int) -> Tuple[bool, List[str], int]:
    """
    Gather link items following a heading.

    Args:
        lines: Stripped markdown lines
        start: Index of the first line after the heading

    Returns:
        Tuple of (whether any list item follows, rendered links, index of the
        first line not consumed)
    """
    links = []
    has_items = False
    index = start
    while index < len(lines) and (not lines[index] or _is_link_item(lines[index])):
        if _is_link_item(lines[index]):
            has_items = True
            match = LINK_ITEM.search(lines[index])
            if match:
                text, url = match.groups()
                links.append(f'<a href="{escape(url)}">{escape(text)}</a>')
        index += 1

    return has_items, links, index


def render_recommendations(markdown: str) -> str:
    """
    Render the recommendations markdown into an HTML fragment.

    '#' lines become titles. '##' and '###' lines followed by link items
    become a category block of links, otherwise a plain heading. Other
    lines are dropped.
    """
    html = ['<div class="story-container">']
    lines = [line.strip() for line in markdown.splitlines()]

    i = 0
    while i < len(lines):
        line = lines[i]
        i += 1

        if not line:
            continue

        if line.startswith('# '):
            html.append(f'<h1>{escape(line[2:])}</h1>')
            continue

        for prefix, tag in HEADING_TAGS:
            if not line.startswith(prefix):
                continue

            title = escape(line[len(prefix):])
            has_items, links, next_index = _collect_links(lines, i)
            if has_items:
                html.append(f'<p><b>{title}</b><br />' + '<br />\n'.join(links) + '</p>')
                i = next_index
            else:
                html.append(f'<{tag}>{title}</{tag}>')
            break

    html.append('</div>')
    return ''.join(html)


def render_instruction(text: str) -> Markup:
    """Render **bold** spans and '## ' heading lines of an instruction."""
    parts = []
    for part in INSTRUCTION_TOKENS.split(text):
        if not part:
            continue
        if part.startswith('**') and part.endswith('**') and len(part) > 4:
            parts.append(Markup('<strong>{}</strong>').format(part[2:-2]))
        elif part.startswith('## '):
            parts.append(Markup('<h3 class="instruction-heading">{}</h3>').format(part[3:].strip()))
        else:
            parts.append(Markup('<span>{}</span>').format(part))
    return Markup('').join(parts)
