"""
Text templating for issue replies and README sections.

Templates come from data/settings.yaml and use {name} placeholders. Substitution
is plain replacement so literal braces elsewhere in a template are left alone.
"""
from __future__ import annotations

from typing import Mapping

from .config import Marker


def render(template: str, values: Mapping[str, object]) -> str:
    """Replace known placeholders in the template. Unknown tokens are left intact."""
    rendered = template or ""
    for key, val in values.items():
        rendered = rendered.replace(f"{{{key}}}", str(val))
    return rendered


def replace_text_between(original: str, marker: Marker, replacement: str) -> str:
    """Swap whatever sits between marker.begin and marker.end; untouched if either is missing."""
    if marker.begin not in original or marker.end not in original:
        return original
    leading = original.split(marker.begin, 1)[0]
    trailing = original.split(marker.end, 1)[1]
    return leading + marker.begin + replacement + marker.end + trailing
