"""Theme discovery and widget zone resolution.

A theme is a directory holding a ``theme.json``. Only the metadata matters
here: the zones a theme declares and the base theme it inherits from.
"""
from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from django.conf import settings
from django.utils.text import slugify

from .theme_validation import validate_theme_dir

logger = logging.getLogger(__name__)


def parse_zones(value) -> list[str]:
    """Split a zone declaration into trimmed, de-duplicated zone names.

    ``value`` is either a comma separated string or a list of strings.
    Order of first appearance is kept.
    """
    if not value:
        return []
    if isinstance(value, str):
        parts = value.split(",")
    else:
        parts = [part for item in value for part in str(item).split(",")]
    zones: list[str] = []
    for part in parts:
        zone = part.strip()
        if zone and zone not in zones:
            zones.append(zone)
    return zones


@dataclass
class ThemeDefinition:
    slug: str
    label: str
    path: Optional[Path] = None
    zones: list[str] = field(default_factory=list)
    base_theme: Optional[str] = None
    version: Optional[str] = None

    @classmethod
    def from_metadata(cls, metadata: dict, *, slug: str, path: Optional[Path] = None) -> "ThemeDefinition":
        base_theme = metadata.get("base_theme")
        return cls(
            slug=slug,
            label=metadata.get("label") or metadata.get("name") or slug,
            path=path,
            zones=parse_zones(metadata.get("zones")),
            base_theme=slugify(base_theme) if base_theme else None,
            version=metadata.get("version"),
        )


def list_theme_directories(themes_dirs: Optional[Iterable[Path]] = None) -> list[Path]:
    if themes_dirs is None:
        themes_dirs = getattr(settings, "THEMES_DIRS", [])
    directories: list[Path] = []
    for root in themes_dirs:
        root = Path(root)
        if not root.is_dir():
            logger.debug("Theme directory %s does not exist", root)
            continue
        directories.extend(sorted(child for child in root.iterdir() if child.is_dir()))
    return directories


def discover_themes(themes_dirs: Optional[Iterable[Path]] = None) -> dict[str, ThemeDefinition]:
    """Load every valid theme below ``themes_dirs`` keyed by slug.

    Invalid themes are logged and skipped. When two directories provide the
    same slug the first one wins.
    """
    themes: dict[str, ThemeDefinition] = {}
    for theme_dir in list_theme_directories(themes_dirs):
        result = validate_theme_dir(theme_dir)
        if not result.is_valid:
            logger.warning("Skipping invalid theme at %s: %s", theme_dir, result.summary())
            continue
        if result.slug in themes:
            logger.warning("Duplicate theme slug '%s' at %s ignored", result.slug, theme_dir)
            continue
        themes[result.slug] = ThemeDefinition.from_metadata(result.metadata, slug=result.slug, path=theme_dir)
    return themes


def get_active_theme(
    themes: Mapping[str, ThemeDefinition], slug: Optional[str] = None
) -> Optional[ThemeDefinition]:
    if slug is None:
        slug = getattr(settings, "ACTIVE_THEME", "")
    if slug and slug in themes:
        return themes[slug]
    if slug:
        logger.warning("Active theme '%s' is not installed; falling back to the first theme", slug)
    return next(iter(themes.values()), None)


def resolve_theme_zones(theme: Optional[ThemeDefinition], themes: Mapping[str, ThemeDefinition]) -> list[str]:
    """Zones of ``theme``, inherited through its base theme chain when it declares none.

    The chain is walked until a theme declares zones, a base theme is
    missing, or a theme is seen twice.
    """
    visited: set[str] = set()
    current = theme
    while current is not None:
        if current.zones:
            return list(current.zones)
        visited.add(current.slug)
        if not current.base_theme:
            break
        if current.base_theme in visited:
            logger.warning(
                "Base theme cycle detected at '%s' while resolving zones for '%s'",
                current.base_theme,
                theme.slug,
            )
            break
        current = themes.get(current.base_theme)
    return []


def all_zones(themes: Mapping[str, ThemeDefinition]) -> list[str]:
    """Every zone declared by any installed theme, without inheritance."""
    zones: list[str] = []
    for theme in themes.values():
        for zone in theme.zones:
            if zone not in zones:
                zones.append(zone)
    return zones
