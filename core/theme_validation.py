from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from django.utils.text import slugify


@dataclass
class ThemeValidationIssue:
    code: str
    message: str
    hint: Optional[str] = None
    field: Optional[str] = None


@dataclass
class ThemeValidationResult:
    path: Path
    metadata: dict
    slug: Optional[str]
    errors: list[ThemeValidationIssue]

    @property
    def is_valid(self) -> bool:
        return not self.errors

    def summary(self, *, detailed: bool = False) -> str:
        parts: list[str] = []
        for issue in self.errors:
            if detailed and issue.hint:
                parts.append(f"{issue.message} ({issue.hint})")
            else:
                parts.append(issue.message)
        return "; ".join(parts)


def load_theme_metadata(meta_path: Path) -> tuple[dict, list[ThemeValidationIssue]]:
    if not meta_path.exists():
        return {}, [
            ThemeValidationIssue(
                code="missing_meta",
                field="theme.json",
                message="theme.json is missing.",
                hint="Include theme.json at the root of the theme.",
            )
        ]

    try:
        with meta_path.open() as handle:
            metadata = json.load(handle)
    except json.JSONDecodeError:
        return {}, [
            ThemeValidationIssue(
                code="invalid_meta",
                field="theme.json",
                message="theme.json is not valid JSON.",
                hint="Ensure theme.json contains a valid JSON object.",
            )
        ]
    except OSError as exc:
        return {}, [
            ThemeValidationIssue(
                code="meta_unreadable",
                field="theme.json",
                message=f"theme.json could not be read: {exc}",
            )
        ]

    if not isinstance(metadata, dict):
        return {}, [
            ThemeValidationIssue(
                code="invalid_meta",
                field="theme.json",
                message="theme.json must contain a JSON object.",
            )
        ]

    if not metadata:
        return {}, [
            ThemeValidationIssue(
                code="empty_meta",
                field="theme.json",
                message="theme.json is empty.",
            )
        ]

    return metadata, []


def _validate_zones(zones) -> list[ThemeValidationIssue]:
    if zones is None or isinstance(zones, str):
        return []
    if isinstance(zones, list) and all(isinstance(zone, str) for zone in zones):
        return []
    return [
        ThemeValidationIssue(
            code="invalid_zones",
            field="zones",
            message="theme.json zones must be a comma separated string or a list of strings.",
            hint='For example "Header, Content, Footer".',
        )
    ]


def validate_theme_dir(theme_dir: Path) -> ThemeValidationResult:
    errors: list[ThemeValidationIssue] = []
    meta_path = theme_dir / "theme.json"
    metadata, meta_errors = load_theme_metadata(meta_path)
    errors.extend(meta_errors)

    label = (metadata.get("label") or metadata.get("name")) if metadata else None
    if metadata and not label:
        errors.append(
            ThemeValidationIssue(
                code="missing_label",
                field="label",
                message="theme.json must include a 'label' or 'name'.",
            )
        )

    metadata_slug = metadata.get("slug") if metadata else None
    slug = slugify(metadata_slug) if metadata_slug else ""
    if metadata_slug is not None and not slug:
        errors.append(
            ThemeValidationIssue(
                code="invalid_slug",
                field="slug",
                message="theme.json must include a slug that slugifies to a value.",
            )
        )
    dir_slug = slugify(theme_dir.name)
    if not slug:
        slug = dir_slug
    elif dir_slug and slug != dir_slug:
        errors.append(
            ThemeValidationIssue(
                code="slug_mismatch_directory",
                field="slug",
                message=f"Theme slug '{slug}' does not match directory name '{dir_slug}'.",
                hint="Rename the directory or update the slug in theme.json.",
            )
        )

    version = metadata.get("version") if metadata else None
    if version is not None and not isinstance(version, str):
        errors.append(
            ThemeValidationIssue(
                code="invalid_version",
                field="version",
                message="theme.json version must be a string if provided.",
            )
        )

    if metadata:
        errors.extend(_validate_zones(metadata.get("zones")))

    base_theme = metadata.get("base_theme") if metadata else None
    if base_theme is not None and not isinstance(base_theme, str):
        errors.append(
            ThemeValidationIssue(
                code="invalid_base_theme",
                field="base_theme",
                message="theme.json base_theme must be a theme slug string if provided.",
            )
        )
    elif base_theme and slugify(base_theme) == slug:
        errors.append(
            ThemeValidationIssue(
                code="self_base_theme",
                field="base_theme",
                message="A theme cannot name itself as its base theme.",
            )
        )

    return ThemeValidationResult(path=theme_dir, metadata=metadata, slug=slug or None, errors=errors)
