import json
from typing import Any

from django.core.management.base import BaseCommand, CommandError

from core.themes import ThemeDefinition, discover_themes, get_active_theme, resolve_theme_zones


class Command(BaseCommand):
    help = "List discovered themes with their declared and resolved widget zones."

    def add_arguments(self, parser):
        parser.add_argument("--slug", help="Limit output to a single theme slug.")
        parser.add_argument("--json", action="store_true", help="Emit JSON output.")

    def handle(self, *args, **options):
        slug = options.get("slug")
        as_json = options.get("json", False)

        themes = discover_themes()
        active = get_active_theme(themes)
        selected = list(themes.values())
        if slug:
            if slug not in themes:
                raise CommandError(f"No theme found for slug '{slug}'.")
            selected = [themes[slug]]

        rows = [self._serialize_theme(theme, themes, active) for theme in sorted(selected, key=lambda t: t.slug)]

        if as_json:
            self.stdout.write(json.dumps(rows))
            return

        if not rows:
            self.stdout.write("No themes found.")
            return

        headers = ["SLUG", "BASE", "ACTIVE", "ZONES"]
        widths = {header: len(header) for header in headers}
        for row in rows:
            widths["SLUG"] = max(widths["SLUG"], len(row["slug"]))
            widths["BASE"] = max(widths["BASE"], len(row["base_theme"]))
            widths["ACTIVE"] = max(widths["ACTIVE"], len(self._active_label(row)))

        format_str = "  ".join(f"{{{header}:<{widths[header]}}}" for header in headers)
        self.stdout.write(format_str.format(**{header: header for header in headers}))
        for row in rows:
            zones = ", ".join(row["resolved_zones"])
            if row["resolved_zones"] and not row["zones"]:
                zones = f"{zones} (inherited)"
            self.stdout.write(
                format_str.format(
                    SLUG=row["slug"],
                    BASE=row["base_theme"],
                    ACTIVE=self._active_label(row),
                    ZONES=zones,
                )
            )

    def _active_label(self, row: dict[str, Any]) -> str:
        return "yes" if row["active"] else ""

    def _serialize_theme(self, theme: ThemeDefinition, themes, active) -> dict[str, Any]:
        return {
            "slug": theme.slug,
            "label": theme.label,
            "base_theme": theme.base_theme or "",
            "active": active is not None and active.slug == theme.slug,
            "zones": theme.zones,
            "resolved_zones": resolve_theme_zones(theme, themes),
            "version": theme.version or "",
        }
