import json
from pathlib import Path


def build_test_theme(root: Path, slug: str, *, zones=None, base_theme=None, label=None, **extra) -> Path:
    """Write a minimal theme directory under ``root`` and return its path."""
    theme_dir = Path(root) / slug
    theme_dir.mkdir(parents=True, exist_ok=True)
    metadata = {"slug": slug, "label": label or slug.title()}
    if zones is not None:
        metadata["zones"] = zones
    if base_theme is not None:
        metadata["base_theme"] = base_theme
    metadata.update(extra)
    (theme_dir / "theme.json").write_text(json.dumps(metadata))
    return theme_dir
