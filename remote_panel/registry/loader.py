"""
JSON config loader for registered sheet sources.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from remote_panel.domain.sheet_source import SourceConfig

logger = logging.getLogger(__name__)


def load_source_configs(*, config_path: str | Path) -> list[SourceConfig]:
    """
    Load source configurations from a JSON file shaped as {"sources": [...]}.
    """

    path = Path(config_path)
    if not path.exists():
        raise FileNotFoundError(f"Sheet sources config file not found: {path}")

    raw_data = json.loads(path.read_text(encoding="utf-8"))
    sources = raw_data.get("sources", []) if isinstance(raw_data, dict) else None
    if not isinstance(sources, list):
        raise ValueError("Invalid sheet sources config: 'sources' must be a list.")

    parsed: list[SourceConfig] = []
    for index, entry in enumerate(sources):
        if not isinstance(entry, dict):
            logger.warning("Skipping non-object sheet source entry index=%s", index)
            continue

        name = _optional_str(entry.get("name"))
        document_id = _optional_str(entry.get("document_id"))
        if not name or not document_id:
            logger.warning(
                "Skipping sheet source without name or document_id index=%s name=%r",
                index,
                name,
            )
            continue

        sponsor_name = _optional_str(entry.get("sponsor")) or ""
        parsed.append(
            SourceConfig(
                source_name=name,
                document_id=document_id,
                sponsor_name=sponsor_name,
                label_name=_optional_str(entry.get("label")) or name,
                tab_name=_optional_str(entry.get("tab")),
            )
        )

    return parsed


def _optional_str(value: object) -> str | None:
    if value is None:
        return None
    if not isinstance(value, str):
        return None
    stripped = value.strip()
    return stripped or None
