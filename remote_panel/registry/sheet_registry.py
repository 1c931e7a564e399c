"""
Read-only registry of sheet sources keyed by source name.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator

from remote_panel.domain.sheet_source import SourceConfig


class SheetRegistry:
    """
    Lookup over the source configurations supplied at construction.
    """

    def __init__(self, configs: Iterable[SourceConfig]) -> None:
        registered: dict[str, SourceConfig] = {}
        for config in configs:
            if config.source_name in registered:
                raise ValueError(f"Duplicate sheet source name: {config.source_name!r}")
            registered[config.source_name] = config
        self._configs = registered

    def get(self, source_name: str) -> SourceConfig:
        """
        Return the config for a registered source.

        Unknown names raise KeyError: callers only ever pass registry keys.
        """

        try:
            return self._configs[source_name]
        except KeyError:
            raise KeyError(f"Unknown sheet source: {source_name!r}") from None

    def names(self) -> list[str]:
        return list(self._configs)

    def all(self) -> list[SourceConfig]:
        return list(self._configs.values())

    def by_sponsor(self, sponsor_name: str) -> list[SourceConfig]:
        normalized = sponsor_name.strip().lower()
        return [
            config
            for config in self._configs.values()
            if config.sponsor_name.strip().lower() == normalized
        ]

    def __contains__(self, source_name: object) -> bool:
        return source_name in self._configs

    def __iter__(self) -> Iterator[SourceConfig]:
        return iter(self._configs.values())

    def __len__(self) -> int:
        return len(self._configs)
