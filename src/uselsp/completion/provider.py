from __future__ import annotations

from typing import Mapping, Sequence

from lsprotocol.types import CompletionItem

from uselsp.completion.catalog import CATALOG, CompletionEntry
from uselsp.completion.resolutions import (
    RESOLUTIONS,
    CompletionResolution,
    InsertFormat,
)
from uselsp.exceptions import ConfigurationFault, UnresolvedEntry
from uselsp.snippets import SnippetSyntaxError, parse_snippet


def _check_tables(
    catalog: Sequence[CompletionEntry],
    resolutions: Mapping[int, CompletionResolution],
) -> None:
    seen: set[int] = set()
    for entry in catalog:
        if entry.id in seen:
            raise ConfigurationFault("duplicate catalog id", env={"id": entry.id})
        seen.add(entry.id)
    missing = sorted(seen - set(resolutions))
    if missing:
        raise ConfigurationFault("catalog ids without resolution", env={"ids": missing})
    extra = sorted(set(resolutions) - seen)
    if extra:
        raise ConfigurationFault("resolutions without catalog entry", env={"ids": extra})
    for entry in catalog:
        resolution = resolutions[entry.id]
        if resolution.label != entry.label:
            raise ConfigurationFault(
                "catalog and resolution labels disagree",
                env={"id": entry.id, "catalog": entry.label, "resolution": resolution.label},
            )
        if resolution.insert_format is not InsertFormat.SNIPPET:
            continue
        try:
            parse_snippet(resolution.insert_text)
        except SnippetSyntaxError as exc:
            raise ConfigurationFault(
                "malformed snippet template",
                env={"id": entry.id, "label": entry.label, "error": str(exc)},
            ) from exc


class CompletionProvider:
    """Static completion catalog plus its lazily fetched resolutions.

    Both tables are checked against each other on construction: every catalog
    id resolves, every resolution belongs to a catalog id, labels agree, and
    snippet templates parse. Any disagreement is a `ConfigurationFault`.
    """

    def __init__(
        self,
        catalog: Sequence[CompletionEntry] = CATALOG,
        resolutions: Mapping[int, CompletionResolution] = RESOLUTIONS,
    ) -> None:
        _check_tables(catalog, resolutions)
        self._catalog: tuple[CompletionEntry, ...] = tuple(catalog)
        self._resolutions: dict[int, CompletionResolution] = dict(resolutions)

    def list_completions(self) -> tuple[CompletionEntry, ...]:
        return self._catalog

    def resolve(self, entry_id: object) -> CompletionResolution:
        key = _normalize_id(entry_id)
        if key is None or key not in self._resolutions:
            raise UnresolvedEntry(entry_id)
        return self._resolutions[key]

    def to_lsp_items(self) -> list[CompletionItem]:
        return [
            CompletionItem(label=entry.label, kind=entry.category.to_lsp(), data=entry.id)
            for entry in self._catalog
        ]

    def resolve_item(self, item: CompletionItem) -> CompletionItem:
        """Merge the resolution for `item.data` onto the listed item in place."""
        resolution = self.resolve(item.data)
        if resolution.category is not None:
            item.kind = resolution.category.to_lsp()
        item.insert_text = resolution.insert_text
        item.insert_text_format = resolution.insert_format.to_lsp()
        item.documentation = resolution.documentation
        if resolution.sort_text is not None:
            item.sort_text = resolution.sort_text
        return item


def _normalize_id(entry_id: object) -> int | None:
    # Some clients hand `data` back as a string.
    if isinstance(entry_id, bool):
        return None
    if isinstance(entry_id, int):
        return entry_id
    if isinstance(entry_id, str):
        text = entry_id.strip()
        # Only the ASCII spelling the provider itself hands out.
        if text.isascii() and text.isdecimal():
            return int(text)
    return None
