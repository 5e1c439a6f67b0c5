from uselsp.completion.catalog import CATALOG, CompletionCategory, CompletionEntry
from uselsp.completion.provider import CompletionProvider
from uselsp.completion.resolutions import (
    RESOLUTIONS,
    CompletionResolution,
    InsertFormat,
)

__all__ = [
    "CATALOG",
    "RESOLUTIONS",
    "CompletionCategory",
    "CompletionEntry",
    "CompletionProvider",
    "CompletionResolution",
    "InsertFormat",
]
