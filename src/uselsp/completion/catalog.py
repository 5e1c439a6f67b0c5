"""The fixed completion catalog offered without document context.

Ids are assigned once and never renumbered; clients hold an id between the
completion request and the resolve request. Append new entries at the end.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from lsprotocol.types import CompletionItemKind


class CompletionCategory(Enum):
    FUNCTION = "function"
    SNIPPET = "snippet"

    def to_lsp(self) -> CompletionItemKind:
        if self is CompletionCategory.SNIPPET:
            return CompletionItemKind.Snippet
        return CompletionItemKind.Function


@dataclass(frozen=True)
class CompletionEntry:
    id: int
    label: str
    category: CompletionCategory = CompletionCategory.FUNCTION


CATALOG: tuple[CompletionEntry, ...] = (
    CompletionEntry(0, "ifelse (example)"),
    CompletionEntry(1, "foreach (example)"),
    CompletionEntry(2, "MAX"),
    CompletionEntry(3, "MIN"),
    CompletionEntry(4, "ROUND"),
    CompletionEntry(5, "CONCAT"),
    CompletionEntry(6, "SUBSTR"),
    CompletionEntry(7, "STRLEN"),
    CompletionEntry(8, "CURDATE"),
    CompletionEntry(9, "DATEADD"),
    CompletionEntry(10, "DATEDIFF"),
    CompletionEntry(11, "DTADD"),
    CompletionEntry(12, "PAD"),
    CompletionEntry(13, "EXTRACT_BEFORE"),
    CompletionEntry(14, "EXTRACT_AFTER"),
    CompletionEntry(15, "aws_sign_string"),
    CompletionEntry(16, "basename"),
    CompletionEntry(17, "basename as"),
    CompletionEntry(18, "clear http_headers"),
    CompletionEntry(19, "discard"),
    CompletionEntry(20, "encode base16"),
    CompletionEntry(21, "encode base64"),
    CompletionEntry(22, "encrypt"),
    CompletionEntry(23, "environment"),
    CompletionEntry(24, "escape"),
    CompletionEntry(25, "exit_loop"),
    CompletionEntry(26, "generate_jwt"),
    CompletionEntry(27, "get_last_day_of"),
    CompletionEntry(28, "gunzip file"),
    CompletionEntry(29, "gunzip buffer"),
    CompletionEntry(30, "hash sha256"),
    CompletionEntry(31, "hash md5"),
    CompletionEntry(32, "http"),
    CompletionEntry(33, "http dump_headers"),
    CompletionEntry(34, "http get_header"),
    CompletionEntry(35, "json"),
    CompletionEntry(36, "loglevel"),
    CompletionEntry(37, "pause"),
    CompletionEntry(38, "print"),
    CompletionEntry(39, "save"),
    CompletionEntry(40, "set"),
    CompletionEntry(41, "terminate"),
    CompletionEntry(42, "terminate with error"),
    CompletionEntry(43, "unzip"),
    CompletionEntry(44, "uri encode"),
    CompletionEntry(45, "uri component-encode"),
    CompletionEntry(46, "uri aws-object-encode"),
    CompletionEntry(47, "buffer"),
    CompletionEntry(48, "csv"),
    CompletionEntry(49, "csv add_headers"),
    CompletionEntry(50, "csv fix_headers"),
    CompletionEntry(51, "csv write_fields"),
    CompletionEntry(52, "csv close"),
    CompletionEntry(53, "decimal_to_ipv4"),
    CompletionEntry(54, "decimal_to_ipv4 as"),
    CompletionEntry(55, "gosub"),
    CompletionEntry(56, "ipv4_to_decimal"),
    CompletionEntry(57, "ipv4_to_decimal as"),
    CompletionEntry(58, "loop"),
    CompletionEntry(59, "lowercase"),
    CompletionEntry(60, "match"),
    CompletionEntry(61, "return"),
    CompletionEntry(62, "subroutine"),
    CompletionEntry(63, "uppercase"),
)
