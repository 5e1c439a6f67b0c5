from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Iterable, Iterator, Protocol, Sequence

from lsprotocol.types import Diagnostic, DiagnosticSeverity, Position, Range

from uselsp.exceptions import ConfigurationFault, MalformedRange
from uselsp.positions import StringSource, TextSource

logger = logging.getLogger(__name__)

DEFAULT_SOURCE = "ex"


@dataclass(frozen=True)
class Finding:
    severity: DiagnosticSeverity
    start: Position
    end: Position
    message: str
    source: str

    def to_lsp(self) -> Diagnostic:
        return Diagnostic(
            range=Range(start=self.start, end=self.end),
            message=self.message,
            severity=self.severity,
            source=self.source,
        )


@dataclass(frozen=True)
class Match:
    start: int
    end: int
    text: str


class Rule(Protocol):
    name: str
    message: str

    def matches(self, text: str) -> Iterator[Match]: ...


class PatternRule:
    """A regular expression over raw text plus the message appended to each hit.

    Scanning is leftmost and non-overlapping. Empty matches are skipped so a
    pattern that can match nothing never yields a zero-width finding.
    """

    def __init__(self, name: str, pattern: str, message: str, flags: int = 0):
        try:
            compiled = re.compile(pattern, flags)
        except re.error as exc:
            raise ConfigurationFault(
                "diagnostic pattern does not compile",
                env={"rule": name, "pattern": pattern, "error": str(exc)},
            ) from exc
        self.name = name
        self.pattern = compiled
        self.message = message

    def matches(self, text: str) -> Iterator[Match]:
        for found in self.pattern.finditer(text):
            if found.end() == found.start():
                continue
            yield Match(found.start(), found.end(), found.group(0))

    def __repr__(self) -> str:
        return f"PatternRule({self.name!r}, {self.pattern.pattern!r})"


# Character classes of the ECMAScript regex flavour the rules were written
# in: `\s` covers Unicode spaces but not U+001C..U+001F or U+0085, and `\w`
# is ASCII only. Python's own `\s` and `\w` differ in both directions.
ECMA_SPACE = r"[\t\n\v\f\r \u00a0\u1680\u2000-\u200a\u2028\u2029\u202f\u205f\u3000\ufeff]"
ECMA_WORD = r"[A-Za-z0-9_]"

# The alternation in buffer-spacing flags `x=1`, `x= 1` and `x =1` but lets
# `x = 1` through. Keep it literal.
DEFAULT_RULES: tuple[PatternRule, ...] = (
    PatternRule(
        "buffer-spacing",
        rf"buffer{ECMA_SPACE}{ECMA_WORD}+(={ECMA_SPACE}|{ECMA_SPACE}={ECMA_SPACE}{{0}}|=){ECMA_WORD}+",
        "requires spaces before and after =.",
    ),
    PatternRule(
        "if-paren-spacing",
        r"(if\()",
        "needs a space between 'if' and opening paranthesis.",
    ),
)


class DiagnosticEngine:
    def __init__(
        self,
        rules: Iterable[Rule] = DEFAULT_RULES,
        *,
        source: str = DEFAULT_SOURCE,
        severity: DiagnosticSeverity = DiagnosticSeverity.Error,
    ) -> None:
        self.rules: tuple[Rule, ...] = tuple(rules)
        names = [rule.name for rule in self.rules]
        if len(set(names)) != len(names):
            raise ConfigurationFault("duplicate diagnostic rule names", env={"rules": names})
        self.source = source
        self.severity = severity

    def validate(self, document: TextSource) -> list[Finding]:
        """Scan the full document text and return every finding.

        Findings come out grouped by rule in rule order, and by match offset
        within each rule. They are not re-sorted by position.
        """
        text = document.get_text()
        findings: list[Finding] = []
        if not text:
            return findings
        for rule in self.rules:
            for match in rule.matches(text):
                finding = self._finding(document, rule, match)
                if finding is not None:
                    findings.append(finding)
        return findings

    def validate_text(self, text: str) -> list[Finding]:
        return self.validate(StringSource(text))

    def _finding(self, document: TextSource, rule: Rule, match: Match) -> Finding | None:
        try:
            start = document.offset_to_position(match.start)
            end = document.offset_to_position(match.end)
        except MalformedRange as exc:
            logger.warning(
                "dropping %s finding at [%d, %d): %s",
                rule.name,
                match.start,
                match.end,
                exc,
            )
            return None
        return Finding(
            severity=self.severity,
            start=start,
            end=end,
            message=f"{match.text} {rule.message}",
            source=self.source,
        )


def to_lsp_diagnostics(findings: Sequence[Finding]) -> list[Diagnostic]:
    return [finding.to_lsp() for finding in findings]
