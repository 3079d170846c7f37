"""Comparing the items a compiler placed in codegen units with those expected."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

from compiletest.process import TestFailure

PREFIX = "TRANS_ITEM "
CGU_MARKER = "@@"


def _lines(text: str) -> list[str]:
    """Split on newlines, dropping a trailing empty line and any ``\\r``."""
    if not text:
        return []
    parts = text.split("\n")
    if text.endswith("\n"):
        parts.pop()
    return [part[:-1] if part.endswith("\r") else part for part in parts]


@dataclass(frozen=True)
class TransItem:
    """A translation item: its name, its codegen units and the full line."""

    name: str
    codegen_units: frozenset[str]
    string: str


@dataclass
class CodegenReport:
    """Items missing, items not expected, and items in the wrong codegen units."""

    missing: list[str] = field(default_factory=list)
    unexpected: list[str] = field(default_factory=list)
    wrong_cgus: list[tuple[TransItem, TransItem]] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not (self.missing or self.unexpected or self.wrong_cgus)

    def __str__(self) -> str:
        out: list[str] = []
        if self.missing:
            out.append("\nThese items should have been contained but were not:\n")
            out.extend(self.missing)
            out.append("\n")
        if self.unexpected:
            out.append("\nThese items were contained but should not have been:\n")
            out.extend(self.unexpected)
            out.append("\n")
        if self.wrong_cgus:
            out.append("\nThe following items were assigned to wrong codegen units:\n")
            for expected, actual in self.wrong_cgus:
                out.append(expected.name)
                out.append(f"  expected: {codegen_units_to_str(expected.codegen_units)}")
                out.append(f"  actual:   {codegen_units_to_str(actual.codegen_units)}")
                out.append("")
        return "\n".join(out)


def parse_trans_item(s: str) -> TransItem:
    """Parse ``[TRANS_ITEM] name [@@ cgu...]`` into a :class:`TransItem`."""
    s = s[len(PREFIX):].strip() if s.startswith(PREFIX) else s.strip()
    full_string = f"{PREFIX}{s}"
    parts = [part.strip() for part in s.split(CGU_MARKER)]
    parts = [part for part in parts if part]
    if not parts:
        raise TestFailure(f"empty translation item: {full_string!r}")
    name = parts[0]
    cgus: frozenset[str] = frozenset()
    if len(parts) > 1:
        cgus = frozenset(unit for unit in parts[1].split(" ") if unit.strip())
    return TransItem(name=name, codegen_units=cgus, string=full_string)


def codegen_units_to_str(cgus: Iterable[str]) -> str:
    """Return the codegen units sorted, each followed by a space."""
    return "".join(f"{cgu} " for cgu in sorted(cgus))


def compare_trans_items(actual_output: str, expected_messages: Iterable[str]) -> CodegenReport:
    """Compare ``TRANS_ITEM`` lines of compiler output with the expected items."""
    actual = [parse_trans_item(line) for line in _lines(actual_output) if line.startswith(PREFIX)]
    expected = [parse_trans_item(message) for message in expected_messages]
    report = CodegenReport()

    for expected_item in expected:
        same_name = next((item for item in actual if item.name == expected_item.name), None)
        if same_name is None:
            report.missing.append(expected_item.string)
        elif expected_item.codegen_units and expected_item.codegen_units != same_name.codegen_units:
            report.wrong_cgus.append((expected_item, same_name))

    expected_names = {item.name for item in expected}
    report.unexpected = sorted(item.string for item in actual if item.name not in expected_names)
    report.missing.sort()
    report.wrong_cgus.sort(key=lambda pair: pair[0].name)
    return report