"""Row reader for mnemonic-listing exports.

Each data line has the fixed 7-column schema::

    SequenceNo, Step, Instruction, Operand1, Operand2, Operand3, Comment

Fields are comma-separated; double-quoted fields may contain commas and
doubled quotes.  Reading is best-effort: malformed lines are skipped.
"""

from __future__ import annotations

import csv
import logging
import re
from collections.abc import Iterator

from pydantic import BaseModel, ConfigDict

logger = logging.getLogger(__name__)

MIN_FIELDS = 3

_NUMBER_RE = re.compile(r"\d+", re.ASCII)


class Row(BaseModel):
    """One instruction row of the listing."""

    model_config = ConfigDict(frozen=True)

    sequence: int
    step: int
    instruction: str
    operand1: str | None = None
    operand2: str | None = None
    operand3: str | None = None
    comment: str | None = None

    @property
    def operands(self) -> list[str | None]:
        return [self.operand1, self.operand2, self.operand3]


def _is_header(line: str) -> bool:
    lowered = line.lower()
    return "no" in lowered and ("step" in lowered or "instruction" in lowered)


def _split_fields(line: str) -> list[str]:
    fields = next(csv.reader([line], skipinitialspace=True), [])
    return [f.strip() for f in fields]


def _optional(fields: list[str], index: int) -> str | None:
    if index < len(fields) and fields[index]:
        return fields[index]
    return None


def parse_row(line: str) -> Row | None:
    """Parse one data line, or return None if it is malformed."""
    fields = _split_fields(line)
    if len(fields) < MIN_FIELDS:
        return None
    sequence, step, instruction = fields[0], fields[1], fields[2]
    if not _NUMBER_RE.fullmatch(sequence) or not _NUMBER_RE.fullmatch(step) or not instruction:
        return None
    return Row(
        sequence=int(sequence),
        step=int(step),
        instruction=instruction.upper(),
        operand1=_optional(fields, 3),
        operand2=_optional(fields, 4),
        operand3=_optional(fields, 5),
        comment=_optional(fields, 6),
    )


class RowReader:
    """Cursor over the data rows of a listing.

    Line endings are normalised and blank lines dropped on construction.
    A header line is detected and skipped; it does not count towards
    :attr:`line_count`.
    """

    def __init__(self, text: str) -> None:
        normalized = text.replace("\r\n", "\n").replace("\r", "\n")
        lines = [line for line in normalized.split("\n") if line.strip()]

        self.header_skipped = bool(lines) and _is_header(lines[0])
        if self.header_skipped:
            logger.debug("Skipping header row: %r", lines[0])
            lines = lines[1:]

        self._lines = lines
        self._pos = 0

    @property
    def line_count(self) -> int:
        return len(self._lines)

    def has_more(self) -> bool:
        """True while unread lines remain (some may still be malformed)."""
        return self._pos < len(self._lines)

    def reset(self) -> None:
        self._pos = 0

    def next_row(self) -> Row | None:
        """Return the next well-formed row, or None at end of input."""
        while self._pos < len(self._lines):
            line = self._lines[self._pos]
            self._pos += 1
            row = parse_row(line)
            if row is not None:
                return row
            logger.debug("Skipping malformed row at data line %d: %r", self._pos, line)
        return None

    def peek(self) -> Row | None:
        saved = self._pos
        try:
            return self.next_row()
        finally:
            self._pos = saved

    def read_all(self) -> list[Row]:
        return list(self)

    def __iter__(self) -> Iterator[Row]:
        while (row := self.next_row()) is not None:
            yield row


def group_by_step(rows: list[Row]) -> dict[int, list[Row]]:
    """Group rows by step, keeping first-seen step order and row order."""
    groups: dict[int, list[Row]] = {}
    for row in rows:
        groups.setdefault(row.step, []).append(row)
    return groups


def read_rows(text: str) -> list[Row]:
    return RowReader(text).read_all()


def group_rows(text: str) -> dict[int, list[Row]]:
    return group_by_step(read_rows(text))
