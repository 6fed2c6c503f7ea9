"""Delimited text parser producing header-keyed records.

Leniency policy: rows shorter than the header are padded with empty strings
and rows longer than the header are truncated. Pass ``strict=True`` to reject
such rows with :class:`MalformedRecordError` instead.

Quote handling is simple: every ``"`` toggles the in-quotes state
and is dropped, so ``""`` is not an escaped quote as in RFC 4180.
"""

from __future__ import annotations

import logging
from types import MappingProxyType
from typing import Iterable, Optional, Sequence

from dataprofile.exceptions import EmptyInputError, MalformedRecordError
from dataprofile.models import Dataset

logger = logging.getLogger(__name__)

QUOTE = '"'


def split_line(line: str, delimiter: str = ",") -> list[str]:
    """Split one line into trimmed fields, honoring double-quoted spans."""
    fields: list[str] = []
    current: list[str] = []
    in_quotes = False

    for char in line:
        if char == QUOTE:
            in_quotes = not in_quotes
        elif char == delimiter and not in_quotes:
            fields.append("".join(current).strip())
            current = []
        else:
            current.append(char)

    fields.append("".join(current).strip())
    return fields


def unique_columns(header: Sequence[str]) -> tuple[str, ...]:
    """Make header names unique the way ``pandas.read_csv`` does.

    A blank name at position *i* becomes ``Unnamed: i``; a repeated name gets
    a ``.1``, ``.2`` ... suffix in order of appearance.
    """
    counts: dict[str, int] = {}
    columns: list[str] = []
    for position, name in enumerate(header):
        name = name or f"Unnamed: {position}"
        count = counts.get(name, 0)
        while count > 0:
            counts[name] = count + 1
            name = f"{name}.{count}"
            count = counts.get(name, 0)
        counts[name] = count + 1
        columns.append(name)
    return tuple(columns)


def build_dataset(
    header: Sequence[str],
    rows: Iterable[Sequence[str]],
    strict: bool = False,
    source: Optional[str] = None,
) -> Dataset:
    """Construct a Dataset from a header and raw rows of cell strings.

    Shared by the delimited parser and the spreadsheet decoder so both paths
    obey the same record contract. Blank and repeated header names are
    renamed with :func:`unique_columns`.

    Args:
        header: Column names in left-to-right order.
        rows: Data rows; each row is a sequence of cell strings.
        strict: Raise on rows whose length differs from the header.
        source: Optional file name used in error messages.

    Returns:
        An immutable Dataset preserving row order.

    Raises:
        EmptyInputError: If the header is empty.
        MalformedRecordError: On ragged rows in strict mode.
    """
    columns = tuple(header)
    if not columns:
        raise EmptyInputError("Input has no header line", source)

    columns = unique_columns(columns)
    if columns != tuple(header):
        logger.warning("Renamed blank or repeated header names: %s", ", ".join(columns))

    width = len(columns)
    records = []
    for index, values in enumerate(rows):
        if strict and len(values) != width:
            # +2: 1-based, and the header occupies line 1
            raise MalformedRecordError(
                f"Line {index + 2} has {len(values)} fields, expected {width}", source
            )
        padded = list(values[:width]) + [""] * (width - len(values))
        records.append(MappingProxyType(dict(zip(columns, padded))))

    return Dataset(columns=columns, records=tuple(records))


def parse_delimited(
    text: str,
    delimiter: str = ",",
    strict: bool = False,
    source: Optional[str] = None,
) -> Dataset:
    """Parse delimited text into a Dataset.

    The first line is the header, split on *delimiter* and trimmed. Every
    following line is split with :func:`split_line`. Row indices in the
    resulting Dataset are 0-based from the first data line.

    Raises:
        EmptyInputError: If *text* has no lines.
    """
    if len(delimiter) != 1:
        raise ValueError(f"delimiter must be a single character, got {delimiter!r}")

    stripped = text.strip()
    if not stripped:
        raise EmptyInputError("Input is empty", source)

    lines = stripped.split("\n")
    header = [name.strip() for name in lines[0].split(delimiter)]
    rows = (split_line(line, delimiter) for line in lines[1:])
    return build_dataset(header, rows, strict=strict, source=source)
