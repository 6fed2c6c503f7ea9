"""Input loader with format dispatch, size ceiling and encoding detection.

Delimited files are decoded to text and parsed by :mod:`dataprofile.parser`.
Spreadsheets are decoded by pandas into header + string rows and then fed
through the same record-construction contract.
"""

from __future__ import annotations

import datetime as dt
import io
import logging
import os
import zipfile
from pathlib import Path
from typing import Any, Optional, Union

import chardet
import pandas as pd
from openpyxl.utils.exceptions import InvalidFileException
from xlrd import XLRDError

from dataprofile.config import DEFAULT_CONFIG, DELIMITERS, EXCEL_ENGINES, SUPPORTED_FORMATS, AnalysisConfig
from dataprofile.exceptions import (
    EmptyInputError,
    MalformedRecordError,
    SizeLimitExceededError,
    UnsupportedFormatError,
)
from dataprofile.models import Dataset
from dataprofile.parser import build_dataset, parse_delimited

logger = logging.getLogger(__name__)


def detect_format(filename: str) -> str:
    """Return the format tag for *filename* from its extension."""
    extension = Path(filename).suffix.lower().lstrip(".")
    if extension not in SUPPORTED_FORMATS:
        raise UnsupportedFormatError(
            f"Unsupported file format: .{extension}. "
            f"Supported formats: {', '.join(sorted(SUPPORTED_FORMATS))}",
            filename,
        )
    return extension


def check_size(size: int, config: AnalysisConfig = DEFAULT_CONFIG, source: Optional[str] = None) -> None:
    """Raise SizeLimitExceededError when *size* bytes exceeds the ceiling."""
    if size > config.max_input_bytes:
        raise SizeLimitExceededError(
            f"File size ({size / (1024 ** 2):.2f} MB) exceeds "
            f"maximum allowed size ({config.max_input_bytes / (1024 ** 2):.2f} MB)",
            source,
        )


def _detect_encoding(raw: bytes) -> str:
    """Detect the encoding of *raw* using chardet, falling back to utf-8."""
    if not raw:
        return "utf-8"
    result = chardet.detect(raw)
    return result.get("encoding") or "utf-8"


def _try_decode(raw: bytes, encoding: str) -> Optional[str]:
    """Decode *raw* with the given encoding. Returns text or None."""
    try:
        return raw.decode(encoding)
    except (UnicodeDecodeError, LookupError):
        return None


def decode_text(raw: bytes) -> str:
    """Decode raw bytes to text with a detection-then-fallback chain."""
    encoding = _detect_encoding(raw)
    text = _try_decode(raw, encoding)
    if text is None:
        text = _try_decode(raw, "utf-8")
    if text is None:
        # latin-1 never fails for byte sequences
        text = raw.decode("latin-1")
        encoding = "latin-1"
    logger.debug("Decoded %d bytes as %s", len(raw), encoding)
    return text.lstrip("\ufeff")


def _cell_text(value: Any) -> str:
    """Render one spreadsheet cell as the raw string a delimited file would hold."""
    if value is None or (isinstance(value, float) and pd.isna(value)):
        return ""
    if isinstance(value, bool):
        return str(value).upper()
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, pd.Timestamp):
        value = value.to_pydatetime()
    if isinstance(value, dt.datetime):
        if value.time() == dt.time():
            return value.date().isoformat()
        return value.isoformat(sep=" ")
    if isinstance(value, dt.date):
        return value.isoformat()
    return str(value).strip()


def decode_spreadsheet(raw: bytes, fmt: str, source: Optional[str] = None) -> Dataset:
    """Decode the first sheet of an xlsx/xls workbook into a Dataset.

    The first sheet row is the header; every cell becomes a string.
    """
    try:
        frame = pd.read_excel(
            io.BytesIO(raw),
            sheet_name=0,
            header=None,
            dtype=object,
            engine=EXCEL_ENGINES[fmt],
        )
    except (zipfile.BadZipFile, XLRDError, InvalidFileException, KeyError) as exc:
        raise MalformedRecordError(f"Cannot read .{fmt} workbook: {exc}", source) from exc
    if frame.empty:
        raise EmptyInputError("Spreadsheet has no rows", source)

    rows = [[_cell_text(value) for value in row] for row in frame.itertuples(index=False)]
    header, body = rows[0], rows[1:]
    logger.debug("Decoded spreadsheet with %d rows x %d columns", len(body), len(header))
    return build_dataset(header, body, source=source)


def load_text(
    text: str,
    fmt: str = "csv",
    strict: bool = False,
    source: Optional[str] = None,
) -> Dataset:
    """Parse already-decoded delimited text of format *fmt* (csv or tsv)."""
    if fmt not in DELIMITERS:
        raise UnsupportedFormatError(f"Format {fmt!r} is not a delimited text format", source)
    return parse_delimited(text, DELIMITERS[fmt], strict=strict, source=source)


def load_bytes(
    raw: bytes,
    filename: str,
    config: AnalysisConfig = DEFAULT_CONFIG,
    strict: bool = False,
) -> Dataset:
    """Load raw file content, dispatching on the extension of *filename*.

    Args:
        raw: File content.
        filename: Original file name; only its extension is used for dispatch.
        config: Supplies the size ceiling.
        strict: Reject ragged delimited rows instead of padding/truncating.

    Returns:
        The parsed Dataset.

    Raises:
        UnsupportedFormatError: Extension not in the supported set.
        SizeLimitExceededError: Content larger than ``config.max_input_bytes``.
        EmptyInputError: No header line.
    """
    fmt = detect_format(filename)
    check_size(len(raw), config, filename)
    logger.info("Loading %s (%s, %.2f MB)", filename, fmt, len(raw) / (1024 ** 2))

    if fmt in EXCEL_ENGINES:
        dataset = decode_spreadsheet(raw, fmt, source=filename)
    else:
        dataset = load_text(decode_text(raw), fmt, strict=strict, source=filename)

    logger.info("Loaded %d rows x %d columns", dataset.row_count, dataset.column_count)
    return dataset


def load_file(
    file_path: Union[str, Path],
    config: AnalysisConfig = DEFAULT_CONFIG,
    strict: bool = False,
) -> Dataset:
    """Load a dataset from disk, checking format and size before reading."""
    path = Path(file_path)
    if not path.is_file():
        raise FileNotFoundError(f"File not found: {path}")
    detect_format(path.name)
    check_size(os.path.getsize(path), config, str(path))
    return load_bytes(path.read_bytes(), path.name, config=config, strict=strict)
