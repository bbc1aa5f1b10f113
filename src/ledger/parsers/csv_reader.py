"""Streaming CSV reader for transaction import files.

Expected layout: a header line (skipped) followed by data lines with the
fields ``title, type, value, category`` in that order.
"""

import csv
import io
from collections.abc import Iterator
from pathlib import Path
from typing import NamedTuple

from ledger.core.exceptions import CSVFormatError, SourceFileError

FIELD_COUNT = 4


class RawRow(NamedTuple):
    """One data line split into trimmed fields."""

    line: int
    title: str
    type: str
    value: str
    category: str


def is_complete(row: RawRow) -> bool:
    """Return True when title, type and value are all present."""
    return bool(row.title and row.type and row.value)


def iter_csv_rows(
    path: str | Path, encoding: str = "utf-8", delimiter: str = ","
) -> Iterator[RawRow]:
    """Lazily yield data rows from a CSV file.

    The file is opened as a byte stream and decoded incrementally, so the
    whole document is never held in memory. The iterator is single-pass;
    iterating again requires calling this function again.

    Args:
        path: Path to the CSV file
        encoding: Text encoding of the file
        delimiter: Field delimiter

    Yields:
        RawRow per non-blank data line. Missing trailing fields are empty
        strings and fields beyond the fourth are ignored.

    Raises:
        SourceFileError: If the file cannot be opened or read
        CSVFormatError: If the content cannot be decoded or parsed
    """
    path = Path(path)
    try:
        stream = path.open("rb")
    except OSError as e:
        raise SourceFileError(
            "IMPORT_001", {"path": str(path), "reason": type(e).__name__}
        ) from e

    with stream:
        text = io.TextIOWrapper(stream, encoding=encoding, newline="")
        reader = csv.reader(text, delimiter=delimiter)
        try:
            for index, cells in enumerate(reader):
                if index == 0:
                    # Header
                    continue
                if not any(cell.strip() for cell in cells):
                    continue
                fields = [cell.strip() for cell in cells[:FIELD_COUNT]]
                fields += [""] * (FIELD_COUNT - len(fields))
                yield RawRow(reader.line_num, *fields)
        except UnicodeDecodeError as e:
            raise CSVFormatError(
                "IMPORT_002", {"path": str(path), "line": reader.line_num + 1}
            ) from e
        except csv.Error as e:
            raise CSVFormatError(
                "IMPORT_002",
                {"path": str(path), "line": reader.line_num, "reason": str(e)},
            ) from e
        except OSError as e:
            raise SourceFileError(
                "IMPORT_001", {"path": str(path), "reason": type(e).__name__}
            ) from e
