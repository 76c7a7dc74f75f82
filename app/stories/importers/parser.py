import csv
import io
from collections.abc import Iterator
from dataclasses import dataclass

import structlog

from app.exceptions import ParseError
from app.stories.importers.schemas import RawRow

logger = structlog.get_logger()

BOM = "\ufeff"


@dataclass
class ParsedCSV:
    headers: list[str]
    rows: Iterator[RawRow]


def decode_content(file_content: bytes) -> str:
    """Decode bytes to text, stripping a UTF-8 BOM, with a Latin-1 fallback."""
    try:
        return file_content.decode("utf-8-sig")
    except UnicodeDecodeError:
        logger.warning("csv_decode_fallback", encoding="latin-1")
        return file_content.decode("latin-1")


def parse_csv(text: str) -> ParsedCSV:
    """Read the header eagerly and return a lazy, single-pass row iterator.

    Raises ParseError when the content is empty or has no header record. A
    malformed record further down comes out as a RawRow carrying ``error``.
    """
    reader = csv.reader(io.StringIO(text.lstrip(BOM), newline=""))

    try:
        header_record = next(reader)
    except StopIteration:
        raise ParseError("CSV file is empty") from None
    except csv.Error as exc:
        raise ParseError(f"Failed to parse CSV header: {exc}") from exc

    headers = [name.replace(BOM, "").strip() for name in header_record]
    if not any(headers):
        raise ParseError("CSV file has no header row")

    return ParsedCSV(headers=headers, rows=_iter_rows(reader, headers))


def _iter_rows(reader: Iterator[list[str]], headers: list[str]) -> Iterator[RawRow]:
    row_number = 0
    while True:
        row_number += 1
        try:
            record = next(reader)
        except StopIteration:
            return
        except csv.Error as exc:
            # the reader resets on the next call, so later records still parse
            logger.warning("csv_malformed_row", row=row_number, error=str(exc))
            yield RawRow(row_number=row_number, values={}, error=f"malformed CSV record: {exc}")
            continue

        if not any(cell.strip() for cell in record):
            logger.debug("csv_blank_row_skipped", row=row_number)
            continue

        if len(record) > len(headers):
            logger.debug(
                "csv_extra_fields_ignored",
                row=row_number,
                expected=len(headers),
                found=len(record),
            )

        values: dict[str, str] = {}
        for index, name in enumerate(headers):
            if not name or name in values:
                continue
            values[name] = record[index] if index < len(record) else ""

        yield RawRow(row_number=row_number, values=values)
