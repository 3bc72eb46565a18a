# =============================================================================
# lib/csv_codec.py - Song CSV Parser and Serializer
# =============================================================================
# Converts between CSV text and song records for bulk import/export.
#
# Format:
#   title,category,mnemonic,lyrics,mediaLink
#   "Paranauê","angola","Para-na-uê","Paranauê, paranauê paraná
#   Paranauê, paranauê paraná",""
#
# Fields containing a comma, a quote or a line break are wrapped in double
# quotes; a quote inside a quoted field is written twice ("").
#
# The parser is a single left-to-right scan with one character of
# lookahead. It does not use the csv module: its handling of blank lines,
# stray quotes and CR/LF has to match files exported by earlier versions
# of the app.
#
# Usage:
#   from lib.csv_codec import parse_songs, serialize_songs
#   records = parse_songs(text)
#   text = serialize_songs(songs)
# =============================================================================

from __future__ import annotations

import logging
from typing import Iterable

from app.exceptions import CsvFormatError, RowValidationError
from core.models.song import Song, SongCategory, SongRecord

logger = logging.getLogger(__name__)

QUOTE = '"'
DELIMITER = ","
LINE_BREAKS = ("\r", "\n")

# Export header, in column order
EXPORT_COLUMNS = ["title", "category", "mnemonic", "lyrics", "mediaLink"]

REQUIRED_COLUMNS = ("title", "category")

# Lowercased header name -> SongRecord field
CANONICAL_FIELDS = {
    "title": "title",
    "category": "category",
    "mnemonic": "mnemonic",
    "lyrics": "lyrics",
    "medialink": "media_link",
}


# =============================================================================
# Parsing
# =============================================================================

def parse_csv(text: str) -> list[list[str]]:
    """
    Split CSV text into rows of field strings.

    Rules:
    - A quote toggles quoted mode, except that two quotes inside quoted
      mode produce one literal quote.
    - Outside quoted mode a comma ends the field, and CR, LF or CRLF ends
      the row. A line that produced no content and no fields is dropped,
      so blank lines and a trailing newline don't create empty rows.
    - Inside quoted mode commas, CR and LF are kept as data.

    Args:
        text: Complete file contents

    Returns:
        Rows in file order; each row is a list of field values

    Example:
        >>> parse_csv('a,"b,c"\\n')
        [['a', 'b,c']]
    """
    rows: list[list[str]] = []
    row: list[str] = []
    field: list[str] = []
    in_quotes = False
    i = 0
    length = len(text)

    def end_row() -> None:
        nonlocal row, field
        if field or row:
            row.append("".join(field))
            rows.append(row)
        row = []
        field = []

    while i < length:
        char = text[i]
        next_char = text[i + 1] if i + 1 < length else ""

        if char == QUOTE:
            if in_quotes and next_char == QUOTE:
                field.append(QUOTE)
                i += 1
            else:
                in_quotes = not in_quotes
        elif char in LINE_BREAKS:
            if in_quotes:
                field.append(char)
            else:
                end_row()
                if char == "\r" and next_char == "\n":
                    i += 1
        elif char == DELIMITER and not in_quotes:
            row.append("".join(field))
            field = []
        else:
            field.append(char)

        i += 1

    end_row()
    return rows


def strip_legacy_quotes(value: str) -> str:
    """
    Second un-quoting pass applied to every imported cell.

    Removes one leading and one trailing quote, then collapses doubled
    quotes. parse_csv() has already unquoted the field, so for most
    well-formed files this is a no-op. A value that itself begins or ends
    with a quote, or contains two quotes in a row, loses them here and does
    not survive an export/import round trip.
    """
    if value.startswith(QUOTE):
        value = value[1:]
    if value.endswith(QUOTE):
        value = value[:-1]
    return value.replace(QUOTE * 2, QUOTE)


def _normalize_header(cells: list[str]) -> list[str]:
    return [cell.lower().strip() for cell in cells]


def _optional(value: str) -> str | None:
    return value if value else None


def _to_record(fields: dict[str, str]) -> SongRecord:
    canonical = {CANONICAL_FIELDS[name]: value for name, value in fields.items() if name in CANONICAL_FIELDS}
    extra = {name: value for name, value in fields.items() if name not in CANONICAL_FIELDS}
    return SongRecord(
        title=canonical.get("title", ""),
        category=SongCategory(canonical["category"]),
        mnemonic=_optional(canonical.get("mnemonic", "")),
        lyrics=_optional(canonical.get("lyrics", "")),
        media_link=_optional(canonical.get("media_link", "")),
        extra=extra,
    )


def parse_songs(text: str) -> list[SongRecord]:
    """
    Parse and validate an imported CSV file.

    The header row is matched case-insensitively and in any order; it must
    contain at least `title` and `category`. Every data row must have a
    title or a mnemonic and a valid category. Validation stops at the first
    bad row, so nothing is imported from a file with any error.

    Args:
        text: Decoded file contents

    Returns:
        One SongRecord per data row

    Raises:
        CsvFormatError: Fewer than two rows, or a required column is missing
        RowValidationError: A data row is invalid (line 2 is the first data row)
    """
    rows = parse_csv(text)

    if len(rows) < 2:
        raise CsvFormatError(
            "The CSV file must contain a header row and at least one data row",
            details={"rows": len(rows)},
        )

    headers = _normalize_header(rows[0])
    missing = [column for column in REQUIRED_COLUMNS if column not in headers]
    if missing:
        raise CsvFormatError(
            'The CSV file must contain at least the columns "title" and "category"',
            details={"headers": headers, "missing": missing},
        )

    valid_categories = SongCategory.values()
    records: list[SongRecord] = []

    for index, values in enumerate(rows[1:]):
        line = index + 2

        fields: dict[str, str] = {}
        for position, header in enumerate(headers):
            value = values[position] if position < len(values) else ""
            fields[header] = strip_legacy_quotes(value)

        if not fields["title"] and not fields.get("mnemonic"):
            raise RowValidationError(line, f"Title or mnemonic is required on line {line}")

        if fields["category"] not in valid_categories:
            raise RowValidationError(
                line,
                f'Invalid category on line {line}: "{fields["category"]}"\n'
                f"Valid categories: {', '.join(valid_categories)}",
            )

        records.append(_to_record(fields))

    logger.debug(f"Parsed {len(records)} song(s) from CSV ({len(headers)} columns)")
    return records


# =============================================================================
# Serialization
# =============================================================================

def quote(value: str | None) -> str:
    """Wrap a value in quotes, doubling any quote inside it. None becomes ""."""
    return QUOTE + (value or "").replace(QUOTE, QUOTE * 2) + QUOTE


def serialize_songs(songs: Iterable[Song | SongRecord]) -> str:
    """
    Render songs as CSV text.

    Every value is quoted, so commas, quotes and line breaks inside lyrics
    survive a round trip. Rows are separated by a single LF with no
    trailing newline; with no songs only the header is returned.
    """
    lines = [DELIMITER.join(EXPORT_COLUMNS)]
    for song in songs:
        lines.append(DELIMITER.join([
            quote(song.title),
            quote(song.category.value),
            quote(song.mnemonic),
            quote(song.lyrics),
            quote(song.media_link),
        ]))
    return "\n".join(lines)
