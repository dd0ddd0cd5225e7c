"""
Sentence-greedy text chunker.

Splits extracted document text into overlapping passages. Prose is cut on
sentence boundaries and packed greedily up to a size limit; structured
spreadsheet renderings are packed row by row with their headers repeated.

Dependencies: re (stdlib)
System role: Pure chunking function used by the ingestion pipeline
"""

import re

SHEET_MARKER = "=== SHEET:"
COLUMNS_MARKER = "COLUMNS:"
ROW_PREFIX = "ROW"

# A run of text up to and including its closing punctuation, or a stray
# punctuation run at the start of the input. Together they cover every
# character; trailing text without punctuation forms the last unit.
_UNIT_PATTERN = re.compile(r"[^.!?\n]+[.!?\n]*|[.!?\n]+")
_SHEET_SPLIT = re.compile(r"(?==== SHEET:)")
_SEPARATOR_LINE = re.compile(r"^=+$")


def split_units(text: str) -> list[str]:
    """
    Split text into trimmed, non-empty sentence-like units.

    Boundaries are `.`, `!`, `?` and line breaks; the boundary characters
    stay attached to the unit they close.

    Args:
        text: Input text

    Returns:
        list[str]: Units in input order
    """
    units = (match.strip() for match in _UNIT_PATTERN.findall(text))
    return [unit for unit in units if unit]


def overlap_word_count(overlap: int) -> int:
    """Number of trailing words carried into the next chunk for an overlap budget."""
    return max(overlap, 0) // 5


def chunk_text(text: str, max_size: int = 1000, overlap: int = 200) -> list[str]:
    """
    Split text into overlapping passages.

    Units are accumulated into a buffer joined by single spaces. When the
    next unit would push the buffer past `max_size` and the buffer is not
    empty, the buffer is emitted and the next one starts with the last
    `overlap // 5` words of the emitted chunk. A unit longer than
    `max_size` is appended whole, so chunks may exceed `max_size`.
    Text no longer than `max_size` is returned as a single trimmed chunk.

    Text containing spreadsheet section markers is chunked per sheet
    instead; see chunk_spreadsheet_text.

    Args:
        text: Extracted document text
        max_size: Soft size limit in characters
        overlap: Overlap budget in characters

    Returns:
        list[str]: Non-empty chunks in document order; empty for blank input

    Raises:
        ValueError: If max_size is not positive
    """
    if max_size <= 0:
        raise ValueError("max_size must be positive")

    # Joining units with spaces can lengthen text that fits as-is.
    if len(text) <= max_size:
        stripped = text.strip()
        return [stripped] if stripped else []

    if SHEET_MARKER in text:
        return chunk_spreadsheet_text(text, max_size)

    carry = overlap_word_count(overlap)
    chunks: list[str] = []
    buffer = ""

    for unit in split_units(text):
        if buffer and len(buffer) + 1 + len(unit) > max_size:
            chunks.append(buffer)
            tail = buffer.split()[-carry:] if carry else []
            buffer = " ".join(tail + [unit])
        else:
            buffer = f"{buffer} {unit}" if buffer else unit

    if buffer.strip():
        chunks.append(buffer)

    return [chunk.strip() for chunk in chunks if chunk.strip()]


def chunk_spreadsheet_text(text: str, max_size: int = 1000) -> list[str]:
    """
    Chunk a structured spreadsheet rendering.

    Expected layout per sheet::

        === SHEET: <name> ===
        COLUMNS: a | b | c
        ========
        ROW 1: a: 1, b: 2, c: 3

    Every chunk of a sheet starts with the sheet header and COLUMNS line,
    followed by as many ROW lines as fit in `max_size`. A sheet without
    data lines produces no chunk.

    Args:
        text: Spreadsheet text with section markers
        max_size: Soft size limit in characters

    Returns:
        list[str]: Non-empty chunks in sheet order
    """
    chunks: list[str] = []

    for section in _SHEET_SPLIT.split(text):
        lines = [line for line in section.split("\n") if line.strip()]
        if not lines:
            continue

        sheet_header = ""
        column_info = ""
        data_start = 0
        for i, line in enumerate(lines[:5]):
            if SHEET_MARKER in line:
                sheet_header = line
                data_start = i + 1
            elif COLUMNS_MARKER in line:
                column_info = line
                data_start = max(data_start, i + 1)
            elif "===" in line:
                data_start = max(data_start, i + 1)

        while data_start < len(lines) and _SEPARATOR_LINE.match(lines[data_start].strip()):
            data_start += 1

        header = "\n".join(part for part in (sheet_header, column_info) if part)
        body: list[str] = []
        body_size = 0
        rows = 0

        for line in lines[data_start:]:
            is_row = line.startswith(ROW_PREFIX)
            if is_row and rows > 0 and len(header) + body_size + len(line) + 1 > max_size:
                chunks.append("\n".join([header, *body]).strip())
                body, body_size, rows = [], 0, 0
            body.append(line)
            body_size += len(line) + 1
            if is_row:
                rows += 1

        if body:
            chunks.append("\n".join([header, *body]).strip())

    return [chunk for chunk in chunks if chunk]
