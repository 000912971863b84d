import re

from pressuretrace.core.errors import MalformedGridError

Grid = list[list[int]]

FIELD_DELIMITER = ","

# Rows end at CR or LF only; other control characters stay inside a cell.
_ROW_BREAKS = re.compile(r"[\r\n]+")


def _parse_cell(field: str) -> int:
    # Lenient: a cell that is not an integer reads as no pressure instead of rejecting the frame.
    try:
        return int(field)
    except ValueError:
        return 0


def parse_matrix(raw_text: str, size: int) -> Grid:
    """
    Turn comma/line-delimited text into a size x size integer grid.

    Blank lines are ignored. Wrong row or column counts raise MalformedGridError;
    unparsable cells become 0.
    """
    rows = [line.split(FIELD_DELIMITER) for line in _ROW_BREAKS.split(raw_text) if line.strip()]

    if len(rows) != size or any(len(r) != size for r in rows):
        raise MalformedGridError(size)

    return [[_parse_cell(field.strip()) for field in row] for row in rows]
