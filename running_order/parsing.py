import io
import logging

import pandas as pd

from .errors import MissingColumnError, NoPerformancesError
from .models import DEFAULT_SPACING, FIRST, LAST, NONE, Performance

logger = logging.getLogger(__name__)

NAME_HEADER = 'performance name'
PERFORMERS_HEADER = 'performers'
CONSTRAINT_HEADER = 'constraints'
SPACING_HEADER = 'minimum spacing'


def map_columns(df):
    """Recognized header -> actual column name, matching case-insensitively after trimming."""
    col_map = {}
    for c in df.columns:
        normalized = str(c).strip().lower()
        if normalized in (NAME_HEADER, PERFORMERS_HEADER, CONSTRAINT_HEADER, SPACING_HEADER):
            col_map.setdefault(normalized, c)
    if PERFORMERS_HEADER not in col_map:
        raise MissingColumnError(f"No '{PERFORMERS_HEADER}' column in {list(df.columns)}")
    return col_map


def _cell(row, col_map, header):
    col = col_map.get(header)
    if col is None:
        return ''
    v = row[col]
    if pd.isna(v):
        return ''
    return str(v).strip()


def to_list(cell):
    if not cell:
        return []
    return [p.strip() for p in cell.split(',') if p.strip()]


def parse_constraint(cell):
    c = cell.strip().lower()
    if c == FIRST:
        return FIRST
    if c == LAST:
        return LAST
    return NONE


def parse_spacing(cell, row_label):
    if not cell:
        return DEFAULT_SPACING
    try:
        n = int(float(cell))
    except (ValueError, OverflowError):
        logger.warning("%s: spacing %r is not a number, using %d", row_label, cell, DEFAULT_SPACING)
        return DEFAULT_SPACING
    if n < 1:
        logger.warning("%s: spacing %d is below 1, using %d", row_label, n, DEFAULT_SPACING)
        return DEFAULT_SPACING
    return n


def performances_from_frame(df):
    """Turn a performance table into Performance records.

    Blank rows are skipped; a blank name becomes ``Performance <row>``.
    Raises NoPerformancesError when nothing usable is left.
    """
    col_map = map_columns(df)
    performances = []
    for n, (_, row) in enumerate(df.iterrows(), start=1):
        name = _cell(row, col_map, NAME_HEADER)
        performers = to_list(_cell(row, col_map, PERFORMERS_HEADER))
        constraint = _cell(row, col_map, CONSTRAINT_HEADER)
        spacing = _cell(row, col_map, SPACING_HEADER)
        if not (name or performers or constraint or spacing):
            logger.info("Row %d is empty, skipping", n)
            continue
        if not name:
            name = f"Performance {n}"
            logger.warning("Row %d has no name, using %r", n, name)
        if not performers:
            logger.warning("%s has no performers", name)
        performances.append(Performance(
            name=name,
            performers=performers,
            constraint=parse_constraint(constraint),
            spacing=parse_spacing(spacing, name),
        ))
    if not performances:
        raise NoPerformancesError("No performances found in the input table")
    logger.info("Parsed %d performances", len(performances))
    return performances


def read_csv(uploaded):
    """Load an uploaded CSV (file-like or bytes) as strings."""
    if isinstance(uploaded, (bytes, bytearray)):
        uploaded = io.BytesIO(uploaded)
    return pd.read_csv(uploaded, dtype=str, keep_default_na=False)


def frame_from_values(values):
    """DataFrame from a header row plus data rows, as returned by a worksheet."""
    if not values:
        return pd.DataFrame()
    header, rows = values[0], values[1:]
    width = len(header)
    rows = [(list(r) + [''] * width)[:width] for r in rows]
    return pd.DataFrame(rows, columns=header)
