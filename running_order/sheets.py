import json
import logging
import time

import gspread
from google.oauth2.service_account import Credentials

from .errors import SheetsUnavailableError
from .parsing import frame_from_values, performances_from_frame
from .reports import COMPARISON_COLUMNS, SCHEDULE_COLUMNS, best_row, comparison_frame, schedule_frame

logger = logging.getLogger(__name__)

SCOPES = [
    "https://www.googleapis.com/auth/spreadsheets",
    "https://www.googleapis.com/auth/drive"
]

COMPARISON_SHEET = "Comparison"
HEADER_FORMAT = {
    "textFormat": {"bold": True, "foregroundColor": {"red": 1, "green": 1, "blue": 1}},
    "backgroundColor": {"red": 0.26, "green": 0.52, "blue": 0.96},
}
WARNING_FORMAT = {"backgroundColor": {"red": 1, "green": 0.8, "blue": 0.8}}
BEST_FORMAT = {"backgroundColor": {"red": 0.85, "green": 0.94, "blue": 0.83}}
WRITE_ATTEMPTS = 3


def get_gsheet_client(settings):
    """(client, spreadsheet) for the configured sheet, or (None, None) when not configured."""
    if not settings.sheets_configured:
        return None, None
    creds_dict = json.loads(settings.credentials_json)
    creds = Credentials.from_service_account_info(
        creds_dict, scopes=SCOPES
    )
    client = gspread.authorize(creds)
    spreadsheet = client.open_by_key(settings.spreadsheet_id)
    return client, spreadsheet


def _require(spreadsheet):
    if not spreadsheet:
        raise SheetsUnavailableError("Google Sheets is not connected")


def _column_letter(n):
    letters = ""
    while n:
        n, rem = divmod(n - 1, 26)
        letters = chr(65 + rem) + letters
    return letters


def _get_or_add(spreadsheet, title, rows, cols):
    try:
        return spreadsheet.worksheet(title)
    except gspread.WorksheetNotFound:
        return spreadsheet.add_worksheet(title=title, rows=rows, cols=cols)


def _write(spreadsheet, title, values, formats):
    cols = max(len(r) for r in values)
    for attempt in range(WRITE_ATTEMPTS):
        try:
            ws = _get_or_add(spreadsheet, title, rows=max(len(values), 100), cols=cols)
            ws.clear()
            ws.update(range_name="A1", values=values)
            if formats:
                ws.batch_format(formats)
            ws.columns_auto_resize(0, cols)
            return ws
        except gspread.exceptions.APIError as e:
            if attempt == WRITE_ATTEMPTS - 1:
                raise
            logger.warning("Writing %s failed (%s), retrying", title, e)
            time.sleep(1)


def read_performances(spreadsheet, worksheet_name):
    _require(spreadsheet)
    ws = spreadsheet.worksheet(worksheet_name)
    return performances_from_frame(frame_from_values(ws.get_all_values()))


def write_variation(spreadsheet, result):
    """One worksheet per variation: the running order, then a short summary."""
    _require(spreadsheet)
    df = schedule_frame(result)
    values = [SCHEDULE_COLUMNS] + df.astype(str).values.tolist()
    values += [
        [""] * len(SCHEDULE_COLUMNS),
        ["Variation", result.label, "", ""],
        ["Warnings", str(len(result.warnings)), "", ""],
        ["Violation Score", str(result.score), "", ""],
    ]
    last_col = _column_letter(len(SCHEDULE_COLUMNS))
    formats = [{"range": f"A1:{last_col}1", "format": HEADER_FORMAT}]
    for i, msg in enumerate(df["Warning"], start=2):
        if msg:
            formats.append({"range": f"A{i}:{last_col}{i}", "format": WARNING_FORMAT})
    logger.info("Writing %s to sheet", result.label)
    return _write(spreadsheet, result.label, values, formats)


def write_comparison(spreadsheet, rows):
    _require(spreadsheet)
    df = comparison_frame(rows)
    values = [COMPARISON_COLUMNS] + df.astype(str).values.tolist()
    last_col = _column_letter(len(COMPARISON_COLUMNS))
    formats = [{"range": f"A1:{last_col}1", "format": HEADER_FORMAT}]
    best = best_row(rows)
    if best is not None:
        n = rows.index(best) + 2
        formats.append({"range": f"A{n}:{last_col}{n}", "format": BEST_FORMAT})
    return _write(spreadsheet, COMPARISON_SHEET, values, formats)


def read_schedule(spreadsheet, label, performances):
    """Running order previously written under ``label``, or None if that sheet is gone."""
    _require(spreadsheet)
    try:
        ws = spreadsheet.worksheet(label)
    except gspread.WorksheetNotFound:
        logger.warning("No sheet named %s", label)
        return None
    # performances sharing a name are told apart by their performers, then by input order
    unused = {}
    for p in performances:
        unused.setdefault((p.name, ", ".join(p.performers)), []).append(p)
    schedule = []
    # columns B and C hold name and performers; the order table ends at the first blank row
    for row in ws.get_all_values()[1:]:
        row = list(row) + ["", ""]
        name, performers = row[1], row[2]
        if not name:
            break
        candidates = unused.get((name, performers))
        if not candidates:
            logger.warning("%s lists unknown or repeated performance %r, ignoring it", label, name)
            continue
        schedule.append(candidates.pop(0))
    return schedule
