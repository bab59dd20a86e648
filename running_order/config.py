import os
from dataclasses import dataclass

from .errors import InvalidSettingError

DEFAULT_MAX_IN_ROW = 1
DEFAULT_VARIATIONS = 3
DEFAULT_INPUT_SHEET = "Performances"


def _positive_int(name, value):
    try:
        n = int(value)
    except (TypeError, ValueError):
        raise InvalidSettingError(f"{name} must be a whole number, got {value!r}")
    if n < 1:
        raise InvalidSettingError(f"{name} must be at least 1, got {n}")
    return n


@dataclass
class Settings:
    max_in_row: int = DEFAULT_MAX_IN_ROW
    variations: int = DEFAULT_VARIATIONS
    spreadsheet_id: str = ""
    credentials_json: str = ""
    input_worksheet: str = DEFAULT_INPUT_SHEET

    @classmethod
    def from_env(cls, environ=None):
        env = os.environ if environ is None else environ
        return cls(
            max_in_row=_positive_int("RUNNING_ORDER_MAX_IN_ROW",
                                     env.get("RUNNING_ORDER_MAX_IN_ROW", DEFAULT_MAX_IN_ROW)),
            variations=_positive_int("RUNNING_ORDER_VARIATIONS",
                                     env.get("RUNNING_ORDER_VARIATIONS", DEFAULT_VARIATIONS)),
            spreadsheet_id=env.get("SPREADSHEET_ID", ""),
            credentials_json=env.get("GOOGLE_CREDENTIALS", ""),
            input_worksheet=env.get("RUNNING_ORDER_INPUT_SHEET", DEFAULT_INPUT_SHEET),
        )

    def validate(self):
        self.max_in_row = _positive_int("max_in_row", self.max_in_row)
        self.variations = _positive_int("variations", self.variations)
        return self

    @property
    def sheets_configured(self):
        return bool(self.spreadsheet_id and self.credentials_json)
