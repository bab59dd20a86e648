from .logger import DiagnosticsHandler, logger
from .builder import build, build_variations, compare_variations, partition, position_warnings
from .errors import (
    InvalidSettingError,
    MissingColumnError,
    NoPerformancesError,
    ScheduleError,
    SheetsUnavailableError,
)
from .models import (
    FIRST,
    LAST,
    NONE,
    WILDCARD,
    ComparisonRow,
    Performance,
    ScheduleWarning,
    VariationResult,
)
from .performers import build_performer_set, resolve
from .selector import select_next
from .shuffle import shuffle
from .violations import check_violation, score_schedule
