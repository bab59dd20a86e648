from dataclasses import dataclass, field

WILDCARD = 'ALL'

NONE = 'none'
FIRST = 'first'
LAST = 'last'
CONSTRAINTS = (NONE, FIRST, LAST)

DEFAULT_SPACING = 1
PENALTY_PER_REPEAT = 10


@dataclass(frozen=True)
class Performance:
    name: str
    performers: tuple = ()
    constraint: str = NONE
    spacing: int = DEFAULT_SPACING

    def __post_init__(self):
        # lists from callers are frozen so a schedule never aliases mutable input
        object.__setattr__(self, 'performers', tuple(self.performers))
        if self.constraint not in CONSTRAINTS:
            object.__setattr__(self, 'constraint', NONE)
        if not isinstance(self.spacing, int) or self.spacing < 1:
            object.__setattr__(self, 'spacing', DEFAULT_SPACING)


@dataclass(frozen=True)
class ScheduleWarning:
    name: str
    message: str
    position: int


@dataclass
class VariationResult:
    label: str
    index: int
    strategy: str
    schedule: list = field(default_factory=list)
    warnings: list = field(default_factory=list)
    score: int = 0


@dataclass(frozen=True)
class ComparisonRow:
    index: int
    label: str
    warning_count: int
    score: int
    first_three: tuple
    last_three: tuple
