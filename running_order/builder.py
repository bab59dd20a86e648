import logging
import random

from .errors import InvalidSettingError, NoPerformancesError
from .models import FIRST, LAST, ComparisonRow, ScheduleWarning, VariationResult
from .performers import build_performer_set
from .selector import select_next, strategy_name
from .shuffle import shuffle
from .violations import check_violation, score_schedule

logger = logging.getLogger(__name__)


def partition(performances):
    first, last, middle = [], [], []
    for p in performances:
        if p.constraint == FIRST:
            first.append(p)
        elif p.constraint == LAST:
            last.append(p)
        else:
            middle.append(p)
    return first, last, middle


def build(performances, performer_set, max_in_row, variation_seed, rng=None):
    """Build one variation's running order.

    Returns ``(schedule, warnings, score)``. First-constrained performances
    open the schedule and last-constrained ones close it, both in input
    order; the rest are shuffled with ``variation_seed`` and then placed one
    at a time by the strategy that seed selects. The closing performances
    are appended without a spacing check.
    """
    if not performances:
        raise NoPerformancesError("No performances to schedule")
    if rng is None:
        rng = random.Random()

    first, last, middle = partition(performances)
    schedule = list(first)
    pool = shuffle(middle, variation_seed)
    warnings = []

    while pool:
        idx = select_next(pool, schedule, performer_set, max_in_row, variation_seed, rng)
        r = pool.pop(idx)
        schedule.append(r)
        msg = check_violation(r, schedule, performer_set)
        if msg:
            logger.debug("%s at #%d: %s", r.name, len(schedule), msg)
            warnings.append(ScheduleWarning(r.name, msg, len(schedule) - 1))

    schedule.extend(last)
    return schedule, warnings, score_schedule(schedule, performer_set, max_in_row)


def build_variations(performances, variations, max_in_row=1, rng_factory=None):
    """Build ``variations`` independent schedules, seeded 0 .. variations-1.

    ``rng_factory(seed)`` supplies the strategy random source for each
    variation; by default every variation gets its own ``random.Random()``.
    """
    if not performances:
        raise NoPerformancesError("No performances to schedule")
    if variations < 1:
        raise InvalidSettingError(f"variations must be at least 1, got {variations}")
    if max_in_row < 1:
        raise InvalidSettingError(f"max_in_row must be at least 1, got {max_in_row}")

    performances = tuple(performances)
    performer_set = build_performer_set(performances)
    logger.info("Scheduling %d performances, %d performers, %d variation(s)",
                len(performances), len(performer_set), variations)

    results = []
    for seed in range(variations):
        rng = rng_factory(seed) if rng_factory else random.Random()
        schedule, warnings, total = build(performances, performer_set, max_in_row, seed, rng)
        result = VariationResult(
            label=f"Variation {seed + 1}",
            index=seed,
            strategy=strategy_name(seed),
            schedule=schedule,
            warnings=warnings,
            score=total,
        )
        logger.info("%s (%s): %d warning(s), score=%d",
                    result.label, result.strategy, len(warnings), total)
        results.append(result)
    return results


def compare_variations(schedules_by_label, performer_set, max_in_row=1, order=None):
    """Re-score each named schedule for the comparison table.

    ``order`` lists the labels to compare (defaults to every key). A label
    with no schedule behind it, or only an empty one, is skipped.
    """
    labels = list(order) if order is not None else list(schedules_by_label)
    rows = []
    for i, label in enumerate(labels):
        schedule = schedules_by_label.get(label)
        if not schedule:
            logger.warning("No schedule found for %s, skipping it in the comparison", label)
            continue
        rows.append(ComparisonRow(
            index=i + 1,
            label=label,
            warning_count=sum(1 for msg in position_warnings(schedule, performer_set) if msg),
            score=score_schedule(schedule, performer_set, max_in_row),
            first_three=tuple(r.name for r in schedule[:3]),
            last_three=tuple(r.name for r in schedule[-3:]),
        ))
    return rows


def position_warnings(schedule, performer_set):
    """Detector message per position ('' for none), checking only unconstrained performances as build() does."""
    messages = []
    for i, r in enumerate(schedule):
        msg = None
        if r.constraint not in (FIRST, LAST):
            msg = check_violation(r, schedule[:i + 1], performer_set)
        messages.append(msg or '')
    return messages
