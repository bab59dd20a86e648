from .models import DEFAULT_SPACING, PENALTY_PER_REPEAT
from .performers import resolve


def _spacing(performance):
    return performance.spacing or DEFAULT_SPACING


def count_appearances(window, performer_set):
    """performer -> number of performances in ``window`` that include them, in first-seen order"""
    counts = {}
    for r in window:
        # a performer listed twice in one performance still counts once
        for dn in dict.fromkeys(resolve(r.performers, performer_set)):
            counts[dn] = counts.get(dn, 0) + 1
    return counts


def check_violation(newest, schedule, performer_set):
    """Message naming performers repeated inside ``newest``'s spacing window, or None.

    ``schedule`` already ends with ``newest``. Nothing is reported until the
    schedule is longer than the spacing.
    """
    spacing = _spacing(newest)
    if len(schedule) <= spacing:
        return None
    window = schedule[-(spacing + 1):]
    violators = [dn for dn, c in count_appearances(window, performer_set).items() if c > 1]
    if not violators:
        return None
    return f"Performer(s) {', '.join(violators)} appear more than once within spacing {spacing}"


def score_schedule(schedule, performer_set, max_in_row=1):
    """Total spacing penalty of a finished schedule; 0 means no spacing rule is broken.

    Each position looks back over its own spacing window, so an overlap that
    several windows cover is counted once per window.
    """
    total = 0
    for i, r in enumerate(schedule):
        window = schedule[max(0, i - _spacing(r)):i + 1]
        for c in count_appearances(window, performer_set).values():
            if c > 1:
                total += (c - 1) * PENALTY_PER_REPEAT
    return total
