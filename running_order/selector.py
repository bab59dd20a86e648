import random

from .performers import shared_count

GREEDY = 'greedy'
WEIGHTED = 'weighted'
TOP_THREE = 'top three'
STRATEGIES = (GREEDY, WEIGHTED, TOP_THREE)

TOP_N = 3
WEIGHT_OFFSET = 2


def strategy_name(strategy_id):
    return STRATEGIES[strategy_id % len(STRATEGIES)]


def score(candidate, scheduled, performer_set):
    """Minus the performers ``candidate`` shares with the last scheduled performance. Higher is better."""
    if not scheduled:
        return 0
    return -shared_count(candidate, scheduled[-1], performer_set)


def _pick_greedy(scores, rng):
    best_idx = 0
    for i, s in enumerate(scores):
        if s > scores[best_idx]:
            best_idx = i
    return best_idx


def _pick_weighted(scores, rng):
    # roulette wheel; scores are usually <= 0 so the offset keeps weights positive
    weights = [max(1, s + WEIGHT_OFFSET) for s in scores]
    r = rng.random() * sum(weights)
    cumulative = 0
    for i, w in enumerate(weights):
        cumulative += w
        if cumulative >= r:
            return i
    return len(weights) - 1


def _pick_top_three(scores, rng):
    ranked = sorted(range(len(scores)), key=lambda i: -scores[i])
    return rng.choice(ranked[:TOP_N])


_PICKERS = {
    GREEDY: _pick_greedy,
    WEIGHTED: _pick_weighted,
    TOP_THREE: _pick_top_three,
}


def select_next(pool, scheduled, performer_set, max_in_row, strategy_id, rng=None):
    """Index into ``pool`` of the performance to place next.

    ``max_in_row`` is accepted for callers that thread it through but is not
    consulted; only the immediately preceding performance is compared.
    ``rng`` needs ``random()`` and ``choice()``; the greedy strategy never uses it.
    """
    if rng is None:
        rng = random.Random()
    scores = [score(c, scheduled, performer_set) for c in pool]
    return _PICKERS[strategy_name(strategy_id)](scores, rng)
