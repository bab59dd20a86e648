import logging
import random
from collections import Counter

import pytest

from running_order import (
    FIRST,
    LAST,
    DiagnosticsHandler,
    InvalidSettingError,
    NoPerformancesError,
    build,
    build_performer_set,
    build_variations,
    compare_variations,
    partition,
    position_warnings,
)


def names(schedule):
    return [r.name for r in schedule]


@pytest.fixture
def example(performance_factory):
    p = performance_factory
    return [p('A', 'x, y'), p('B', 'y, z', constraint='first'), p('C', 'x', spacing=2)]


@pytest.mark.unit
class TestPartition:

    def test_keeps_relative_order_in_each_bucket(self, mixed_show):
        first, last, middle = partition(mixed_show)
        assert names(first) == ['Opening', 'Welcome']
        assert names(last) == ['Finale', 'Bows']
        assert names(middle) == ['Tap 1', 'Jazz 1', 'Hip Hop', 'Lyrical', 'Ballet', 'Contemporary']


@pytest.mark.unit
class TestBuild:

    def test_empty_input_fails_fast(self):
        with pytest.raises(NoPerformancesError):
            build([], (), 1, 0)

    @pytest.mark.parametrize('seed', range(6))
    def test_same_performances_with_anchors_in_place(self, mixed_show, seed):
        performer_set = build_performer_set(mixed_show)
        schedule, _, _ = build(mixed_show, performer_set, 1, seed, random.Random(seed))
        assert Counter(schedule) == Counter(mixed_show)
        assert names(schedule[:2]) == ['Opening', 'Welcome']
        assert names(schedule[-2:]) == ['Finale', 'Bows']

    def test_greedy_seed_is_repeatable(self, mixed_show):
        performer_set = build_performer_set(mixed_show)
        first, _, _ = build(mixed_show, performer_set, 1, 3)
        again, _, _ = build(mixed_show, performer_set, 1, 3)
        assert first == again

    def test_example_greedy_schedule_and_score(self, example):
        performer_set = build_performer_set(example)
        schedule, warnings, total = build(example, performer_set, 1, 0)
        # C shares nobody with B, so greedy places it before A
        assert names(schedule) == ['B', 'C', 'A']
        # windows: [B] 0, [B, C] 0, [C, A] x twice -> 10
        assert total == 10
        assert [w.name for w in warnings] == ['A']
        assert [w.position for w in warnings] == [2]

    @pytest.mark.parametrize('seed', range(6))
    def test_example_score_matches_hand_computed_windows(self, example, seed):
        performer_set = build_performer_set(example)
        schedule, _, total = build(example, performer_set, 1, seed, random.Random(seed))
        assert schedule[0].name == 'B'
        expected = {('B', 'C', 'A'): 10, ('B', 'A', 'C'): 30}
        assert total == expected[tuple(names(schedule))]

    def test_closing_performances_are_not_checked(self, performance_factory):
        shows = [performance_factory('A', 'x'), performance_factory('Z', 'x', constraint=LAST)]
        schedule, warnings, total = build(shows, ('x',), 1, 0)
        assert names(schedule) == ['A', 'Z']
        assert warnings == []
        assert total == 10

    def test_warning_recorded_for_clash_with_opener(self, performance_factory):
        shows = [performance_factory('Open', 'x', constraint=FIRST), performance_factory('A', 'x')]
        _, warnings, _ = build(shows, ('x',), 1, 0)
        assert len(warnings) == 1
        assert warnings[0].name == 'A'
        assert 'x' in warnings[0].message

    def test_only_constrained_performances(self, performance_factory):
        shows = [performance_factory('Z', 'x', constraint=LAST), performance_factory('A', 'y', constraint=FIRST)]
        schedule, warnings, _ = build(shows, ('x', 'y'), 1, 2)
        assert names(schedule) == ['A', 'Z']
        assert warnings == []

    @pytest.mark.parametrize('max_in_row', [1, 2, 5])
    def test_max_in_row_keeps_guarantees(self, mixed_show, max_in_row):
        performer_set = build_performer_set(mixed_show)
        schedule, _, _ = build(mixed_show, performer_set, max_in_row, 1, random.Random(0))
        assert Counter(schedule) == Counter(mixed_show)
        assert names(schedule[:2]) == ['Opening', 'Welcome']
        assert names(schedule[-2:]) == ['Finale', 'Bows']


@pytest.mark.unit
class TestBuildVariations:

    def test_labels_and_strategies(self, mixed_show):
        results = build_variations(mixed_show, 3)
        assert [r.label for r in results] == ['Variation 1', 'Variation 2', 'Variation 3']
        assert [r.strategy for r in results] == ['greedy', 'weighted', 'top three']

    def test_seeded_random_sources_reproduce(self, mixed_show):
        first = build_variations(mixed_show, 4, rng_factory=random.Random)
        again = build_variations(mixed_show, 4, rng_factory=random.Random)
        assert [names(r.schedule) for r in first] == [names(r.schedule) for r in again]
        assert [r.score for r in first] == [r.score for r in again]

    def test_each_variation_gets_its_own_random_source(self, mixed_show):
        seeds = []

        def factory(seed):
            seeds.append(seed)
            return random.Random(seed)

        build_variations(mixed_show, 3, rng_factory=factory)
        assert seeds == [0, 1, 2]

    def test_rejects_zero_variations(self, mixed_show):
        with pytest.raises(InvalidSettingError):
            build_variations(mixed_show, 0)

    def test_rejects_zero_max_in_row(self, mixed_show):
        with pytest.raises(InvalidSettingError):
            build_variations(mixed_show, 1, max_in_row=0)

    def test_rejects_empty_input(self):
        with pytest.raises(NoPerformancesError):
            build_variations([], 3)

    def test_logs_each_variation(self, mixed_show):
        handler = DiagnosticsHandler()
        log = logging.getLogger('running_order')
        log.addHandler(handler)
        try:
            build_variations(mixed_show, 2)
        finally:
            log.removeHandler(handler)
        assert any(line.startswith('Variation 1 (greedy)') for line in handler.lines)
        assert any(line.startswith('Variation 2 (weighted)') for line in handler.lines)


@pytest.mark.unit
class TestCompareVariations:

    def test_rescores_each_schedule(self, mixed_show):
        results = build_variations(mixed_show, 3, rng_factory=random.Random)
        performer_set = build_performer_set(mixed_show)
        rows = compare_variations({r.label: r.schedule for r in results}, performer_set)
        assert [row.score for row in rows] == [r.score for r in results]
        assert [row.warning_count for row in rows] == [len(r.warnings) for r in results]
        assert rows[0].first_three == ('Opening', 'Welcome', results[0].schedule[2].name)
        assert rows[0].last_three[-2:] == ('Finale', 'Bows')

    def test_missing_schedule_is_skipped(self, example):
        performer_set = build_performer_set(example)
        schedule, _, _ = build(example, performer_set, 1, 0)
        rows = compare_variations(
            {'Variation 1': schedule, 'Variation 2': None},
            performer_set,
            order=['Variation 1', 'Variation 2', 'Variation 3'],
        )
        assert [row.label for row in rows] == ['Variation 1']
        assert rows[0].score == 10
        assert rows[0].index == 1

    def test_empty_schedule_is_skipped(self, example):
        performer_set = build_performer_set(example)
        schedule, _, _ = build(example, performer_set, 1, 0)
        rows = compare_variations({'Variation 1': schedule, 'Variation 2': []}, performer_set)
        assert [row.label for row in rows] == ['Variation 1']

    def test_warning_count_ignores_anchored_performances(self, performance_factory):
        p = performance_factory
        schedule = [p('Open', 'x', constraint='first'), p('A', 'y'), p('Close', 'y', constraint='last')]
        assert position_warnings(schedule, ('x', 'y')) == ['', '', '']
        row = compare_variations({'V': schedule}, ('x', 'y'))[0]
        assert row.warning_count == 0
        assert row.score == 10

    def test_short_schedule_names(self, performance_factory):
        schedule = [performance_factory('Solo', 'x')]
        row = compare_variations({'V': schedule}, ('x',))[0]
        assert row.first_three == ('Solo',)
        assert row.last_three == ('Solo',)


@pytest.mark.unit
def test_position_warnings_match_build(mixed_show):
    performer_set = build_performer_set(mixed_show)
    schedule, warnings, _ = build(mixed_show, performer_set, 1, 0)
    messages = position_warnings(schedule, performer_set)
    assert [i for i, msg in enumerate(messages) if msg] == [w.position for w in warnings]
