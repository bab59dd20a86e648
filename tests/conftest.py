import pytest

from running_order import Performance


@pytest.fixture
def performance_factory():
    """Factory for Performance records; performers given as a comma-separated string or a list."""
    def make(name, performers='', constraint='none', spacing=1):
        if isinstance(performers, str):
            performers = [p.strip() for p in performers.split(',') if p.strip()]
        return Performance(name=name, performers=performers, constraint=constraint, spacing=spacing)
    return make


@pytest.fixture
def mixed_show(performance_factory):
    """Two openers, two closers and a middle with plenty of shared performers."""
    p = performance_factory
    return [
        p('Opening', 'ann, ben', constraint='first'),
        p('Tap 1', 'ann, cat'),
        p('Jazz 1', 'ben, dan'),
        p('Welcome', 'eve', constraint='first'),
        p('Hip Hop', 'cat, dan, eve'),
        p('Finale', 'ALL', constraint='last'),
        p('Lyrical', 'ann, fay', spacing=2),
        p('Ballet', 'fay, ben'),
        p('Bows', 'gus', constraint='last'),
        p('Contemporary', 'gus, cat', spacing=3),
    ]


class FixedRandom:
    """Stand-in random source returning queued values and recording choice() options."""

    def __init__(self, values=(0.0,)):
        self.values = list(values)
        self.choices = []

    def random(self):
        return self.values.pop(0) if len(self.values) > 1 else self.values[0]

    def choice(self, options):
        self.choices.append(list(options))
        return options[0]


@pytest.fixture
def fixed_random():
    return FixedRandom
