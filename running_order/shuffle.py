import math

_MODULUS = 2 ** 31
_MULTIPLIER = 1103515245
_INCREMENT = 12345


class SeededRandom:
    """Chained linear-congruential generator; each draw is derived from the previous one.

    Kept separate from the ``random`` module so that a variation's base order
    depends only on its own seed.
    """

    def __init__(self, seed):
        self.state = int(seed) % _MODULUS

    def next(self):
        self.state = (self.state * _MULTIPLIER + _INCREMENT) % _MODULUS
        return self.state / _MODULUS


def shuffle(sequence, seed):
    items = list(sequence)
    gen = SeededRandom(seed)
    for i in range(len(items) - 1, 0, -1):
        j = math.floor(gen.next() * (i + 1))
        items[i], items[j] = items[j], items[i]
    return items
