from .models import WILDCARD


def build_performer_set(performances):
    """Every performer named across ``performances``, in first-seen order, minus the wildcard."""
    seen = {}
    for p in performances:
        for dn in p.performers:
            if dn != WILDCARD and dn not in seen:
                seen[dn] = True
    return tuple(seen)


def resolve(performers, performer_set):
    if WILDCARD in performers:
        return list(performer_set)
    return performers


def shared_count(a, b, performer_set):
    """Number of distinct performers two performances have in common."""
    return len(set(resolve(a.performers, performer_set)) & set(resolve(b.performers, performer_set)))
