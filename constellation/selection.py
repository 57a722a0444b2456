from typing import Iterable, Optional

from .satellite import Satellite


def is_eligible(satellite: Satellite) -> bool:
    """A satellite can take the terminal if it is healthy and below capacity"""
    return satellite.healthy and satellite.has_capacity


def score(satellite: Satellite) -> float:
    """
    Selection score: predicted signal discounted by reliability and load.

    The (1 + load) divisor is a soft capacity penalty, not a cutoff.
    """
    return satellite.predicted_rssi * satellite.reliability / (1 + satellite.load)


def select_best(satellites: Iterable[Satellite]) -> Optional[Satellite]:
    """
    Pick the highest-scoring eligible satellite.

    Ties go to the satellite seen first. Each eligible satellite's `score`
    is refreshed as a side effect.
    """
    best: Optional[Satellite] = None
    best_score = -1.0

    for sat in satellites:
        if not is_eligible(sat):
            continue

        sat.score = score(sat)
        if sat.score > best_score:
            best_score = sat.score
            best = sat

    return best
