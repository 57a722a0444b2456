"""
Physical model for the ORBIT-LATCH constellation simulator

Maps a satellite's orbital angle to a ground-station distance and a received
signal level. This is a deliberately simplified link model, not orbital
mechanics or RF propagation.
"""

import math
from typing import Sequence

import numpy as np

EARTH_RADIUS_KM = 6371.0
ORBIT_HEIGHT_MIN_KM = 400.0
ORBIT_HEIGHT_MAX_KM = 2000.0

# Path-loss model: rssi = PATH_LOSS_GAIN / distance, capped at RSSI_MAX
PATH_LOSS_GAIN = 1200.0
RSSI_MAX = 100.0
MIN_DISTANCE_KM = 1.0

CLEAR_WEATHER = 1.0
DEGRADED_WEATHER = 0.8


def distance(angle: float, rng: np.random.Generator) -> float:
    """
    Distance from the ground station for a satellite at the given angle.

    The orbit radius is drawn again on every call, so two queries at the
    same angle return different distances.

    Args:
        angle: Orbital position in radians
        rng: Random source for the orbit radius

    Returns:
        Distance in kilometers
    """
    radius_min = EARTH_RADIUS_KM + ORBIT_HEIGHT_MIN_KM
    radius = radius_min + rng.random() * (ORBIT_HEIGHT_MAX_KM - ORBIT_HEIGHT_MIN_KM)
    return radius * abs(math.cos(angle))


def rssi(distance_km: float, weather_factor: float) -> float:
    """Received signal strength for a given distance, scaled by space weather"""
    signal = PATH_LOSS_GAIN / max(distance_km, MIN_DISTANCE_KM)
    signal *= weather_factor
    return min(RSSI_MAX, signal)


def weather_tick(rng: np.random.Generator, degrade_prob: int = 20) -> float:
    """Sample the global space-weather factor for one tick"""
    if rng.integers(100) < degrade_prob:
        return DEGRADED_WEATHER
    return CLEAR_WEATHER


def predicted_rssi(history: Sequence[float]) -> float:
    """Two-point smoothed estimate: mean of the oldest and newest samples"""
    return (float(history[0]) + float(history[-1])) / 2.0
