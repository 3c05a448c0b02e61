"""Great-circle distance shared by every distance-based rule."""

from typing import Union

import numpy as np

from geoguard.common.constants import GeoConstants


ArrayLike = Union[float, np.ndarray]


def haversine_km(lat1: ArrayLike, lon1: ArrayLike, lat2: ArrayLike, lon2: ArrayLike) -> ArrayLike:
    """Haversine distance in kilometres between points given in degrees.

    a = sin²(Δlat/2) + cos(lat1)·cos(lat2)·sin²(Δlon/2)
    c = 2·atan2(√a, √(1-a))
    d = R·c, with R = 6371 km

    Accepts scalars or numpy arrays (broadcast); returns a float for
    scalar input.
    """
    phi1 = np.radians(lat1)
    phi2 = np.radians(lat2)
    d_phi = np.radians(np.subtract(lat2, lat1))
    d_lambda = np.radians(np.subtract(lon2, lon1))

    a = np.sin(d_phi / 2) ** 2 + np.cos(phi1) * np.cos(phi2) * np.sin(d_lambda / 2) ** 2
    # Guard against a drifting a hair above 1 for antipodal points
    a = np.clip(a, 0.0, 1.0)
    c = 2 * np.arctan2(np.sqrt(a), np.sqrt(1 - a))
    distance = GeoConstants.EARTH_RADIUS_KM * c

    if np.ndim(distance) == 0:
        return float(distance)
    return distance
