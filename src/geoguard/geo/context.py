"""Geographic context - ephemeral coordinates for one evaluation.

The context is built on the stack of ``GeoGuard.validate``, passed by
argument into context-aware rules, and dropped when the call returns.
It is never stored, cached or returned to the caller.

A (0, 0) coordinate pair means "unknown".
"""

from dataclasses import dataclass


def _is_known(latitude: float, longitude: float) -> bool:
    return not (latitude == 0 and longitude == 0)


@dataclass(frozen=True)
class GeoContext:
    """Coordinates available to context-aware rules.

    Attributes:
        ip_latitude/ip_longitude: City centroid of the current IP
        device_latitude/device_longitude: GPS reported by the client device
        previous_ip_latitude/previous_ip_longitude: City centroid of the
            previous login's masked prefix
    """
    ip_latitude: float = 0.0
    ip_longitude: float = 0.0
    device_latitude: float = 0.0
    device_longitude: float = 0.0
    previous_ip_latitude: float = 0.0
    previous_ip_longitude: float = 0.0

    @property
    def has_ip_location(self) -> bool:
        return _is_known(self.ip_latitude, self.ip_longitude)

    @property
    def has_device_location(self) -> bool:
        return _is_known(self.device_latitude, self.device_longitude)

    @property
    def has_previous_location(self) -> bool:
        return _is_known(self.previous_ip_latitude, self.previous_ip_longitude)

    def __repr__(self) -> str:
        # Keep coordinates out of logs and tracebacks
        return (
            f"GeoContext(ip={self.has_ip_location}, device={self.has_device_location}, "
            f"previous={self.has_previous_location})"
        )


def build_geo_context(
    ip_location: tuple[float, float],
    device_location: tuple[float, float],
    previous_ip_location: tuple[float, float] = (0.0, 0.0),
) -> GeoContext:
    """Assemble a GeoContext from (latitude, longitude) pairs."""
    return GeoContext(
        ip_latitude=ip_location[0],
        ip_longitude=ip_location[1],
        device_latitude=device_location[0],
        device_longitude=device_location[1],
        previous_ip_latitude=previous_ip_location[0],
        previous_ip_longitude=previous_ip_location[1],
    )
