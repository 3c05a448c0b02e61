"""Evaluation engine."""

from geoguard.engine.evaluator import GeoGuard
from geoguard.engine.factory import build_engine

__all__ = ["GeoGuard", "build_engine"]
