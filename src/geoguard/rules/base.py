"""Rule contracts.

Rules are scoring units the engine runs in configuration order. A rule
exposes a stable ``name``, a ``description`` that reads as a complete
sentence (used verbatim as the violation reason), and a scoring method
returning a non-negative integer. Rules raise on failure; the engine
skips a failing rule.

Two capability sets, detected structurally:
- Rule: ``score(current, previous)`` - privacy-safe records only
- GeoContextRule: additionally ``score_with_context(context, current, previous)``
  - receives ephemeral coordinates; preferred by the engine when present

Rules never touch the geo lookup backend or the history store.
"""

from abc import ABC, abstractmethod
from typing import Any, Optional, Protocol, runtime_checkable

from geoguard.common.exceptions import ConfigurationError
from geoguard.data.schemas.login_record import LoginRecord
from geoguard.geo.context import GeoContext


@runtime_checkable
class Rule(Protocol):
    """Plain scoring contract."""

    @property
    def name(self) -> str: ...

    @property
    def description(self) -> str: ...

    def score(self, current: LoginRecord, previous: Optional[LoginRecord]) -> int: ...


@runtime_checkable
class GeoContextRule(Rule, Protocol):
    """Scoring contract for rules that need ephemeral coordinates."""

    def score_with_context(
        self,
        context: GeoContext,
        current: LoginRecord,
        previous: Optional[LoginRecord],
    ) -> int: ...


def is_rule(candidate: Any) -> bool:
    """Whether ``candidate`` satisfies the plain rule contract."""
    return (
        isinstance(getattr(candidate, "name", None), str)
        and isinstance(getattr(candidate, "description", None), str)
        and callable(getattr(candidate, "score", None))
    )


def supports_geo_context(rule: Any) -> bool:
    """Whether ``rule`` can be dispatched with a GeoContext."""
    return callable(getattr(rule, "score_with_context", None))


class BaseRule(ABC):
    """Optional convenience base holding the rule's risk contribution.

    Subclasses set ``name`` and implement ``description`` and ``score``.
    Inheriting from this class is never required by the engine.
    """

    name = ""

    def __init__(self, risk_score: int):
        if isinstance(risk_score, bool) or not isinstance(risk_score, int) or risk_score < 0:
            raise ConfigurationError(
                "risk_score must be a non-negative integer",
                details={"rule_name": self.name, "risk_score": risk_score},
            )
        self.risk_score = risk_score

    @property
    @abstractmethod
    def description(self) -> str:
        """Complete sentence used as the violation reason."""
        pass

    @abstractmethod
    def score(self, current: LoginRecord, previous: Optional[LoginRecord]) -> int:
        pass

    def __repr__(self) -> str:
        return f"{type(self).__name__}(risk_score={self.risk_score})"


class BaseGeoRule(BaseRule):
    """Convenience base for context-aware rules.

    The plain entry point returns 0: without coordinates these rules have
    nothing to measure, and the engine always calls ``score_with_context``.
    """

    def score(self, current: LoginRecord, previous: Optional[LoginRecord]) -> int:
        return 0

    @abstractmethod
    def score_with_context(
        self,
        context: GeoContext,
        current: LoginRecord,
        previous: Optional[LoginRecord],
    ) -> int:
        pass
