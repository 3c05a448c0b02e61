"""Evaluation Engine - the only place rules are dispatched.

The engine owns the geo lookup backend and the history store. Rules
never see either: plain rules receive privacy-safe records, context-aware
rules additionally receive an ephemeral GeoContext built for one call.

Lifecycle of ``validate``:
1. Geolocate the raw IP (failure -> empty location)
2. Mask the raw IP; only the prefix survives past this point
3. Build the privacy-safe LoginRecord
4. Fetch the previous record (failure -> first login)
5. Build the GeoContext, re-locating the previous prefix if there is one
6. Dispatch rules in configuration order, by capability
7. Aggregate positive scores into violations; failing rules are skipped
8. Return result and record; the caller decides on blocking and storage

Error Handling:
- Port and rule failures degrade the evaluation, they never abort it
- Raw IP addresses and coordinates are never logged
"""

import logging
import time
from datetime import datetime, timezone
from typing import Any, Callable, Iterable, List, Optional, Tuple

from geoguard.common.exceptions import ConfigurationError, RuleEvaluationError
from geoguard.data.schemas.login_attempt import LoginAttempt
from geoguard.data.schemas.login_record import LoginRecord
from geoguard.data.schemas.risk_result import RiskResult, Violation
from geoguard.geo.context import GeoContext, build_geo_context
from geoguard.geo.port import AsnData, GeoData, GeoLocator
from geoguard.history.store import HistoryStore
from geoguard.monitoring.metrics import MetricsCollector
from geoguard.privacy.transform import fingerprint_hash, mask_ip, prefix_network_address
from geoguard.rules.base import Rule, is_rule, supports_geo_context


logger = logging.getLogger(__name__)


Clock = Callable[[], datetime]


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class GeoGuard:
    """Scores login attempts against a configured rule set.

    One instance may serve many concurrent ``validate`` calls. The rule
    list is meant to be configured at startup and left alone afterwards.
    """

    def __init__(
        self,
        geo_locator: GeoLocator,
        history_store: HistoryStore,
        rules: Optional[Iterable[Rule]] = None,
        clock: Optional[Clock] = None,
        metrics: Optional[MetricsCollector] = None,
    ):
        """Initialize the engine.

        Args:
            geo_locator: Geo lookup backend
            history_store: Login history backend
            rules: Initial rules, in evaluation order
            clock: Returns the current time. Defaults to UTC now.
            metrics: Optional metrics collector
        """
        self._geo_locator = geo_locator
        self._history_store = history_store
        self._clock = clock or _utc_now
        self._metrics = metrics
        self._rules: List[Rule] = []

        for rule in rules or ():
            self.add_rule(rule)

    @property
    def rules(self) -> Tuple[Rule, ...]:
        """Configured rules in evaluation order."""
        return tuple(self._rules)

    def add_rule(self, rule: Rule) -> None:
        """Append a rule to the evaluation order.

        Raises:
            ConfigurationError: If the object does not satisfy the rule contract
        """
        if not is_rule(rule):
            raise ConfigurationError(
                "Rule must provide name, description and score()",
                details={"rule_type": type(rule).__name__},
            )
        self._rules.append(rule)
        logger.debug(
            f"Rule added: {rule.name}",
            extra={"rule_name": rule.name, "geo_context": supports_geo_context(rule)},
        )

    def validate(self, attempt: LoginAttempt) -> Tuple[RiskResult, LoginRecord]:
        """Score a login attempt.

        Args:
            attempt: Raw login attempt

        Returns:
            (RiskResult, LoginRecord). Never raises for port or rule failures.
        """
        start = time.perf_counter()

        # 1. Enrichment
        geo = self._locate_ip(attempt.ip_address, stage="geo")
        asn = self._locate_asn(attempt.ip_address)

        # 2-3. Privacy-safe record; the raw address is not used after this
        current = self._build_record(attempt, geo, asn)

        # 4. History
        previous = self._fetch_previous(attempt.user_id)

        # 5. Ephemeral context, local to this call
        context = self._build_context(attempt, geo, previous)

        # 6-7. Rules
        result = self._run_rules(context, current, previous)

        latency_ms = (time.perf_counter() - start) * 1000
        self._record_metrics(latency_ms, result)

        logger.debug(
            "Login evaluated",
            extra={
                "user_id": attempt.user_id,
                "total_score": result.total_score,
                "triggered_rules": result.triggered_rules,
                "latency_ms": round(latency_ms, 3),
            },
        )
        return result, current

    def validate_and_store(self, attempt: LoginAttempt) -> Tuple[RiskResult, LoginRecord]:
        """Score an attempt, then persist its record.

        Raises:
            HistoryStoreError: If the record cannot be stored
        """
        result, record = self.validate(attempt)
        self._history_store.store(record)
        return result, record

    def _locate_ip(self, address: str, stage: str) -> GeoData:
        try:
            return self._geo_locator.locate_ip(address)
        except Exception as e:
            self._degrade(stage, e)
            return GeoData()

    def _locate_asn(self, address: str) -> AsnData:
        try:
            return self._geo_locator.locate_asn(address)
        except Exception as e:
            self._degrade("asn", e)
            return AsnData()

    def _fetch_previous(self, user_id: str) -> Optional[LoginRecord]:
        try:
            return self._history_store.fetch_last(user_id)
        except Exception as e:
            # Treated as a first login
            self._degrade("history", e, user_id=user_id)
            return None

    def _degrade(self, stage: str, error: Exception, **extra: Any) -> None:
        # str(error) may echo the address back; log the type only
        logger.warning(
            f"Lookup failed at stage '{stage}', continuing without it",
            extra={"stage": stage, "error_type": type(error).__name__, **extra},
        )
        if self._metrics is not None:
            try:
                self._metrics.record_degraded_lookup(stage)
            except Exception as metrics_error:
                logger.error(f"Failed to record degraded lookup metric: {metrics_error}")

    def _build_record(self, attempt: LoginAttempt, geo: GeoData, asn: AsnData) -> LoginRecord:
        country_code = geo.country_code if len(geo.country_code) == 2 else ""
        return LoginRecord(
            user_id=attempt.user_id,
            timestamp=self._clock(),
            masked_ip_prefix=mask_ip(attempt.ip_address),
            country_code=country_code,
            city_geoname_id=max(int(geo.city_geoname_id), 0),
            asn=max(int(asn.asn), 0),
            org_name=asn.org_name,
            fingerprint_hash=fingerprint_hash(attempt.user_agent, attempt.accept_language),
            ip_timezone=geo.timezone,
            client_timezone=attempt.client_timezone,
        )

    def _build_context(
        self,
        attempt: LoginAttempt,
        geo: GeoData,
        previous: Optional[LoginRecord],
    ) -> GeoContext:
        previous_location = (0.0, 0.0)
        if previous is not None and previous.masked_ip_prefix:
            # Second lookup runs on the masked prefix, never on a raw address
            previous_geo = self._locate_ip(
                prefix_network_address(previous.masked_ip_prefix), stage="previous_geo"
            )
            previous_location = (previous_geo.latitude, previous_geo.longitude)

        return build_geo_context(
            ip_location=(geo.latitude, geo.longitude),
            device_location=(attempt.device_latitude, attempt.device_longitude),
            previous_ip_location=previous_location,
        )

    def _run_rules(
        self,
        context: GeoContext,
        current: LoginRecord,
        previous: Optional[LoginRecord],
    ) -> RiskResult:
        violations: List[Violation] = []
        total = 0

        for rule in self._rules:
            try:
                if supports_geo_context(rule):
                    points = rule.score_with_context(context, current, previous)
                else:
                    points = rule.score(current, previous)

                if isinstance(points, bool) or not isinstance(points, int) or points < 0:
                    raise RuleEvaluationError(
                        f"rule returned invalid score {points!r}", rule_name=rule.name
                    )
            except Exception as e:
                logger.warning(
                    f"Rule '{rule.name}' failed, skipping",
                    extra={"rule_name": rule.name, "error_type": type(e).__name__, "error": str(e)},
                )
                if self._metrics is not None:
                    try:
                        self._metrics.record_rule_error(rule.name, type(e).__name__)
                    except Exception as metrics_error:
                        logger.error(f"Failed to record rule error metric: {metrics_error}")
                continue

            if points > 0:
                total += points
                violations.append(Violation(
                    rule_name=rule.name,
                    score=points,
                    reason=rule.description,
                ))

        return RiskResult(total_score=total, violations=violations)

    def _record_metrics(self, latency_ms: float, result: RiskResult) -> None:
        if self._metrics is None:
            return
        try:
            self._metrics.record_evaluation(
                latency_ms=latency_ms,
                total_score=result.total_score,
                triggered_rules=result.triggered_rules,
            )
        except Exception as e:
            logger.error(f"Failed to record evaluation metrics: {e}")
