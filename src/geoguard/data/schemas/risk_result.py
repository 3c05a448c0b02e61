"""RiskResult schema - explainable evaluation output."""

from pydantic import BaseModel, Field


class Violation(BaseModel):
    """One rule's positive contribution and its justification."""
    rule_name: str = Field(..., description="Name of the triggered rule")
    score: int = Field(..., gt=0, description="Points contributed by this rule")
    reason: str = Field(..., description="Human-readable explanation")


class RiskResult(BaseModel):
    """Aggregated risk score for one login attempt.

    GeoGuard never turns this into a block/allow decision; that is host
    policy, typically a threshold comparison via ``exceeds``.
    """
    total_score: int = Field(default=0, ge=0, description="Sum of violation scores")
    violations: list[Violation] = Field(
        default_factory=list, description="Triggered rules in configuration order"
    )

    model_config = {
        "json_schema_extra": {
            "example": {
                "total_score": 125,
                "violations": [
                    {
                        "rule_name": "Timezone Mismatch",
                        "score": 45,
                        "reason": "Checks whether the IP-derived timezone differs from the client-reported timezone.",
                    },
                    {
                        "rule_name": "Impossible Travel",
                        "score": 80,
                        "reason": "Checks whether travel speed between logins exceeds 900 km/h.",
                    },
                ],
            }
        }
    }

    @property
    def triggered_rules(self) -> list[str]:
        """Names of triggered rules, in evaluation order."""
        return [v.rule_name for v in self.violations]

    def exceeds(self, threshold: int) -> bool:
        """Whether the total score reaches ``threshold``."""
        return self.total_score >= threshold
