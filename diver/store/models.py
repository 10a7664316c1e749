"""
Store Models.

Subscription records returned by the Docker Store billing API (snake_case
wire names, so no aliases are needed).
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class Eusa(BaseModel):
    """End-user subscription agreement acceptance."""

    model_config = ConfigDict(extra="ignore")

    accepted: bool = False
    accepted_by: str | None = None
    accepted_on: datetime | None = None


class PricingComponent(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: str = ""
    value: int = 0


class Subscription(BaseModel):
    """A product subscription owned by a Docker ID."""

    model_config = ConfigDict(extra="ignore")

    name: str = ""
    subscription_id: str = ""
    docker_id: str = ""
    product_id: str = ""
    created_by_docker_id: str | None = None
    product_rate_plan: str | None = None
    product_rate_plan_id: str | None = None
    initial_period_start: datetime | None = None
    current_period_start: datetime | None = None
    current_period_end: datetime | None = None
    state: str = ""
    eusa: Eusa | None = None
    pricing_components: list[PricingComponent] = Field(default_factory=list)
    marketing_opt_in: bool = False

    @property
    def is_active(self) -> bool:
        return self.state == "active"
