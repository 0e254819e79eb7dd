"""
Business profile model — describes the business being onboarded.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class BusinessProfile(BaseModel):
    """Profile captured in the business-model step of onboarding.

    Only ``employee_count`` feeds the indicators; the narrative fields are
    carried along for reviewers.
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(default="", description="Company or business name")
    employee_count: int | None = Field(default=None, ge=0)
    description: str = ""
    exports: bool = False
    customers: str = ""
    products_services: str = ""
    problem: str = ""
    value_proposition: str = ""
    business_model: str = ""
    traction: str = ""
    growth_plan: str = ""
    metadata: dict[str, Any] = Field(default_factory=dict)

    @property
    def has_headcount(self) -> bool:
        """Whether a usable (positive) employee count was supplied."""
        return bool(self.employee_count and self.employee_count > 0)
