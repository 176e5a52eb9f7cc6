"""
Schema of the result returned by the remote X-ray analysis service.
"""
from pydantic import Field, field_validator
from typing import Any, Dict, List, Optional

from dentalbot.models.base import CamelModel


class EstimatedCost(CamelModel):
    min: float = Field(ge=0)
    max: float = Field(ge=0)
    currency: str = "VND"


class TreatmentPlan(CamelModel):
    immediate: List[str] = Field(default_factory=list)
    short_term: List[str] = Field(default_factory=list)
    long_term: List[str] = Field(default_factory=list)


class AnalysisResult(CamelModel):
    """Structured output of the analysis service."""
    diagnosis: str
    confidence: float = Field(ge=0.0, le=1.0)
    severity: str
    estimated_cost: Optional[EstimatedCost] = None
    recommendations: List[str] = Field(default_factory=list)
    treatment_plan: TreatmentPlan = Field(default_factory=TreatmentPlan)
    risk_factors: List[str] = Field(default_factory=list)
    detailed_findings: Optional[Dict[str, Any]] = None
    follow_up_required: Optional[bool] = None
    metadata: Optional[Dict[str, Any]] = None

    @field_validator("confidence", mode="before")
    @classmethod
    def normalize_percentage(cls, value):
        # Some service versions report confidence on a 0-100 scale
        if isinstance(value, (int, float)) and 1 < value <= 100:
            return value / 100
        return value
