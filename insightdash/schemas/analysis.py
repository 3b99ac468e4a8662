from __future__ import annotations

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel


class DataAnalysis(BaseModel):
    insights: list[str] = Field(default_factory=list)
    recommended_charts: list[str] = Field(default_factory=list)
    patterns: list[str] = Field(default_factory=list)
    recommendations: list[str] = Field(default_factory=list)

    model_config = {"alias_generator": to_camel, "populate_by_name": True}
