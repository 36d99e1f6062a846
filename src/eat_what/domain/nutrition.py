"""Nutrition result models returned to the web app."""

from pydantic import BaseModel, Field

PLACEHOLDER_NAME = "食物"


class FoodItem(BaseModel):
    """One recognized food with estimated macros and calories."""

    name: str = Field(min_length=1)
    protein: float = Field(ge=0.0)
    fat: float = Field(ge=0.0)
    carbs: float = Field(ge=0.0)
    kcal: int = Field(ge=0)


class NutritionTotals(BaseModel):
    """Aggregate macros and calories across all items of a result."""

    kcal: int = Field(default=0, ge=0)
    protein: float = 0.0
    fat: float = 0.0
    carbs: float = 0.0


class NormalizedResult(BaseModel):
    """Structured reply for a single analyze request."""

    items: list[FoodItem]
    totals: NutritionTotals
    notes: str = ""
