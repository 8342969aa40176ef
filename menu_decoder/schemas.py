from typing import List, Optional

from pydantic import BaseModel, Field, field_validator


class Dish(BaseModel):
    name: str = Field(min_length=1)
    price: Optional[str] = Field(None, description="Price as printed on the menu, e.g. '$12.50'")
    description: str = ""
    ingredients: List[str] = Field(min_length=1)
    images: Optional[List[str]] = Field(None, description="Up to 4 photo URLs, set by enrichment")

    @field_validator("name", mode="before")
    @classmethod
    def _strip_name(cls, value):
        return value.strip() if isinstance(value, str) else value

    @field_validator("price", mode="before")
    @classmethod
    def _price_to_text(cls, value):
        # Gemini sometimes returns 12.5 instead of "$12.50"
        if isinstance(value, bool):
            return None
        if isinstance(value, (int, float)):
            return str(value)
        if isinstance(value, str) and not value.strip():
            return None
        return value.strip() if isinstance(value, str) else value

    @field_validator("description", mode="before")
    @classmethod
    def _description_default(cls, value):
        return "" if value is None else value

    @field_validator("ingredients", mode="before")
    @classmethod
    def _clean_ingredients(cls, value):
        if not isinstance(value, list):
            return value
        return [item.strip() for item in value if isinstance(item, str) and item.strip()]


class MenuAnalysisResponse(BaseModel):
    dishes: List[Dish]


class ErrorResponse(BaseModel):
    error: str
