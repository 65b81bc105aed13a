from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from typing import List


class _Record(BaseModel):
    # UI callers may send quantities as JSON numbers
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, coerce_numbers_to_str=True
    )


class Ingredient(_Record):
    # quantity stays text: sources carry "to taste", ranges and fractions
    quantity: str = ""
    unit: str = ""
    name: str = ""


class Recipe(_Record):
    title: str = ""
    description: str = ""
    category: str = "Other"
    prep_time: int = Field(default=0, ge=0)
    cook_time: int = Field(default=0, ge=0)
    additional_time: int = Field(default=0, ge=0)
    servings: int = Field(default=0, ge=0)
    image_url: str = ""
    source_url: str = ""
    ingredients: List[Ingredient] = Field(default_factory=list)
    instructions: List[str] = Field(default_factory=list)
    tags: List[str] = Field(default_factory=list)

    def to_record(self) -> dict:
        """Plain JSON-ready dict using the camelCase field names."""
        return self.model_dump(by_alias=True)
