from pydantic import Field, field_validator

from ..models import CustomModel


class CategoryIn(CustomModel):
    name: str = Field(..., min_length=1, max_length=100, json_schema_extra={"example": "Football"})

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, v):
        return v.strip() if isinstance(v, str) else v


class CategoryOut(CustomModel):
    id: int
    name: str
