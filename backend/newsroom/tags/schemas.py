from typing import Annotated

from pydantic import Field, StringConstraints, field_validator

from ..models import CustomModel

# tags.name 컬럼(String(100))과 같은 제약. 기사 요청의 tags 항목에도 재사용
TAG_NAME_MAX_LENGTH = 100
TagName = Annotated[str, StringConstraints(strip_whitespace=True, max_length=TAG_NAME_MAX_LENGTH)]


class TagIn(CustomModel):
    name: str = Field(..., min_length=1, max_length=TAG_NAME_MAX_LENGTH, json_schema_extra={"example": "world-cup"})

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, v):
        return v.strip() if isinstance(v, str) else v


class TagOut(CustomModel):
    id: int
    name: str
