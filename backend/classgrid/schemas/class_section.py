from pydantic import BaseModel, Field


class ClassSectionCreate(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    grade_level: int = Field(default=1, ge=0, le=20)


class ClassSectionOut(ClassSectionCreate):
    id: str

    model_config = {"from_attributes": True}
