from pydantic import BaseModel, Field


class SubjectBase(BaseModel):
    code: str = Field(min_length=1, max_length=50)
    name: str = Field(min_length=1, max_length=200)
    teacher_id: str | None = Field(default=None, max_length=36)


class SubjectCreate(SubjectBase):
    pass


class SubjectUpdate(BaseModel):
    code: str | None = Field(default=None, min_length=1, max_length=50)
    name: str | None = Field(default=None, min_length=1, max_length=200)
    teacher_id: str | None = Field(default=None, max_length=36)


class SubjectOut(SubjectBase):
    id: str

    model_config = {"from_attributes": True}
