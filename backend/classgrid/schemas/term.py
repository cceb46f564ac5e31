from pydantic import BaseModel, Field


class TermCreate(BaseModel):
    name: str = Field(min_length=1, max_length=100)


class TermOut(TermCreate):
    id: str

    model_config = {"from_attributes": True}
