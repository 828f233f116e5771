from pydantic import BaseModel


class CreateTagRequest(BaseModel):
    name: str


class TagInfo(BaseModel):
    name: str
