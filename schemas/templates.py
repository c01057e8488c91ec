from typing import List

from pydantic import BaseModel


class TemplateOut(BaseModel):
    type: str
    template: str
    variables: List[str]


class TemplateListOut(BaseModel):
    variant: str
    count: int
    supported_types: List[str]
    templates: List[TemplateOut]
    error: str | None = None
