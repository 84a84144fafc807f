from pydantic import BaseModel, Field
from typing import Optional

class VisitRecord(BaseModel):
    key: str
    count: int = Field(ge=0)

class PageViews(BaseModel):
    visits: Optional[int] = None
    pageviews: Optional[int] = None
