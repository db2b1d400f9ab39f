from typing import Generic, List, TypeVar
from math import ceil
from pydantic import BaseModel

T = TypeVar("T")

class Pagination(BaseModel):
    total: int
    page: int
    limit: int
    pages: int

    @classmethod
    def build(cls, total: int, page: int, limit: int) -> "Pagination":
        return cls(total=total, page=page, limit=limit, pages=ceil(total / limit) if limit else 0)

class Page(BaseModel, Generic[T]):
    items: List[T]
    pagination: Pagination

class Message(BaseModel):
    success: bool = True
    message: str | None = None
