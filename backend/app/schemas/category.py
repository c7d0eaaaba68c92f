from typing import Optional

from pydantic import BaseModel, Field

CATEGORY_COLOR_PATTERN = r"^#[0-9a-fA-F]{6}$"


class CategoryCreate(BaseModel):
    name: str = Field(max_length=50)
    description: Optional[str] = Field(default=None, max_length=500)
    color: Optional[str] = Field(default=None, pattern=CATEGORY_COLOR_PATTERN)
    sort_order: Optional[int] = 0


class CategorySortItem(BaseModel):
    id: str
    sort_order: int = Field(ge=0)


class CategorySortRequest(BaseModel):
    items: list[CategorySortItem]
