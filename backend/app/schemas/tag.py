from typing import Optional

from pydantic import BaseModel


class TagCreate(BaseModel):
    name: str
    description: Optional[str] = None
    color: Optional[str] = None
