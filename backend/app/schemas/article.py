from typing import Optional

from pydantic import BaseModel


class ArticleCreate(BaseModel):
    title: str
    slug: Optional[str] = None
    content: Optional[str] = None
    excerpt: Optional[str] = None
    category_id: Optional[str] = None
    status: Optional[str] = None
    author_name: Optional[str] = None
    auto_tags: Optional[list[str]] = None


class ArticleUpdate(BaseModel):
    title: str
    slug: Optional[str] = None
    content: Optional[str] = None
    excerpt: Optional[str] = None
    category_id: Optional[str] = None
    status: Optional[str] = None


class TagPreviewRequest(BaseModel):
    title: str
    content: Optional[str] = None
