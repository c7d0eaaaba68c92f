from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app.domain.tag_service import TagService
from app.schemas import TagCreate
from auth import get_current_admin
from models import Tag, get_db

router = APIRouter()
tag_service = TagService()


def serialize_tag(tag: Tag) -> dict:
    return {
        "id": tag.id,
        "name": tag.name,
        "slug": tag.slug,
        "description": tag.description,
        "color": tag.color,
        "created_at": tag.created_at,
    }


@router.get("/api/admin/tags")
async def get_tags(
    db: Session = Depends(get_db),
    _: bool = Depends(get_current_admin),
):
    return {
        "tags": [
            {**serialize_tag(tag), "article_count": article_count}
            for tag, article_count in tag_service.list_tags(db)
        ]
    }


@router.post("/api/admin/tags")
async def create_tag(
    payload: TagCreate,
    db: Session = Depends(get_db),
    _: bool = Depends(get_current_admin),
):
    try:
        tag = tag_service.create_tag(db, payload.name, payload.description, payload.color)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"success": True, "tag": serialize_tag(tag)}


@router.put("/api/admin/tags/{tag_id}")
async def update_tag(
    tag_id: str,
    payload: TagCreate,
    db: Session = Depends(get_db),
    _: bool = Depends(get_current_admin),
):
    try:
        tag = tag_service.update_tag(
            db, tag_id, payload.name, payload.description, payload.color
        )
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"success": True, "tag": serialize_tag(tag)}


@router.delete("/api/admin/tags/{tag_id}")
async def delete_tag(
    tag_id: str,
    db: Session = Depends(get_db),
    _: bool = Depends(get_current_admin),
):
    try:
        tag_service.delete_tag(db, tag_id)
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"success": True, "message": "标签删除成功"}
