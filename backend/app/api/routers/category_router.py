from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.dependencies import sanitize_text
from app.schemas import CategoryCreate, CategorySortRequest
from auth import get_current_admin
from models import Article, Category, get_db

router = APIRouter()


def serialize_category(category: Category, article_count: int | None = None) -> dict:
    data = {
        "id": category.id,
        "name": category.name,
        "description": category.description,
        "color": category.color,
        "sort_order": category.sort_order,
    }
    if article_count is not None:
        data["article_count"] = article_count
    return data


@router.get("/api/categories")
async def get_categories(
    status: Optional[str] = None,
    db: Session = Depends(get_db),
):
    stats_query = db.query(
        Article.category_id.label("category_id"),
        func.count(Article.id).label("article_count"),
    )
    if status:
        stats_query = stats_query.filter(Article.status == status.strip().upper())

    stats_subquery = stats_query.group_by(Article.category_id).subquery()
    categories = (
        db.query(
            Category,
            func.coalesce(stats_subquery.c.article_count, 0).label("article_count"),
        )
        .outerjoin(stats_subquery, Category.id == stats_subquery.c.category_id)
        .order_by(Category.sort_order)
        .all()
    )
    return [
        serialize_category(category, int(article_count))
        for category, article_count in categories
    ]


@router.post("/api/categories")
async def create_category(
    category: CategoryCreate,
    db: Session = Depends(get_db),
    _: bool = Depends(get_current_admin),
):
    name = sanitize_text(category.name)
    if not name:
        raise HTTPException(status_code=400, detail="分类名称不能为空")
    if db.query(Category).filter(Category.name == name).first():
        raise HTTPException(status_code=400, detail="分类名称已存在")

    new_category = Category(
        name=name,
        description=category.description,
        color=category.color,
        sort_order=category.sort_order or 0,
    )
    try:
        db.add(new_category)
        db.commit()
        db.refresh(new_category)
    except IntegrityError as e:
        db.rollback()
        raise HTTPException(status_code=400, detail=str(e))
    return serialize_category(new_category)


@router.put("/api/categories/sort")
async def update_categories_sort(
    request: CategorySortRequest,
    db: Session = Depends(get_db),
    _: bool = Depends(get_current_admin),
):
    ids = [item.id for item in request.items]
    categories = {c.id: c for c in db.query(Category).filter(Category.id.in_(ids)).all()}
    for item in request.items:
        category = categories.get(item.id)
        if category:
            category.sort_order = item.sort_order
    db.commit()
    return {"message": "排序更新成功"}


@router.put("/api/categories/{category_id}")
async def update_category(
    category_id: str,
    category: CategoryCreate,
    db: Session = Depends(get_db),
    _: bool = Depends(get_current_admin),
):
    existing_category = db.query(Category).filter(Category.id == category_id).first()
    if not existing_category:
        raise HTTPException(status_code=404, detail="分类不存在")

    name = sanitize_text(category.name)
    if not name:
        raise HTTPException(status_code=400, detail="分类名称不能为空")
    duplicate = (
        db.query(Category)
        .filter(Category.name == name)
        .filter(Category.id != category_id)
        .first()
    )
    if duplicate:
        raise HTTPException(status_code=400, detail="分类名称已存在")

    existing_category.name = name
    if category.description is not None:
        existing_category.description = category.description
    if category.color is not None:
        existing_category.color = category.color
    if category.sort_order is not None:
        existing_category.sort_order = category.sort_order

    db.commit()
    db.refresh(existing_category)
    return serialize_category(existing_category)


@router.delete("/api/categories/{category_id}")
async def delete_category(
    category_id: str,
    db: Session = Depends(get_db),
    _: bool = Depends(get_current_admin),
):
    category = db.query(Category).filter(Category.id == category_id).first()
    if not category:
        raise HTTPException(status_code=404, detail="分类不存在")

    db.query(Article).filter(Article.category_id == category_id).update(
        {Article.category_id: None}, synchronize_session=False
    )
    db.delete(category)
    db.commit()
    return {"message": "删除成功"}
