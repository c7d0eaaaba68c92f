from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import or_
from sqlalchemy.orm import Session

from app.core.dependencies import (
    build_pagination,
    comments_enabled,
    contains_sensitive_word,
    get_sensitive_words,
    normalize_pagination,
)
from app.domain.article_query_service import ArticleQueryService
from app.schemas import CommentBatchAction, CommentCreate, CommentVisibilityUpdate
from auth import get_current_admin
from models import Article, ArticleComment, get_db, now_str

router = APIRouter()
article_query_service = ArticleQueryService()

COMMENT_MAX_LENGTH = 1000


def serialize_comment(comment: ArticleComment) -> dict:
    return {
        "id": comment.id,
        "article_id": comment.article_id,
        "user_id": comment.user_id,
        "user_name": comment.user_name,
        "user_avatar": comment.user_avatar,
        "content": comment.content,
        "reply_to_id": comment.reply_to_id,
        "is_hidden": bool(comment.is_hidden),
        "created_at": comment.created_at,
        "updated_at": comment.updated_at,
    }


def collect_reply_ids(db: Session, comment_ids: list[str]) -> list[str]:
    pending_parent_ids = list(comment_ids)
    descendant_ids: list[str] = []
    while pending_parent_ids:
        child_rows = (
            db.query(ArticleComment.id)
            .filter(ArticleComment.reply_to_id.in_(pending_parent_ids))
            .all()
        )
        child_ids = [row[0] for row in child_rows if row[0] not in descendant_ids]
        if not child_ids:
            break
        descendant_ids.extend(child_ids)
        pending_parent_ids = child_ids
    return descendant_ids


@router.get("/api/articles/{article_key}/comments")
async def get_article_comments(article_key: str, db: Session = Depends(get_db)):
    if not comments_enabled(db):
        raise HTTPException(status_code=403, detail="评论已关闭")
    article = article_query_service.get_article(db, article_key)
    if not article:
        raise HTTPException(status_code=404, detail="文章不存在")

    comments = (
        db.query(ArticleComment)
        .filter(ArticleComment.article_id == article.id)
        .filter(or_(ArticleComment.is_hidden == False, ArticleComment.is_hidden.is_(None)))
        .order_by(ArticleComment.created_at.asc())
        .all()
    )
    return [serialize_comment(comment) for comment in comments]


@router.post("/api/articles/{article_key}/comments")
async def create_article_comment(
    article_key: str,
    payload: CommentCreate,
    db: Session = Depends(get_db),
):
    if not comments_enabled(db):
        raise HTTPException(status_code=403, detail="评论已关闭")
    article = article_query_service.get_article(db, article_key)
    if not article:
        raise HTTPException(status_code=404, detail="文章不存在")

    content = payload.content.strip()
    if not content:
        raise HTTPException(status_code=400, detail="评论内容不能为空")
    if len(content) > COMMENT_MAX_LENGTH:
        raise HTTPException(status_code=400, detail="评论内容过长")

    filter_enabled, words = get_sensitive_words(db)
    if filter_enabled and words and contains_sensitive_word(content, words):
        raise HTTPException(status_code=400, detail="评论包含敏感词")

    if payload.reply_to_id:
        parent = (
            db.query(ArticleComment)
            .filter(ArticleComment.id == payload.reply_to_id)
            .filter(ArticleComment.article_id == article.id)
            .first()
        )
        if not parent:
            raise HTTPException(status_code=400, detail="回复的评论不存在")

    comment = ArticleComment(
        article_id=article.id,
        user_id=payload.user_id,
        user_name=payload.user_name,
        user_avatar=payload.user_avatar,
        content=content,
        reply_to_id=payload.reply_to_id or None,
        created_at=now_str(),
        updated_at=now_str(),
    )
    db.add(comment)
    db.commit()
    db.refresh(comment)
    return serialize_comment(comment)


@router.get("/api/admin/comments")
async def list_comments(
    page: int = 1,
    limit: int = 20,
    article_id: Optional[str] = None,
    user_id: Optional[str] = None,
    search: Optional[str] = None,
    db: Session = Depends(get_db),
    _: bool = Depends(get_current_admin),
):
    page, limit = normalize_pagination(page, limit)
    query_stmt = db.query(ArticleComment).join(
        Article, Article.id == ArticleComment.article_id
    )

    if article_id:
        query_stmt = query_stmt.filter(ArticleComment.article_id == article_id)
    if user_id:
        query_stmt = query_stmt.filter(ArticleComment.user_id == user_id)
    if search:
        keyword = search.strip()
        if keyword:
            query_stmt = query_stmt.filter(
                or_(
                    ArticleComment.content.ilike(f"%{keyword}%"),
                    ArticleComment.user_name.ilike(f"%{keyword}%"),
                    Article.title.ilike(f"%{keyword}%"),
                )
            )

    total = query_stmt.count()
    items = (
        query_stmt.order_by(ArticleComment.created_at.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )

    article_ids = {comment.article_id for comment in items}
    articles = db.query(Article).filter(Article.id.in_(article_ids)).all()
    article_map = {article.id: article for article in articles}

    return {
        "items": [
            {
                **serialize_comment(comment),
                "article": {
                    "id": comment.article_id,
                    "title": article_map[comment.article_id].title,
                    "slug": article_map[comment.article_id].slug,
                }
                if comment.article_id in article_map
                else None,
            }
            for comment in items
        ],
        "pagination": build_pagination(page, limit, total),
    }


@router.delete("/api/admin/comments/{comment_id}")
async def delete_comment(
    comment_id: str,
    db: Session = Depends(get_db),
    _: bool = Depends(get_current_admin),
):
    comment = db.query(ArticleComment).filter(ArticleComment.id == comment_id).first()
    if not comment:
        raise HTTPException(status_code=404, detail="评论不存在")

    deleted = 1
    descendant_ids = collect_reply_ids(db, [comment.id])
    if descendant_ids:
        deleted += (
            db.query(ArticleComment)
            .filter(ArticleComment.id.in_(descendant_ids))
            .delete(synchronize_session=False)
        )

    db.delete(comment)
    db.commit()
    return {"success": True, "deleted": deleted, "message": "评论删除成功"}


@router.post("/api/admin/comments/batch")
async def batch_comments(
    payload: CommentBatchAction,
    db: Session = Depends(get_db),
    _: bool = Depends(get_current_admin),
):
    if not payload.comment_ids:
        raise HTTPException(status_code=400, detail="缺少评论ID列表")
    if payload.action != "delete":
        raise HTTPException(status_code=400, detail="无效的操作")

    target_ids = list(dict.fromkeys(payload.comment_ids))
    target_ids.extend(
        reply_id for reply_id in collect_reply_ids(db, target_ids) if reply_id not in target_ids
    )
    deleted = (
        db.query(ArticleComment)
        .filter(ArticleComment.id.in_(target_ids))
        .delete(synchronize_session=False)
    )
    db.commit()
    return {"message": f"成功删除 {deleted} 条评论", "deleted_count": deleted}


@router.put("/api/admin/comments/{comment_id}/visibility")
async def update_comment_visibility(
    comment_id: str,
    payload: CommentVisibilityUpdate,
    db: Session = Depends(get_db),
    _: bool = Depends(get_current_admin),
):
    comment = db.query(ArticleComment).filter(ArticleComment.id == comment_id).first()
    if not comment:
        raise HTTPException(status_code=404, detail="评论不存在")
    comment.is_hidden = bool(payload.is_hidden)
    comment.updated_at = now_str()
    db.commit()
    db.refresh(comment)
    return {
        "id": comment.id,
        "is_hidden": bool(comment.is_hidden),
        "updated_at": comment.updated_at,
    }
