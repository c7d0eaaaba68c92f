from __future__ import annotations


def test_create_article_returns_generated_slug_and_tags(api_client):
    response = api_client.post(
        "/backend/api/articles",
        json={
            "title": "如何通过AI赚钱",
            "content": "分享一些利用ChatGPT进行副业赚钱的经验",
            "status": "PUBLISHED",
        },
    )

    assert response.status_code == 200
    body = response.json()
    assert body["slug"] == "hanzihanzihanziguoaizhuanqian"
    assert sorted(body["tags"]) == sorted(["赚钱", "AI", "副业"])
    assert response.headers["X-Request-Id"]


def test_create_article_maps_validation_error_to_400(api_client):
    response = api_client.post("/backend/api/articles", json={"title": "  "})

    assert response.status_code == 400
    assert response.json()["detail"] == "标题不能为空且长度不超过200字符"


def test_preview_meta_returns_slug_and_tags(api_client):
    response = api_client.post(
        "/backend/api/articles/preview-meta",
        json={"title": "如何通过AI赚钱", "content": "分享一些利用ChatGPT进行副业赚钱的经验"},
    )

    assert response.json() == {
        "slug": "hanzihanzihanziguoaizhuanqian",
        "tags": ["赚钱", "AI", "副业"],
    }


def test_list_articles_returns_data_with_pagination(api_client, make_article, make_comment):
    article = make_article(title="AI 工具")
    make_comment(article_id=article.id)
    make_article(title="随笔", status="DRAFT", published_at=None)

    response = api_client.get(
        "/backend/api/articles", params={"status": "PUBLISHED", "limit": 5}
    )

    body = response.json()
    assert [item["title"] for item in body["data"]] == ["AI 工具"]
    assert body["data"][0]["comments"] == 1
    assert body["pagination"] == {"page": 1, "size": 5, "total": 1, "total_pages": 1}


def test_get_article_by_slug_increments_views(api_client, make_article):
    make_article(slug="zhuanqian", content="正文", views=0)

    first = api_client.get("/backend/api/articles/zhuanqian")
    second = api_client.get("/backend/api/articles/zhuanqian")

    assert first.json()["views"] == 1
    assert second.json()["views"] == 2
    assert second.json()["content"] == "正文"


def test_get_missing_article_returns_404(api_client):
    response = api_client.get("/backend/api/articles/missing")

    assert response.status_code == 404
    assert response.json()["detail"] == "文章不存在"


def test_update_and_delete_article(api_client, make_article):
    article = make_article()

    updated = api_client.put(
        f"/backend/api/articles/{article.id}",
        json={"title": "赚钱", "status": "PUBLISHED"},
    )
    assert updated.status_code == 200
    assert updated.json()["slug"] == "zhuanqian"

    deleted = api_client.delete(f"/backend/api/articles/{article.id}")
    assert deleted.json() == {"success": True}

    missing = api_client.delete(f"/backend/api/articles/{article.id}")
    assert missing.status_code == 404


def test_health_check(api_client):
    assert api_client.get("/backend/api/health").json() == {"status": "ok"}


def test_request_id_header_is_echoed(api_client):
    response = api_client.get(
        "/backend/api/health", headers={"X-Request-Id": "req-123"}
    )

    assert response.headers["X-Request-Id"] == "req-123"
