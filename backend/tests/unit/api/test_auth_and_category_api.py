from __future__ import annotations

from auth import get_current_admin


def test_admin_setup_login_and_protected_route(api_client):
    api_client.app.dependency_overrides.pop(get_current_admin)

    assert api_client.get("/backend/api/auth/status").json() == {"initialized": False}

    unauthorized = api_client.get("/backend/api/admin/tags")
    assert unauthorized.status_code == 401

    short = api_client.post("/backend/api/auth/setup", json={"password": "123"})
    assert short.status_code == 400

    setup = api_client.post("/backend/api/auth/setup", json={"password": "secret-pass"})
    assert setup.status_code == 200
    assert api_client.post(
        "/backend/api/auth/setup", json={"password": "another-pass"}
    ).status_code == 400

    wrong = api_client.post("/backend/api/auth/login", json={"password": "nope-nope"})
    assert wrong.status_code == 401

    token = api_client.post(
        "/backend/api/auth/login", json={"password": "secret-pass"}
    ).json()["token"]
    headers = {"Authorization": f"Bearer {token}"}

    assert api_client.get("/backend/api/auth/verify", headers=headers).json() == {
        "valid": True,
        "role": "admin",
    }
    assert api_client.get("/backend/api/admin/tags", headers=headers).status_code == 200


def test_category_crud_sort_and_delete_detaches_articles(api_client, make_article):
    first = api_client.post("/backend/api/categories", json={"name": "副业"}).json()
    second = api_client.post(
        "/backend/api/categories", json={"name": "理财", "sort_order": 1}
    ).json()

    duplicate = api_client.post("/backend/api/categories", json={"name": "副业"})
    assert duplicate.status_code == 400
    assert duplicate.json()["detail"] == "分类名称已存在"

    article = make_article(category_id=first["id"])

    api_client.put(
        "/backend/api/categories/sort",
        json={"items": [{"id": first["id"], "sort_order": 5}, {"id": second["id"], "sort_order": 0}]},
    )
    listed = api_client.get("/backend/api/categories").json()
    assert [(item["name"], item["article_count"]) for item in listed] == [
        ("理财", 0),
        ("副业", 1),
    ]

    renamed = api_client.put(
        f"/backend/api/categories/{second['id']}", json={"name": "投资理财"}
    )
    assert renamed.json()["name"] == "投资理财"

    assert api_client.delete(f"/backend/api/categories/{first['id']}").status_code == 200
    detached = api_client.get(f"/backend/api/articles/{article.id}").json()
    assert detached["category"] is None


def test_change_password_rotates_token(api_client):
    setup = api_client.post("/backend/api/auth/setup", json={"password": "secret-pass"})
    old_token = setup.json()["token"]

    wrong = api_client.put(
        "/backend/api/auth/password",
        json={"old_password": "not-the-one", "new_password": "next-secret"},
    )
    assert wrong.status_code == 401

    changed = api_client.put(
        "/backend/api/auth/password",
        json={"old_password": "secret-pass", "new_password": "next-secret"},
    )
    new_token = changed.json()["token"]

    def verify(token):
        return api_client.get(
            "/backend/api/auth/verify", headers={"Authorization": f"Bearer {token}"}
        ).json()["valid"]

    assert verify(old_token) is False
    assert verify(new_token) is True
