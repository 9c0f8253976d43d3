import pytest

from chickenpick.models import Comment, Menu, Post
from chickenpick.services.community_service import create_post, poll_results, vote


POST = {"nickname": "닭다리", "password": "1111", "title": "오늘 뭐 먹지", "content": "추천 부탁"}


@pytest.mark.parametrize("field", ["nickname", "password", "title", "content"])
def test_create_post_requires_fields(db_session, field):
    with pytest.raises(ValueError, match=field):
        create_post(db_session, **dict(POST, **{field: "  "}))
    assert db_session.query(Post).count() == 0


def test_poll_needs_two_options(db_session):
    with pytest.raises(ValueError, match="минимум 2"):
        create_post(db_session, poll_options=["BBQ", " "], **POST)

    post = create_post(db_session, poll_options=["BBQ", "BHC", "교촌"], **POST)
    assert post.poll_votes == {"0": 0, "1": 0, "2": 0}


def test_vote_and_results(db_session):
    post = create_post(db_session, poll_options=["BBQ", "BHC"], **POST)
    vote(db_session, post.id, 0)
    vote(db_session, post.id, 0)
    post = vote(db_session, post.id, 1)

    assert post.poll_votes == {"0": 2, "1": 1}
    assert poll_results(post) == [
        {"index": 0, "option": "BBQ", "votes": 2, "percent": 67},
        {"index": 1, "option": "BHC", "votes": 1, "percent": 33},
    ]
    with pytest.raises(ValueError, match="Нет такого варианта"):
        vote(db_session, post.id, 5)


def test_post_without_poll_rejects_votes(db_session):
    post = create_post(db_session, **POST)
    assert poll_results(post) == []
    with pytest.raises(ValueError, match="нет опроса"):
        vote(db_session, post.id, 0)


def test_tagged_menu_must_exist(db_session):
    with pytest.raises(LookupError):
        create_post(db_session, menu_id="없는메뉴", **POST)

    db_session.add(Menu(id="허니콤보", brand="kyochon", name_kr="허니콤보", price=23000))
    db_session.commit()
    assert create_post(db_session, menu_id="허니콤보", **POST).menu_id == "허니콤보"


def test_post_endpoints(client_session):
    client, db = client_session
    resp = client.post("/api/posts", json=dict(POST, poll_options=["양념", "후라이드"]))
    assert resp.status_code == 201
    post_id = resp.json()["id"]

    assert client.post("/api/posts", json=dict(POST, title="")).status_code == 400
    assert client.post("/api/posts", json=dict(POST, menu_id="없는메뉴")).status_code == 404

    resp = client.post(f"/api/posts/{post_id}/vote", json={"option": 1})
    assert resp.json()["poll"][1]["votes"] == 1
    assert client.post(f"/api/posts/{post_id}/vote", json={"option": 7}).status_code == 400

    resp = client.post(f"/api/posts/{post_id}/comments", json={"nickname": "윙", "password": "2", "content": "양념 최고"})
    assert resp.status_code == 201
    assert [c["content"] for c in resp.json()["items"]] == ["양념 최고"]
    created_items = resp.json()["items"]
    assert created_items[0]["createdAt"]

    detail = client.get(f"/api/posts/{post_id}").json()
    assert detail["viewCount"] == 1
    assert [c["nickname"] for c in detail["comments"]] == ["윙"]
    # ответ на создание комментария совпадает с комментариями в карточке поста
    assert detail["comments"] == created_items
    assert client.get(f"/api/posts/{post_id}").json()["viewCount"] == 2

    items = client.get("/api/posts").json()["items"]
    assert [p["id"] for p in items] == [post_id]
    assert client.get("/api/posts/999").status_code == 404


def test_delete_post_removes_comments(client_session):
    client, db = client_session
    post_id = client.post("/api/posts", json=POST).json()["id"]
    client.post(f"/api/posts/{post_id}/comments", json={"nickname": "봉", "password": "3", "content": "ㅋㅋ"})

    assert client.post(f"/api/posts/{post_id}/delete", json={"password": "nope"}).status_code == 403
    assert client.post(f"/api/posts/{post_id}/delete", json={"password": "1111"}).status_code == 200
    assert db.query(Post).count() == 0
    assert db.query(Comment).count() == 0
