import pytest

from chickenpick.models import Menu, Review
from chickenpick.services.password_service import verify_password
from chickenpick.services.review_service import create_review, list_reviews


def _add_menu(db, menu_id="황금올리브치킨"):
    db.add(Menu(id=menu_id, brand="bbq", name_kr=menu_id, name_en="Golden Olive", price=20000))
    db.commit()


def test_create_review_updates_rating(db_session):
    _add_menu(db_session)
    create_review(db_session, "황금올리브치킨", 5, "바삭해요", ["👍 Crispy"])
    review = create_review(db_session, "황금올리브치킨", 4, password="1234")

    menu = db_session.query(Menu).filter(Menu.id == "황금올리브치킨").first()
    assert menu.avg_rating == 4.5
    assert menu.review_count == 2
    # пароль хранится только как bcrypt-хеш
    assert review.password_hash != "1234"
    assert verify_password("1234", review.password_hash)


def test_default_password_is_used(db_session):
    _add_menu(db_session)
    review = create_review(db_session, "황금올리브치킨", 3)
    assert verify_password("0000", review.password_hash)


@pytest.mark.parametrize(
    "rating, tags, message",
    [(0, [], "от 1 до 5"), (6, [], "от 1 до 5"), (3, ["🥦 Healthy"], "Неизвестные теги")],
)
def test_create_review_validation(db_session, rating, tags, message):
    _add_menu(db_session)
    with pytest.raises(ValueError, match=message):
        create_review(db_session, "황금올리브치킨", rating, tags=tags)
    assert db_session.query(Review).count() == 0


def test_create_review_for_missing_menu(db_session):
    with pytest.raises(LookupError):
        create_review(db_session, "없는메뉴", 5)


def test_review_endpoints(client_session):
    client, db = client_session
    _add_menu(db)

    resp = client.post(
        "/api/menus/황금올리브치킨/reviews",
        json={"rating": 5, "content": "최고", "tags": ["🍺 Good with Beer"], "password": "pw"},
    )
    assert resp.status_code == 201
    review_id = resp.json()["id"]

    items = client.get("/api/menus/황금올리브치킨/reviews").json()["items"]
    assert [r["content"] for r in items] == ["최고"]
    assert items[0]["tags"] == ["🍺 Good with Beer"]

    resp = client.post(f"/api/reviews/{review_id}/helpful")
    assert resp.json()["helpfulCount"] == 1

    assert client.post("/api/menus/황금올리브치킨/reviews", json={"rating": 9}).status_code == 400
    assert client.post("/api/menus/없는메뉴/reviews", json={"rating": 3}).status_code == 404
    assert client.post(f"/api/reviews/{review_id}/like").status_code == 400
    assert client.post("/api/reviews/999/helpful").status_code == 404


def test_reported_review_is_hidden(client_session):
    client, db = client_session
    _add_menu(db)
    low = client.post("/api/menus/황금올리브치킨/reviews", json={"rating": 1}).json()
    client.post("/api/menus/황금올리브치킨/reviews", json={"rating": 5})

    for _ in range(4):
        client.post(f"/api/reviews/{low['id']}/report")
    assert len(client.get("/api/menus/황금올리브치킨/reviews").json()["items"]) == 2

    client.post(f"/api/reviews/{low['id']}/report")
    items = client.get("/api/menus/황금올리브치킨/reviews").json()["items"]
    assert [r["rating"] for r in items] == [5]

    menu = db.query(Menu).filter(Menu.id == "황금올리브치킨").first()
    assert menu.avg_rating == 5.0
    assert menu.review_count == 1


def test_delete_review_checks_password(client_session):
    client, db = client_session
    _add_menu(db)
    review = client.post("/api/menus/황금올리브치킨/reviews", json={"rating": 2, "password": "secret"}).json()

    resp = client.post(f"/api/reviews/{review['id']}/delete", json={"password": "wrong"})
    assert resp.status_code == 403

    resp = client.post(f"/api/reviews/{review['id']}/delete", json={"password": "secret"})
    assert resp.status_code == 200
    assert list_reviews(db, "황금올리브치킨") == []
    menu = db.query(Menu).filter(Menu.id == "황금올리브치킨").first()
    assert menu.review_count == 0
    assert menu.avg_rating == 0.0


def test_reviews_for_menu_id_with_slash(client_session):
    client, db = client_session
    _add_menu(db, "후라이드/양념 반반")

    resp = client.post("/api/menus/후라이드/양념 반반/reviews", json={"rating": 4})
    assert resp.status_code == 201
    assert resp.json()["menuId"] == "후라이드/양념 반반"

    items = client.get("/api/menus/후라이드/양념 반반/reviews").json()["items"]
    assert [r["rating"] for r in items] == [4]
