import io

import pytest
from PIL import Image

from chickenpick.models import Menu
from chickenpick.services.image_encoding import ImageEncodingError, encode_webp
from chickenpick.services.key_derivation import derive_key, derive_key_stem
from chickenpick.services.upload_service import upload_brand_logos, upload_menu_images
from tests.fakes import FakeBlobStore, make_image_bytes


SVG = b'<svg xmlns="http://www.w3.org/2000/svg"/>'


def test_encode_webp_converts_modes():
    for mode in ("RGB", "RGBA", "L", "P", "CMYK"):
        fmt = "JPEG" if mode == "CMYK" else "PNG"
        webp = encode_webp(make_image_bytes(fmt=fmt, mode=mode))
        assert Image.open(io.BytesIO(webp)).format == "WEBP"


@pytest.mark.parametrize("data", [b"", b"not an image", b"\x89PNG garbage"])
def test_encode_webp_rejects_garbage(data):
    with pytest.raises(ImageEncodingError):
        encode_webp(data)


def test_encode_webp_rejects_decompression_bomb(monkeypatch):
    monkeypatch.setattr(Image, "MAX_IMAGE_PIXELS", 10)
    with pytest.raises(ImageEncodingError, match="повреждённый файл"):
        encode_webp(make_image_bytes(size=(16, 16)))


def test_oversized_image_keeps_encoding_reason(monkeypatch):
    monkeypatch.setattr(Image, "MAX_IMAGE_PIXELS", 10)
    result = upload_menu_images(FakeBlobStore(), [("huge.png", make_image_bytes(size=(16, 16)), "image/png")])
    assert result.fail == 1
    assert result.failures[0].startswith("[메뉴] huge.png: 이미지 변환 실패")


def test_menu_images_partial_failure():
    storage = FakeBlobStore()
    files = [
        ("양념치킨, .jpg", make_image_bytes(fmt="JPEG"), "image/jpeg"),
        ("broken.png", b"\x89PNG garbage", "image/png"),
        ("후라이드.png", make_image_bytes(), "image/png"),
    ]
    result = upload_menu_images(storage, files)

    assert result.success == 2
    assert result.fail == 1
    assert result.keys == [derive_key("양념치킨,"), derive_key("후라이드")]
    assert result.failures[0].startswith("[메뉴] broken.png: 이미지 변환 실패")
    data, content_type = storage.objects[derive_key("양념치킨")]
    assert content_type == "image/webp"
    # битый файл до хранилища не доходит
    assert storage.puts == result.keys


def test_menu_images_storage_error_is_distinct():
    key = derive_key("뿌링클")
    storage = FakeBlobStore(fail_keys={key})
    result = upload_menu_images(storage, [("뿌링클.png", make_image_bytes(), "image/png")])
    assert result.fail == 1
    assert result.failures == ["[메뉴] 뿌링클.png: HTTP 400: Invalid key"]


def test_brand_logos_keys():
    storage = FakeBlobStore()
    result = upload_brand_logos(
        storage,
        [
            ("bbq.svg", SVG, "image/svg+xml"),
            ("교촌.SVG", SVG, "image/svg+xml"),
            ("empty.png", b"", "image/png"),
        ],
    )
    assert result.success == 2
    assert result.fail == 1
    assert result.keys == ["brand_bbq.svg", f"brand_{derive_key_stem('교촌')}.svg"]
    assert storage.objects["brand_bbq.svg"] == (SVG, "image/svg+xml")
    assert result.failures[0].startswith("[로고] empty.png")


def test_menu_images_endpoint(client_session, storage):
    client, _ = client_session
    files = [
        ("files", ("chicken.png", make_image_bytes(), "image/png")),
        ("files", ("bad.jpg", b"nope", "image/jpeg")),
    ]
    resp = client.post("/admin/uploads/menu-images", files=files)
    assert resp.status_code == 200
    body = resp.json()
    assert body["success"] == 1
    assert body["fail"] == 1
    assert body["keys"] == [derive_key("chicken")]
    assert "성공 1, 실패 1" in body["status"]
    assert derive_key("chicken") in storage.objects


def test_logos_endpoint(client_session, storage):
    client, _ = client_session
    resp = client.post("/admin/uploads/logos", files=[("files", ("nene.svg", SVG, "image/svg+xml"))])
    assert resp.status_code == 200
    assert resp.json()["keys"] == ["brand_nene.svg"]
    assert "brand_nene.svg" in storage.objects


def test_csv_endpoint(client_session):
    client, db = client_session
    csv_text = "id,brand_id,name_kr,name_en,price,spicy\n후라이드치킨,bbq,후라이드치킨,Fried,\"19,000\",★\n"
    resp = client.post("/admin/uploads/csv", files={"file": ("menus.csv", csv_text.encode("utf-8-sig"), "text/csv")})
    assert resp.status_code == 200
    assert resp.json()["created"] == 1
    menu = db.query(Menu).filter(Menu.id == "후라이드치킨").first()
    assert menu.price == 19000
    assert menu.metrics["spicy"] == 1


def test_csv_endpoint_rejects_non_utf8(client_session):
    client, _ = client_session
    resp = client.post("/admin/uploads/csv", files={"file": ("menus.csv", b"id\n\xff\xfe\n", "text/csv")})
    assert resp.status_code == 400
