"""Перекодирование фото меню в WebP."""
from io import BytesIO

from PIL import Image, UnidentifiedImageError

WEBP_CONTENT_TYPE = "image/webp"

# Цветовые модели, которые переводим в RGB/RGBA без потерь смысла
CONVERTIBLE_MODES = {"RGB", "RGBA", "L", "LA", "P", "PA", "CMYK", "YCbCr", "1"}


class ImageEncodingError(ValueError):
    """Файл не является картинкой, повреждён или в неподдерживаемой цветовой модели."""

    reason = "이미지 변환 실패"


def encode_webp(data: bytes, quality: int = 90) -> bytes:
    if not data:
        raise ImageEncodingError("пустой файл")
    try:
        image = Image.open(BytesIO(data))
        image.load()
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError, SyntaxError, ValueError) as exc:
        raise ImageEncodingError(f"повреждённый файл или не картинка: {exc}") from exc

    if image.mode not in CONVERTIBLE_MODES:
        raise ImageEncodingError(f"неподдерживаемая цветовая модель {image.mode}")
    if image.mode not in ("RGB", "RGBA"):
        image = image.convert("RGBA" if "A" in image.getbands() or "transparency" in image.info else "RGB")

    buffer = BytesIO()
    try:
        image.save(buffer, format="WEBP", quality=quality)
    except (OSError, ValueError) as exc:
        raise ImageEncodingError(f"ошибка кодирования WebP: {exc}") from exc
    return buffer.getvalue()
