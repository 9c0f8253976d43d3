"""
Последовательный перебор кандидатов картинки до первой успешной загрузки
"""
from enum import Enum
from html import escape
from typing import Awaitable, Callable, List, Optional

import httpx

from chickenpick.brands import ALL_BRANDS, UNKNOWN_BRAND_COLOR, BrandRecord


class ResolutionState(str, Enum):
    IDLE = "idle"
    TRYING = "trying"
    LOADED = "loaded"
    EXHAUSTED = "exhausted"


class ImageResolver:
    """
    Конечный автомат Idle -> Trying(i) -> Loaded | Exhausted для одной картинки.

    Каждый reset() выдаёт новый токен; колбэки загрузки со старым токеном
    (например, от предыдущего меню) игнорируются.
    """

    def __init__(self, candidates: Optional[List[str]] = None, preset_url: Optional[str] = None):
        self.candidates: List[str] = []
        self.index = 0
        self.state = ResolutionState.IDLE
        self.attempts: List[str] = []
        self._token = 0
        if candidates is not None or preset_url:
            self.reset(candidates, preset_url)

    @property
    def token(self) -> int:
        return self._token

    def reset(self, candidates: Optional[List[str]] = None, preset_url: Optional[str] = None) -> int:
        # Готовый URL из таблицы авторитетен: перебор кандидатов не нужен
        if preset_url:
            self.candidates = [preset_url]
        elif candidates is not None:
            self.candidates = list(candidates)
        self.index = 0
        self.attempts = []
        self._token += 1
        if self.candidates:
            self.state = ResolutionState.TRYING
            self.attempts.append(self.candidates[0])
        else:
            self.state = ResolutionState.EXHAUSTED
        return self._token

    @property
    def current_url(self) -> Optional[str]:
        if self.state in (ResolutionState.TRYING, ResolutionState.LOADED):
            return self.candidates[self.index]
        return None

    def _is_current(self, token: int) -> bool:
        return token == self._token and self.state == ResolutionState.TRYING

    def advance(self, token: int) -> ResolutionState:
        """Ошибка загрузки текущего кандидата"""
        if not self._is_current(token):
            return self.state
        if self.index + 1 < len(self.candidates):
            self.index += 1
            self.attempts.append(self.candidates[self.index])
        else:
            self.state = ResolutionState.EXHAUSTED
        return self.state

    def mark_loaded(self, token: int) -> ResolutionState:
        if self._is_current(token):
            self.state = ResolutionState.LOADED
        return self.state


ImageProbe = Callable[[str], Awaitable[bool]]


async def resolve_first_available(resolver: ImageResolver, probe: ImageProbe) -> Optional[str]:
    """
    Пробует кандидатов строго по одному, следующий — только после неудачи предыдущего.
    Возвращает URL загруженной картинки или None, если кандидаты закончились.
    """
    token = resolver.token
    while resolver.state == ResolutionState.TRYING and resolver.token == token:
        url = resolver.current_url
        if await probe(url):
            resolver.mark_loaded(token)
        else:
            resolver.advance(token)
    if resolver.token != token:
        return None
    return resolver.current_url if resolver.state == ResolutionState.LOADED else None


class HttpImageProbe:
    """Проверка наличия картинки по публичному URL (HEAD, 2xx = есть)"""

    def __init__(self, client: httpx.AsyncClient):
        self.client = client

    async def __call__(self, url: str) -> bool:
        try:
            response = await self.client.head(url, follow_redirects=True)
        except httpx.HTTPError:
            return False
        return response.is_success


def placeholder_label(brand: Optional[BrandRecord]) -> str:
    if brand is None:
        return ""
    if brand.id == ALL_BRANDS:
        return "ALL"
    return brand.name[:2].upper()


def render_placeholder_svg(brand: Optional[BrandRecord], size: int = 112) -> str:
    """Заглушка вместо фото: блок цвета бренда с инициалами и названием"""
    color = brand.color if brand else UNKNOWN_BRAND_COLOR
    name = escape(brand.name) if brand else ""
    initials = escape(placeholder_label(brand))
    return (
        f'<svg xmlns="http://www.w3.org/2000/svg" width="{size}" height="{size}" viewBox="0 0 {size} {size}">'
        f'<rect width="{size}" height="{size}" rx="16" fill="{color}"/>'
        f'<text x="50%" y="45%" text-anchor="middle" fill="#ffffff" font-family="sans-serif" '
        f'font-weight="900" font-size="{size // 4}">{initials}</text>'
        f'<text x="50%" y="72%" text-anchor="middle" fill="#ffffff" fill-opacity="0.8" '
        f'font-family="sans-serif" font-size="{size // 10}">{name}</text>'
        f"</svg>"
    )
