"""
Клиент объектного хранилища (Supabase Storage REST API)
"""
from functools import lru_cache
from typing import Protocol
from urllib.parse import quote

import httpx

from chickenpick.config import settings


class StorageError(RuntimeError):
    """Ошибка записи объекта в хранилище"""


class BlobStore(Protocol):
    def put(self, key: str, data: bytes, content_type: str) -> None: ...

    def public_url(self, key: str) -> str: ...


class StorageClient:
    def __init__(
        self,
        base_url: str = None,
        api_key: str = None,
        bucket: str = None,
        timeout_seconds: int = None,
        transport: httpx.BaseTransport = None,
    ):
        self.base_url = str(base_url or settings.STORAGE_URL).rstrip("/")
        self.api_key = api_key if api_key is not None else settings.STORAGE_KEY
        self.bucket = bucket or settings.STORAGE_BUCKET
        self.timeout_seconds = timeout_seconds or settings.STORAGE_TIMEOUT_SECONDS
        self._client = httpx.Client(timeout=self.timeout_seconds, transport=transport)

    def _headers(self, content_type: str) -> dict:
        return {
            "Authorization": f"Bearer {self.api_key}",
            "apikey": self.api_key,
            "Content-Type": content_type,
            "x-upsert": "true",
        }

    def public_url(self, key: str) -> str:
        """URL строится без сетевого запроса, поэтому кандидатов можно собирать заранее"""
        return f"{self.base_url}/storage/v1/object/public/{self.bucket}/{quote(key)}"

    def put(self, key: str, data: bytes, content_type: str) -> None:
        url = f"{self.base_url}/storage/v1/object/{self.bucket}/{quote(key)}"
        try:
            response = self._client.post(url, content=data, headers=self._headers(content_type))
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise StorageError(f"HTTP {e.response.status_code}: {e.response.text[:500]}") from e
        except httpx.RequestError as e:
            raise StorageError(str(e)) from e

    def close(self) -> None:
        self._client.close()


@lru_cache(maxsize=1)
def get_storage_client() -> StorageClient:
    """Один долгоживущий клиент на процесс; в тестах подменяется через dependency_overrides"""
    return StorageClient()
