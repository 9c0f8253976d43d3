import io
from urllib.parse import quote

from PIL import Image

from chickenpick.services.storage_client import StorageError

STORAGE_BASE = "https://storage.test/storage/v1/object/public/chicken-images"


class FakeBlobStore:
    """Хранилище в памяти вместо Supabase"""

    def __init__(self, fail_keys=()):
        self.objects = {}
        self.puts = []
        self.fail_keys = set(fail_keys)

    def put(self, key, data, content_type):
        self.puts.append(key)
        if key in self.fail_keys:
            raise StorageError("HTTP 400: Invalid key")
        self.objects[key] = (data, content_type)

    def public_url(self, key):
        return f"{STORAGE_BASE}/{quote(key)}"


class FakeProbe:
    """Считает картинку загруженной, если её URL в списке available"""

    def __init__(self, available=()):
        self.available = set(available)
        self.calls = []

    async def __call__(self, url):
        self.calls.append(url)
        return url in self.available


def make_image_bytes(fmt="PNG", mode="RGB", size=(8, 8)):
    buf = io.BytesIO()
    Image.new(mode, size, color=0).save(buf, format=fmt)
    return buf.getvalue()
