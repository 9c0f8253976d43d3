from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import AnyHttpUrl


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")
    # Рабочая БД по умолчанию: локальный файл проекта. Можно переопределить через переменную окружения DATABASE_URL
    DATABASE_URL: str = "sqlite:///./data/chickenpick.db"

    # Настройки объектного хранилища (Supabase Storage)
    STORAGE_URL: AnyHttpUrl = "http://localhost:54321"
    STORAGE_KEY: str = ""  # service/anon ключ, задаётся через .env
    STORAGE_BUCKET: str = "chicken-images"
    STORAGE_TIMEOUT_SECONDS: int = 30

    # Настройки изображений
    WEBP_QUALITY: int = 90  # качество перекодирования фото меню
    IMAGE_PROBE_TIMEOUT_SECONDS: int = 5  # проверка кандидатов картинки на сервере

    # Отзывы
    REVIEW_REPORT_HIDE_THRESHOLD: int = 5  # отзыв скрывается после N жалоб
    REVIEW_DEFAULT_PASSWORD: str = "0000"


settings = Settings()

DATABASE_URL = settings.DATABASE_URL
