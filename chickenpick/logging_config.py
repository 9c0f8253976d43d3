# -*- coding: utf-8 -*-
"""Логгеры сервиса: все пишут в общий logs/app.log"""
import logging
import os

LOG_DIR = os.environ.get("LOG_DIR", "logs")
os.makedirs(LOG_DIR, exist_ok=True)

# Один FileHandler на процесс, без ротации
file_handler = logging.FileHandler(os.path.join(LOG_DIR, "app.log"), encoding="utf-8")
file_handler.setFormatter(logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s"))


def _get_logger(name: str, level=logging.INFO) -> logging.Logger:
    logger = logging.getLogger(name)
    logger.setLevel(level)
    if file_handler not in logger.handlers:
        logger.addHandler(file_handler)
    return logger


app_logger = _get_logger("app")
# загрузки фото, логотипов и CSV
upload_logger = _get_logger("app.upload")
# каталог, подбор картинок, отзывы
catalog_logger = _get_logger("app.catalog")
community_logger = _get_logger("app.community")
