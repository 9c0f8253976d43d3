"""
Импорт меню из CSV в таблицу menus
"""
import csv
import io
import re
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from chickenpick.logging_config import upload_logger
from chickenpick.models import Menu
from chickenpick.services.key_derivation import derive_key
from chickenpick.services.storage_client import BlobStore

STAR = "★"
METRIC_FIELDS = ("spicy", "crunch", "sweet", "garlic")

# Синонимы заголовков → поле записи
HEADER_ALIASES: Dict[str, str] = {
    "id": "id",
    "brand_id": "brand",
    "brand": "brand",
    "name_kr": "name_kr",
    "name_en": "name_en",
    "type": "type",
    "price": "price",
    "tags": "tags",
    "tag": "tags",
    "desc": "desc_text",
    "desc_text": "desc_text",
    "description": "desc_text",
    "allergens": "allergens",
    "spicy": "spicy",
    "crunch": "crunch",
    "sweet": "sweet",
    "garlic": "garlic",
}

# Старая выгрузка без понятных заголовков: номер колонки → поле
POSITIONAL_COLUMNS: Dict[int, str] = {
    0: "id",
    1: "brand",
    2: "name_kr",
    3: "name_en",
    5: "tags",
    6: "price",
    8: "desc_text",
    10: "allergens",
    12: "spicy",
    13: "crunch",
    14: "sweet",
}

_I18N_HEADER_RE = re.compile(r"^(desc|description|allergens)_([a-z]{2}(?:-[a-z]{2})?)$")


@dataclass
class ImportResult:
    created: int = 0
    updated: int = 0
    skipped: int = 0

    @property
    def total(self) -> int:
        return self.created + self.updated

    def to_dict(self) -> dict:
        return {"created": self.created, "updated": self.updated, "skipped": self.skipped, "total": self.total}


def parse_level(value: Optional[str]) -> int:
    """
    Уровень (острота, хруст и т.п.): количество звёзд или число.
    "★★★" → 3, "2" → 2, "" / None / "medium" → 0
    """
    if not value:
        return 0
    stars = value.count(STAR)
    if stars > 0:
        return stars
    digits = re.sub(r"[^0-9]", "", value)
    return int(digits) if digits else 0


def parse_price(value: Optional[str]) -> int:
    """Цена с разделителями тысяч: "18,000" → 18000"""
    if not value:
        return 0
    try:
        return int(float(value.replace(",", "").strip()))
    except ValueError:
        return 0


def parse_tags(value: Optional[str]) -> List[str]:
    if not value:
        return []
    return [t.strip() for t in value.split(",") if t.strip()]


def _canonical_header(header: str) -> str:
    return (header or "").strip().lstrip("\ufeff").lower()


def read_rows(text: str) -> List[Dict[str, Any]]:
    """
    Читает CSV и возвращает строки в виде словарей "поле → значение".
    Если заголовок не содержит известных колонок, читаем по позициям.
    """
    rows = list(csv.reader(io.StringIO(text.lstrip("\ufeff"))))
    if not rows:
        return []
    header = [_canonical_header(h) for h in rows[0]]
    data_rows = [r for r in rows[1:] if any(c.strip() for c in r)]

    if not any(h in HEADER_ALIASES or _I18N_HEADER_RE.match(h) for h in header):
        return [
            {field: row[pos] for pos, field in POSITIONAL_COLUMNS.items() if pos < len(row)}
            for row in data_rows
        ]

    records = []
    for row in data_rows:
        record: Dict[str, Any] = {}
        i18n: Dict[str, Dict[str, str]] = {}
        for pos, name in enumerate(header):
            if pos >= len(row):
                break
            if name in HEADER_ALIASES:
                record.setdefault(HEADER_ALIASES[name], row[pos])
                continue
            match = _I18N_HEADER_RE.match(name)
            if match and row[pos].strip():
                kind = "allergens" if match.group(1) == "allergens" else "desc"
                i18n.setdefault(kind, {})[match.group(2)] = row[pos].strip()
        if i18n:
            record["i18n"] = i18n
        records.append(record)
    return records


def build_menu_fields(record: Dict[str, Any], storage: BlobStore) -> Optional[Dict[str, Any]]:
    """Строка CSV → поля Menu. Строки без id пропускаются (None)."""
    menu_id = (record.get("id") or "").strip()
    if not menu_id:
        return None
    return {
        "id": menu_id,
        "brand": (record.get("brand") or "").strip() or None,
        "name_kr": (record.get("name_kr") or "").strip(),
        "name_en": (record.get("name_en") or "").strip(),
        "type": (record.get("type") or "").strip() or "chicken",
        "price": parse_price(record.get("price")),
        "desc_text": (record.get("desc_text") or "").strip(),
        "allergens": (record.get("allergens") or "").strip(),
        "i18n": record.get("i18n"),
        # URL фиксируется при импорте и дальше имеет приоритет над подбором кандидатов
        "image_url": storage.public_url(derive_key(menu_id)),
        "metrics": {name: parse_level(record.get(name)) for name in METRIC_FIELDS},
        "tags": parse_tags(record.get("tags")),
    }


def import_menus_csv(text: str, db: Session, storage: BlobStore) -> ImportResult:
    """Upsert меню по id. Агрегаты отзывов у существующих записей не трогаем."""
    result = ImportResult()
    for record in read_rows(text):
        fields = build_menu_fields(record, storage)
        if fields is None:
            result.skipped += 1
            continue
        menu = db.query(Menu).filter(Menu.id == fields["id"]).first()
        if menu:
            for name, value in fields.items():
                setattr(menu, name, value)
            result.updated += 1
        else:
            db.add(Menu(**fields))
            result.created += 1
        # flush по одной строке, чтобы повтор id в файле обновлял, а не дублировал
        db.flush()
    db.commit()
    upload_logger.info(
        "CSV import done: created=%s updated=%s skipped=%s", result.created, result.updated, result.skipped
    )
    return result
