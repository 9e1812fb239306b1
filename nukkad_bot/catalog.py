"""Static catalog content: business profile, kurti categories and message texts."""

from datetime import datetime
from pathlib import Path
from typing import Optional
from zoneinfo import ZoneInfo

import yaml
from pydantic import BaseModel, Field, field_validator

from nukkad_bot.logging_config import get_logger
from nukkad_bot.schemas.selections import CATEGORY_SELECTIONS

logger = get_logger("catalog")

DEFAULT_CATALOG_PATH = Path(__file__).parent / "data" / "catalog.yaml"
DEFAULT_CATEGORY = "Cotton Kurtis"


class BusinessProfile(BaseModel):
    name: str
    category: str
    description: str = ""
    phone: str
    whatsapp_channel: str
    whatsapp_group: str
    timezone: str = "Asia/Kolkata"
    open_hour: int = 9
    close_hour: int = 21


class CategoryInfo(BaseModel):
    key: str
    name: str
    price: str
    tagline: str
    features: list[str] = Field(default_factory=list)
    sizes: str = "S, M, L, XL, XXL"
    colors: str = ""
    ideal_for: list[str] = Field(default_factory=list)

    @field_validator("key")
    @classmethod
    def key_has_selection(cls, value: str) -> str:
        """Each category is opened by a `cat_<key>` row, so the id must be a known category selection."""
        if f"cat_{value}" not in {selection.value for selection in CATEGORY_SELECTIONS}:
            raise ValueError(f"no selection id cat_{value} for category key '{value}'")
        return value


class Catalog(BaseModel):
    business: BusinessProfile
    categories: list[CategoryInfo]
    texts: dict[str, str | list[str]]

    def text(self, key: str, **values) -> str:
        """Render a message body, filling business fields plus `values`."""
        template = self.texts[key]
        if isinstance(template, list):
            raise TypeError(f"Text '{key}' has variants, use variants()")
        return template.format(**{**self.business.model_dump(), **values})

    def variants(self, key: str, **values) -> list[str]:
        templates = self.texts[key]
        if isinstance(templates, str):
            templates = [templates]
        fields = {**self.business.model_dump(), **values}
        return [template.format(**fields) for template in templates]

    def category(self, name: Optional[str]) -> CategoryInfo:
        """Look up a category by display name; unknown names fall back to Cotton Kurtis."""
        by_name = {info.name: info for info in self.categories}
        return by_name.get(name) or by_name.get(DEFAULT_CATEGORY) or self.categories[0]

    def local_now(self, now: Optional[datetime] = None) -> datetime:
        tz = ZoneInfo(self.business.timezone)
        if now is None:
            return datetime.now(tz)
        return now.astimezone(tz)

    def is_business_open(self, now: Optional[datetime] = None) -> bool:
        hour = self.local_now(now).hour
        return self.business.open_hour <= hour < self.business.close_hour

    def business_status(self, now: Optional[datetime] = None) -> str:
        return "🟢 OPEN" if self.is_business_open(now) else "🔴 CLOSED"


def load_catalog(path: Optional[str | Path] = None) -> Catalog:
    """Load catalog YAML. Falls back to the packaged catalog when no path is given."""
    catalog_path = Path(path) if path else DEFAULT_CATALOG_PATH
    with catalog_path.open("r", encoding="utf-8") as handle:
        raw = yaml.safe_load(handle)
    catalog = Catalog.model_validate(raw)
    logger.info(
        "Catalog loaded",
        extra={"context": {"path": str(catalog_path), "categories": len(catalog.categories)}},
    )
    return catalog
