from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from nukkad_bot.catalog import load_catalog


class TestLoadCatalog:
    def test_packaged_catalog(self, catalog):
        assert catalog.business.name == "Nukkad Fabrics"
        assert len(catalog.categories) == 8
        assert [info.key for info in catalog.categories[:4]] == ["cotton", "rayon", "georgette", "silk"]

    def test_custom_path(self, tmp_path):
        path = tmp_path / "catalog.yaml"
        path.write_text(
            "business:\n"
            "  name: Test Shop\n"
            "  category: Apparel\n"
            "  phone: '+91 1'\n"
            "  whatsapp_channel: https://example.com/c\n"
            "  whatsapp_group: https://example.com/g\n"
            "categories:\n"
            "  - key: cotton\n"
            "    name: Cotton Kurtis\n"
            "    price: '₹1'\n"
            "    tagline: test\n"
            "texts:\n"
            "  welcome: Hello from {name}\n",
            encoding="utf-8",
        )

        catalog = load_catalog(path)

        assert catalog.text("welcome") == "Hello from Test Shop"

    def test_category_key_without_selection_rejected(self, tmp_path):
        path = tmp_path / "catalog.yaml"
        path.write_text(
            "business:\n"
            "  name: Test Shop\n"
            "  category: Apparel\n"
            "  phone: '+91 1'\n"
            "  whatsapp_channel: https://example.com/c\n"
            "  whatsapp_group: https://example.com/g\n"
            "categories:\n"
            "  - key: denim\n"
            "    name: Denim Kurtis\n"
            "    price: '₹1'\n"
            "    tagline: test\n"
            "texts: {}\n",
            encoding="utf-8",
        )

        with pytest.raises(ValidationError, match="cat_denim"):
            load_catalog(path)


class TestTexts:
    def test_business_fields_filled(self, catalog):
        assert catalog.business.phone in catalog.text("apology")

    def test_values_override(self, catalog):
        body = catalog.text("color_options", category="Silk Kurtis", colors="many")

        assert "Silk Kurtis" in body
        assert "many" in body

    def test_variants(self, catalog):
        assert len(catalog.variants("greetings")) >= 2

    def test_text_rejects_variant_key(self, catalog):
        with pytest.raises(TypeError):
            catalog.text("greetings")

    def test_every_text_renders(self, catalog):
        values = {
            "status": "x",
            "current_time": "x",
            "category": "x",
            "price": "x",
            "features": "x",
            "sizes": "x",
            "colors": "x",
            "ideal_for": "x",
            "availability": "x",
        }
        for key, template in catalog.texts.items():
            if isinstance(template, list):
                catalog.variants(key, **values)
            else:
                catalog.text(key, **values)


class TestCategoryLookup:
    def test_by_name(self, catalog):
        assert catalog.category("Silk Kurtis").key == "silk"

    def test_unknown_defaults_to_cotton(self, catalog):
        assert catalog.category("Denim").name == "Cotton Kurtis"
        assert catalog.category(None).name == "Cotton Kurtis"


class TestBusinessHours:
    def test_open_in_local_time(self, catalog):
        # 10:00 IST
        assert catalog.is_business_open(datetime(2026, 3, 1, 4, 30, tzinfo=timezone.utc))
        assert catalog.business_status(datetime(2026, 3, 1, 4, 30, tzinfo=timezone.utc)) == "🟢 OPEN"

    def test_closed_late_evening(self, catalog):
        # 21:30 IST
        assert not catalog.is_business_open(datetime(2026, 3, 1, 16, 0, tzinfo=timezone.utc))
        assert catalog.business_status(datetime(2026, 3, 1, 16, 0, tzinfo=timezone.utc)) == "🔴 CLOSED"
