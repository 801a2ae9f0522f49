"""Mağaza ayarları - kalıcı depoda tek nesne olarak tutulur."""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any

from pos_engine.models.catalog import Settings, TokenPrintMode
from pos_engine.services.validators import ValidationError
from pos_engine.storage import KeyValueStore

logger = logging.getLogger(__name__)

SETTINGS_KEY = "settings"

# Kalıcı anahtar -> alan adı
_STORED_FIELDS = {
    "currency": "currency",
    "defaultTaxRate": "default_tax_rate",
    "shopName": "shop_name",
    "autoPrintAfterCheckout": "auto_print_after_checkout",
    "tokenPrintMode": "token_print_mode",
}


class SettingsService:
    """Ayarları okuyan ve güncelleyen servis."""

    def __init__(self, store: KeyValueStore):
        self.store = store

    def get_settings(self) -> Settings:
        """Kayıtlı ayarları döndürür; eski kayıtlarda olmayan alanlar varsayılanla doldurulur."""
        stored = self.store.get_object(SETTINGS_KEY) or {}
        settings = Settings()
        for stored_key, attr in _STORED_FIELDS.items():
            if stored.get(stored_key) is None:
                continue
            value = stored[stored_key]
            if attr == "token_print_mode":
                try:
                    value = TokenPrintMode(value)
                except ValueError:
                    logger.warning("Geçersiz token yazdırma modu yok sayıldı: %s", value)
                    continue
            settings = replace(settings, **{attr: value})
        return settings

    def update_settings(self, **changes: Any) -> Settings:
        unknown = set(changes) - set(_STORED_FIELDS.values())
        if unknown:
            raise ValidationError(f"Bilinmeyen ayar alanları: {sorted(unknown)}")
        if "token_print_mode" in changes:
            try:
                changes["token_print_mode"] = TokenPrintMode(changes["token_print_mode"])
            except ValueError:
                raise ValidationError(
                    f"Geçersiz token yazdırma modu: {changes['token_print_mode']}"
                )

        with self.store.lock(SETTINGS_KEY):
            updated = replace(self.get_settings(), **changes)
            self.store.set_object(SETTINGS_KEY, updated.to_dict())

        logger.info("Ayarlar güncellendi: %s", sorted(changes))
        return updated
