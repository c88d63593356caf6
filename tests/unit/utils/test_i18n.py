"""Tests for message lookup."""

import pytest

from vitamins_auth.utils import i18n
from vitamins_auth.utils.i18n import get_translated_message, setup_i18n, supported_languages


class TestGetTranslatedMessage:
    def test_known_key_is_translated(self):
        assert get_translated_message("invalid_code", "en") == "invalid code"

    def test_message_with_comma_survives_po_parsing(self):
        assert get_translated_message("server_error_try_later") == "server error, try later"

    def test_unknown_language_falls_back_to_default(self):
        assert get_translated_message("email_required", "xx") == "email required"

    def test_unknown_key_falls_back_to_key(self):
        assert get_translated_message("no_such_message") == "no_such_message"


class TestSetupI18n:
    def test_english_catalog_is_loaded_from_locales(self):
        setup_i18n()

        assert "en" in supported_languages()
        assert i18n._fallback_catalogs["en"]["email_required"] == "email required"

    def test_missing_locales_directory_is_rejected(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            setup_i18n(str(tmp_path / "missing"))
