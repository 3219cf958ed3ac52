"""Tests for the bilingual message catalogue and error localization."""

from datetime import date, datetime

import pytest

from madrar.errors import (
    InsufficientStockError, LedgerPostingFailed, NotFoundError, NoRecipeError, StoreError, ValidationError
)
from madrar.utils.date_converter import parse_date, parse_datetime, to_display_str
from madrar.utils.messages import TRANSLATIONS, localize_error, translate


def test_catalogues_have_the_same_keys():
    assert set(TRANSLATIONS["en"]) == set(TRANSLATIONS["ar"])


def test_translate_falls_back_to_english_and_key():
    assert translate("success.sale_recorded", "fr") == "Sale recorded successfully"
    assert translate("no.such.key", "ar") == "no.such.key"


def test_insufficient_stock_message_in_both_languages():
    error = InsufficientStockError("Raw Honey", 5, 20)
    assert localize_error(error, "en") == \
        "Insufficient stock: only 5 of Raw Honey available, but 20 requested."
    assert "Raw Honey" in localize_error(error, "ar")


def test_not_found_uses_translated_entity_name():
    error = NotFoundError("Product", "p-1")
    assert localize_error(error, "en") == "Product could not be found."
    assert localize_error(error, "ar") == "تعذر العثور على المنتج."


def test_no_recipe_and_validation_messages():
    assert "Sage Tea Blend" in localize_error(NoRecipeError("p-2", "Sage Tea Blend"), "en")
    error = ValidationError("bad", "validation.customer_name_required")
    assert localize_error(error, "ar") == "اسم العميل مطلوب."


def test_ledger_warning_names_customer():
    warning = LedgerPostingFailed("s-1", "Salim", "50.00")
    assert "Salim" in localize_error(warning, "en")


def test_store_and_unexpected_errors_never_leak_raw_text():
    assert localize_error(StoreError("UNIQUE constraint failed: persons.id"), "en") == \
        TRANSLATIONS["en"]["error.store"]
    assert localize_error(KeyError("secret"), "ar") == TRANSLATIONS["ar"]["error.generic"]


def test_dates_display_per_language():
    day = date(2024, 3, 9)
    assert to_display_str(day, "en") == "2024-03-09"
    assert to_display_str(datetime(2024, 3, 9, 14, 0), "ar") == "٠٩/٠٣/٢٠٢٤"
    assert to_display_str(None) == "-"


def test_date_parsing_rejects_non_iso_input():
    assert parse_date("2024-03-09T14:00:00") == date(2024, 3, 9)
    assert parse_datetime("2024-03-09") == datetime(2024, 3, 9)
    with pytest.raises(ValidationError) as exc_info:
        parse_datetime("09/03/2024", "sale_date")
    assert exc_info.value.message_key == "validation.invalid_date"
    assert localize_error(exc_info.value, "en") == "sale_date must be a date in the form YYYY-MM-DD."
