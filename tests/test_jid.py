"""Tests for recipient address normalization."""

import pytest

from wagate.whatsapp.jid import normalize_group, normalize_phone


class TestNormalizePhone:
    @pytest.mark.parametrize(
        "phone, expected",
        [
            ("(62) 812-3456", "628123456@s.whatsapp.net"),
            ("+1 555 010 9999", "15550109999@s.whatsapp.net"),
            ("6281234567890", "6281234567890@s.whatsapp.net"),
        ],
    )
    def test_strips_non_digits_and_appends_suffix(self, phone, expected):
        assert normalize_phone(phone) == expected

    def test_suffixed_address_passes_through(self):
        assert normalize_phone("628123456@s.whatsapp.net") == "628123456@s.whatsapp.net"

    def test_idempotent(self):
        once = normalize_phone("(62) 812-3456")
        assert normalize_phone(once) == once


class TestNormalizeGroup:
    def test_appends_suffix(self):
        assert normalize_group("120363025246125486") == "120363025246125486@g.us"

    def test_suffixed_id_unchanged(self):
        assert normalize_group("120363025246125486@g.us") == "120363025246125486@g.us"

    def test_idempotent(self):
        once = normalize_group("abc")
        assert normalize_group(once) == once
