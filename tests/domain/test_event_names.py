"""Tests for broker event names."""

from __future__ import annotations

from shopfront.domain.events import (
    CONTACTS_FORM,
    FIELD_CHANGE_PATTERN,
    ORDER_FORM,
    Events,
    field_change,
    form_submit,
)


class TestEventNames:
    def test_form_submit_names_match_fixed_events(self) -> None:
        assert form_submit(ORDER_FORM) == Events.ORDER_SUBMIT
        assert form_submit(CONTACTS_FORM) == Events.CONTACTS_SUBMIT

    def test_field_change_matches_pattern(self) -> None:
        assert FIELD_CHANGE_PATTERN.search(field_change(ORDER_FORM, "address"))
        assert FIELD_CHANGE_PATTERN.search(field_change(CONTACTS_FORM, "phone"))

    def test_pattern_ignores_other_events(self) -> None:
        for name in Events:
            assert FIELD_CHANGE_PATTERN.search(name) is None
