"""Tests for French locale template filters."""

import datetime
from decimal import Decimal

from dashboard.templatetags.fr_filters import date_fr, euros, mois_fr


class TestEuros:
    def test_groups_thousands_with_spaces(self):
        assert euros(Decimal("1234.56")) == "1 234,56 €"

    def test_small_amount(self):
        assert euros(Decimal("120")) == "120,00 €"

    def test_millions(self):
        assert euros(1234567.8) == "1 234 567,80 €"

    def test_negative_amount_for_credit_notes(self):
        assert euros(Decimal("-50.5")) == "-50,50 €"

    def test_rounds_half_up(self):
        assert euros("0.005") == "0,01 €"

    def test_none_returns_empty_string(self):
        assert euros(None) == ""

    def test_non_numeric_is_returned_unchanged(self):
        assert euros("n/a") == "n/a"


class TestDateFr:
    def test_day_month_year(self):
        assert date_fr(datetime.date(2026, 10, 17)) == "17/10/2026"

    def test_pads_day_and_month(self):
        assert date_fr(datetime.date(2024, 6, 3)) == "03/06/2024"

    def test_datetime_is_handled(self):
        assert date_fr(datetime.datetime(2025, 1, 15, 10, 30)) == "15/01/2025"

    def test_none_returns_empty_string(self):
        assert date_fr(None) == ""


class TestMoisFr:
    def test_month_name_and_year(self):
        assert mois_fr(datetime.date(2026, 10, 17)) == "octobre 2026"

    def test_accented_month(self):
        assert mois_fr(datetime.date(2024, 2, 1)) == "février 2024"

    def test_none_returns_empty_string(self):
        assert mois_fr(None) == ""
