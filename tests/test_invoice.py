"""Tests for aggregation and invoice building."""

import itertools
from datetime import datetime, timedelta, timezone

import pytest

from boardbill.core.board import Card
from boardbill.core.errors import InvalidRequest, MalformedEvent
from boardbill.core.events import LIST_CHANGED, ActiveInterval, Event
from boardbill.core.invoice import Rates, TierTotals, build_invoice, price_totals
from boardbill.core.tiers import Tier


UTC = timezone.utc


@pytest.fixture
def window():
    return datetime(2025, 1, 1, tzinfo=UTC), datetime(2025, 2, 1, tzinfo=UTC)


@pytest.fixture
def t0():
    return datetime(2025, 1, 15, 9, 0, tzinfo=UTC)


def session(card_id, start, hours):
    """An enter/exit pair giving `hours` of active time."""
    return [
        Event(card_id, start, LIST_CHANGED, "Backlog", "Doing (IP)"),
        Event(card_id, start + timedelta(hours=hours), LIST_CHANGED, "Doing (IP)", "Done"),
    ]


class TestTierTotals:
    def test_starts_at_zero(self):
        totals = TierTotals()
        for tier in Tier:
            assert totals.total(tier) == timedelta()

    def test_accumulate(self, t0):
        totals = TierTotals()
        totals.accumulate(Tier.T2, [ActiveInterval(t0, t0 + timedelta(hours=1))])
        totals.accumulate(Tier.T2, [ActiveInterval(t0, t0 + timedelta(minutes=30))])
        assert totals.total(Tier.T2) == timedelta(hours=1, minutes=30)
        assert totals.total(Tier.T1) == timedelta()

    def test_accumulate_empty(self):
        totals = TierTotals()
        totals.accumulate(Tier.T3, [])
        assert totals.total(Tier.T3) == timedelta()

    def test_merge(self, t0):
        a = TierTotals()
        a.accumulate(Tier.T1, [ActiveInterval(t0, t0 + timedelta(hours=1))])
        b = TierTotals()
        b.accumulate(Tier.T1, [ActiveInterval(t0, t0 + timedelta(hours=2))])
        b.accumulate(Tier.T4, [ActiveInterval(t0, t0 + timedelta(hours=3))])
        merged = a.merge(b)
        assert merged.total(Tier.T1) == timedelta(hours=3)
        assert merged.total(Tier.T4) == timedelta(hours=3)


class TestRates:
    def test_for_tier(self):
        rates = Rates(t1=10, t2=20, t3=30, t4=40, t5=50)
        assert rates.for_tier(Tier.T1) == 10
        assert rates.for_tier(Tier.T5) == 50

    def test_negative_rate_rejected(self):
        with pytest.raises(InvalidRequest, match="T3 rate"):
            Rates(t3=-1).validate()

    def test_nan_rate_rejected(self):
        with pytest.raises(InvalidRequest):
            Rates(t1=float("nan")).validate()

    def test_zero_rates_allowed(self):
        Rates().validate()


class TestPriceTotals:
    def test_fractional_hours_not_rounded(self, window):
        totals = TierTotals()
        start = window[0]
        totals.accumulate(Tier.T1, [ActiveInterval(start, start + timedelta(minutes=20))])
        invoice = price_totals(totals, Rates(t1=30), *window)
        assert invoice.report(Tier.T1).hours == pytest.approx(1 / 3)
        assert invoice.report(Tier.T1).total_price == pytest.approx(10.0)


class TestBuildInvoice:
    def test_end_to_end_single_card(self, t0, window):
        cards = [Card(id="c1", labels=frozenset({"T3"}))]
        events = {"c1": session("c1", t0, 2)}
        invoice = build_invoice(cards, events, Rates(t3=50), *window)

        report = invoice.report(Tier.T3)
        assert report.total_duration == timedelta(hours=2)
        assert report.total_price == pytest.approx(100.0)
        assert report.rate_per_hour == 50
        assert invoice.total_price == pytest.approx(100.0)
        assert invoice.window_start == window[0]
        assert invoice.window_end == window[1]

    def test_all_five_reports_present(self, window):
        invoice = build_invoice([], {}, Rates(), *window)
        assert set(invoice.reports) == set(Tier)
        assert invoice.total_price == 0

    def test_unlabelled_card_billed_as_t1(self, t0, window):
        cards = [Card(id="c1")]
        invoice = build_invoice(cards, {"c1": session("c1", t0, 1)}, Rates(t1=10), *window)
        assert invoice.report(Tier.T1).total_duration == timedelta(hours=1)
        assert invoice.total_price == pytest.approx(10.0)

    def test_total_is_sum_of_tiers(self, t0, window):
        cards = [
            Card(id="a", labels=frozenset({"T1"})),
            Card(id="b", labels=frozenset({"T2", "T5"})),
            Card(id="c", labels=frozenset({"T4"})),
        ]
        events = {
            "a": session("a", t0, 1),
            "b": session("b", t0, 2),
            "c": session("c", t0, 3),
        }
        rates = Rates(t1=10, t2=20, t3=30, t4=40, t5=50)
        invoice = build_invoice(cards, events, rates, *window)

        assert invoice.report(Tier.T5).total_price == pytest.approx(100.0)
        assert invoice.report(Tier.T2).total_duration == timedelta()
        assert invoice.report(Tier.T4).total_price == pytest.approx(120.0)
        assert invoice.total_price == pytest.approx(10 + 100 + 120)
        assert invoice.total_duration == timedelta(hours=6)

    def test_card_order_does_not_matter(self, t0, window):
        cards = [
            Card(id="a", labels=frozenset({"T1"})),
            Card(id="b", labels=frozenset({"T1"})),
            Card(id="c", labels=frozenset({"T2"})),
        ]
        events = {
            "a": session("a", t0, 1.5),
            "b": session("b", t0 + timedelta(days=1), 0.25),
            "c": session("c", t0, 4),
        }
        rates = Rates(t1=33.3, t2=70)
        results = {
            tuple(
                (tier, r.total_duration)
                for tier, r in build_invoice(perm, events, rates, *window).reports.items()
            )
            for perm in itertools.permutations(cards)
        }
        assert len(results) == 1

    def test_callable_event_source(self, t0, window):
        calls = []

        def fetch(card_id):
            calls.append(card_id)
            return session(card_id, t0, 1)

        cards = [Card(id="a"), Card(id="b")]
        invoice = build_invoice(cards, fetch, Rates(t1=1), *window)
        assert calls == ["a", "b"]
        assert invoice.report(Tier.T1).total_duration == timedelta(hours=2)

    def test_card_missing_from_mapping_has_no_time(self, window):
        invoice = build_invoice([Card(id="x")], {}, Rates(t1=100), *window)
        assert invoice.total_price == 0

    def test_window_must_be_ordered(self, window):
        start, end = window
        with pytest.raises(InvalidRequest):
            build_invoice([], {}, Rates(), end, start)
        with pytest.raises(InvalidRequest):
            build_invoice([], {}, Rates(), start, start)

    def test_invalid_request_checked_before_fetching(self, window):
        def fetch(card_id):
            raise AssertionError("should not fetch")

        with pytest.raises(InvalidRequest):
            build_invoice([Card(id="a")], fetch, Rates(t2=-5), *window)

    def test_fails_fast_on_malformed_event(self, t0, window):
        fetched = []

        def fetch(card_id):
            fetched.append(card_id)
            if card_id == "bad":
                return [Event(card_id, t0, LIST_CHANGED)]
            return session(card_id, t0, 1)

        cards = [Card(id="ok"), Card(id="bad"), Card(id="never")]
        with pytest.raises(MalformedEvent):
            build_invoice(cards, fetch, Rates(), *window)
        assert fetched == ["ok", "bad"]

    def test_to_dict(self, t0, window):
        cards = [Card(id="c1", labels=frozenset({"T3"}))]
        invoice = build_invoice(cards, {"c1": session("c1", t0, 2)}, Rates(t3=50), *window)
        data = invoice.to_dict()
        assert list(data["tiers"]) == ["T5", "T4", "T3", "T2", "T1"]
        assert data["tiers"]["T3"]["hours"] == pytest.approx(2.0)
        assert data["tiers"]["T3"]["duration_seconds"] == 7200
        assert data["total_price"] == pytest.approx(100.0)
        assert data["window_start"] == "2025-01-01T00:00:00+00:00"
