from decimal import Decimal

import pytest

from settleup.exceptions import InvalidAmountError, InvalidSplitError
from settleup.models import Share
from settleup.services.splits import compute_split


def _assert_symmetric(ledger):
    snap = ledger.snapshot()
    for p, row in snap.items():
        for q, value in row.items():
            assert snap[q][p] == -value


def test_apply_shares_updates_both_directions(ledger):
    split = compute_split("equal", 90, ["a", "b", "c"])
    ledger.apply_shares("a", split)
    assert ledger.balance_between("a", "b") == Decimal("30")
    assert ledger.balance_between("b", "a") == Decimal("-30")
    assert ledger.balance_between("a", "c") == Decimal("30")
    assert ledger.balance_between("b", "c") == 0
    _assert_symmetric(ledger)


def test_payer_share_is_ignored(ledger):
    ledger.apply_shares("a", [Share("a", Decimal("10"))])
    assert ledger.snapshot() == {}


def test_payer_outside_split(ledger):
    ledger.apply_shares("p", compute_split("equal", 20, ["a", "b"]))
    assert ledger.net_balance("p") == Decimal("20")
    assert ledger.total_owed("a") == Decimal("10")


def test_reverse_restores_previous_state(ledger):
    ledger.apply_shares("b", compute_split("exact", 10, ["a", "b"], amounts=[7.5, 2.5]))
    before = ledger.snapshot()
    split = compute_split("percentage", 100, ["a", "b", "c"], percentages=[20, 30, 50])
    ledger.apply_shares("a", split)
    assert ledger.snapshot() != before
    ledger.reverse_shares("a", split)
    assert ledger.snapshot() == before


def test_reverse_to_zero_prunes_entries(ledger):
    split = compute_split("equal", 100, ["a", "b", "c"])
    ledger.apply_shares("a", split)
    ledger.reverse_shares("a", split)
    assert ledger.snapshot() == {}
    assert ledger.participants() == []


def test_settle_reduces_debt(ledger):
    ledger.apply_shares("a", [Share("b", Decimal("50"))])
    ledger.settle("b", "a", 20)
    assert ledger.balance_between("a", "b") == Decimal("30")
    assert ledger.balance_between("b", "a") == Decimal("-30")


def test_overpayment_flips_sign(ledger):
    ledger.apply_shares("a", [Share("b", Decimal("50"))])
    ledger.settle("b", "a", 80)
    assert ledger.balance_between("b", "a") == Decimal("30")
    assert ledger.balance_between("a", "b") == Decimal("-30")


def test_dust_is_treated_as_settled(ledger):
    ledger.apply_shares("a", [Share("b", Decimal("10"))])
    ledger.settle("b", "a", "9.995")
    assert ledger.balance_between("a", "b") == 0
    assert "a" not in ledger.participants()


@pytest.mark.parametrize("amount", [0, -5, "abc"])
def test_settle_rejects_bad_amount(ledger, amount):
    with pytest.raises(InvalidAmountError):
        ledger.settle("a", "b", amount)
    assert ledger.snapshot() == {}


def test_settle_rejects_self_payment(ledger):
    with pytest.raises(InvalidAmountError):
        ledger.settle("a", "a", 10)


def test_invalid_share_leaves_ledger_untouched(ledger):
    ledger.apply_shares("a", [Share("b", Decimal("5"))])
    before = ledger.snapshot()
    with pytest.raises(InvalidSplitError):
        ledger.apply_shares("a", [Share("c", Decimal("10")), Share("d", Decimal("-1"))])
    assert ledger.snapshot() == before


def test_unknown_pair_reads_zero(ledger):
    assert ledger.balance_between("x", "y") == 0
    assert ledger.balances_for("x") == {}
    assert ledger.net_balance("x") == 0


def test_totals_and_nets(ledger):
    ledger.apply_shares("a", [Share("b", Decimal("30")), Share("c", Decimal("20"))])
    ledger.apply_shares("b", [Share("a", Decimal("5"))])
    assert ledger.balances_for("a") == {"b": Decimal("25"), "c": Decimal("20")}
    assert ledger.total_owed_to("a") == Decimal("45")
    assert ledger.total_owed("b") == Decimal("25")
    assert ledger.net_balances() == {"a": Decimal("45"), "b": Decimal("-25"), "c": Decimal("-20")}
    assert ledger.net_balances(["a", "b"]) == {"a": Decimal("25"), "b": Decimal("-25")}
    assert ledger.net_balance("a", among=["c"]) == Decimal("20")


def test_symmetry_holds_through_mixed_operations(ledger):
    people = ["a", "b", "c", "d"]
    ledger.apply_shares("a", compute_split("equal", 100, people))
    ledger.apply_shares("c", compute_split("percentage", 55.55, people, percentages=[10, 20, 30, 40]))
    ledger.settle("b", "a", 12.5)
    ledger.apply_shares("d", compute_split("exact", 10, ["a", "b"], amounts=[3, 7]))
    ledger.reverse_shares("c", compute_split("percentage", 55.55, people, percentages=[10, 20, 30, 40]))
    _assert_symmetric(ledger)
    assert sum(ledger.net_balances().values()) == 0


def test_settle_many_applies_batch(ledger):
    ledger.apply_shares("a", [Share("b", Decimal("40")), Share("c", Decimal("20"))])
    values = ledger.settle_many([("b", "a", 40), ("c", "a", "5.5"), ("c", "a", 4.5)])
    assert values == [Decimal("40"), Decimal("5.5"), Decimal("4.5")]
    assert ledger.balance_between("a", "b") == 0
    assert ledger.balance_between("a", "c") == Decimal("10")


def test_settle_many_is_all_or_nothing(ledger):
    ledger.apply_shares("a", [Share("b", Decimal("40"))])
    before = ledger.snapshot()
    with pytest.raises(InvalidAmountError):
        ledger.settle_many([("b", "a", 40), ("c", "c", 1)])
    with pytest.raises(InvalidAmountError):
        ledger.settle_many([("b", "a", 10), ("c", "a", 0)])
    assert ledger.snapshot() == before
