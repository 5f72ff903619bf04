"""Unit tests for the posting engine."""
import pytest

from erp.accounting.constants import VoucherType
from erp.accounting.errors import (
    InvalidVoucherType,
    MissingCounterAccount,
    MissingRequiredReference,
    UnbalancedEntries,
)
from erp.accounting.posting import (
    EntryDraft,
    ItemInput,
    SystemAccounts,
    build_postings,
    derive_item_line,
    derive_item_lines,
    derive_payment_entries,
    derive_purchase_entries,
    derive_receipt_entries,
    derive_sales_entries,
    derive_voucher_number,
    validate_balance,
)

PARTY, SALES, PURCHASE, OUTPUT_GST, INPUT_GST, BANK, RENT, SERVICE = range(1, 9)

SYSTEM = SystemAccounts(
    sales=SALES, purchase=PURCHASE, output_tax=OUTPUT_GST, input_tax=INPUT_GST
)


def _legs(entries):
    return [(e.account_id, e.debit, e.credit) for e in entries]


class TestItemLines:
    def test_single_line(self):
        line = derive_item_line(ItemInput(quantity=10, rate=100, gst_rate=18))
        assert line.amount == 1000
        assert line.gst_amount == pytest.approx(180)
        assert line.total == pytest.approx(1180)

    def test_totals_are_sums_of_lines(self):
        lines, base, tax, total = derive_item_lines([
            ItemInput(description="Widget", quantity=2, rate=250, gst_rate=18),
            ItemInput(description="Service", quantity=1, rate=300, gst_rate=5),
        ])
        assert [l.order for l in lines] == [0, 1]
        assert base == pytest.approx(800)
        assert tax == pytest.approx(90 + 15)
        assert total == pytest.approx(905)

    def test_no_intermediate_rounding(self):
        line = derive_item_line(ItemInput(quantity=3, rate=33.333, gst_rate=12.5))
        assert line.amount == pytest.approx(99.999)
        assert line.gst_amount == pytest.approx(12.499875)

    def test_gst_rate_out_of_range_rejected(self):
        with pytest.raises(ValueError):
            ItemInput(quantity=1, rate=1, gst_rate=150)


class TestPostingRules:
    def test_sales_scenario(self):
        entries = derive_sales_entries(PARTY, 1180, 1000, 180, SALES, OUTPUT_GST)
        assert _legs(entries) == [
            (PARTY, 1180, 0),
            (SALES, 0, 1000),
            (OUTPUT_GST, 0, 180),
        ]
        assert validate_balance(entries)

    def test_purchase_scenario(self):
        entries = derive_purchase_entries(PARTY, 590, 500, 90, PURCHASE, INPUT_GST)
        assert _legs(entries) == [
            (PURCHASE, 500, 0),
            (INPUT_GST, 90, 0),
            (PARTY, 0, 590),
        ]
        assert validate_balance(entries)

    def test_payment_to_supplier(self):
        entries = derive_payment_entries(BANK, 2000, party_id=PARTY)
        assert _legs(entries) == [(BANK, 0, 2000), (PARTY, 2000, 0)]

    def test_payment_direct_expense(self):
        entries = derive_payment_entries(BANK, 750, expense_account_id=RENT)
        assert _legs(entries) == [(BANK, 0, 750), (RENT, 750, 0)]

    def test_receipt_direct_income(self):
        entries = derive_receipt_entries(BANK, 3000, income_account_id=SERVICE)
        assert _legs(entries) == [(BANK, 3000, 0), (SERVICE, 0, 3000)]

    def test_receipt_from_customer(self):
        entries = derive_receipt_entries(BANK, 1180, party_id=PARTY)
        assert _legs(entries) == [(BANK, 1180, 0), (PARTY, 0, 1180)]

    @pytest.mark.parametrize("party_id,direct_id", [(None, None), (PARTY, RENT)])
    def test_payment_needs_exactly_one_counterparty(self, party_id, direct_id):
        with pytest.raises(MissingRequiredReference):
            derive_payment_entries(BANK, 100, party_id, direct_id)

    @pytest.mark.parametrize("party_id,direct_id", [(None, None), (PARTY, SERVICE)])
    def test_receipt_needs_exactly_one_counterparty(self, party_id, direct_id):
        with pytest.raises(MissingRequiredReference):
            derive_receipt_entries(BANK, 100, party_id, direct_id)


class TestValidateBalance:
    def test_balanced(self):
        assert validate_balance([
            EntryDraft(account_id=1, debit=100),
            EntryDraft(account_id=2, credit=100),
        ])

    def test_within_epsilon(self):
        assert validate_balance([
            EntryDraft(account_id=1, debit=100.004),
            EntryDraft(account_id=2, credit=100),
        ])

    def test_unbalanced(self):
        assert not validate_balance([
            EntryDraft(account_id=1, debit=100.02),
            EntryDraft(account_id=2, credit=100),
        ])

    def test_empty_is_balanced(self):
        assert validate_balance([])

    @pytest.mark.parametrize("quantity", [1, 3, 7.5])
    @pytest.mark.parametrize("rate", [0.01, 99.99, 1234.567])
    @pytest.mark.parametrize("gst_rate", [0, 5, 12, 18, 28])
    def test_trade_vouchers_always_balance(self, quantity, rate, gst_rate):
        items = [ItemInput(quantity=quantity, rate=rate, gst_rate=gst_rate)] * 3
        for vtype in ("SALES", "PURCHASE"):
            result = build_postings(
                vtype, system_accounts=SYSTEM, party_id=PARTY, items=items
            )
            assert validate_balance(result.entries)


class TestVoucherNumber:
    @pytest.mark.parametrize(
        "vtype,count,expected",
        [
            ("SALES", 0, "SV-0001"),
            ("PURCHASE", 41, "PV-0042"),
            ("PAYMENT", 9, "PY-0010"),
            ("RECEIPT", 999, "RC-1000"),
            ("JOURNAL", 0, "VO-0001"),
        ],
    )
    def test_prefix_and_padding(self, vtype, count, expected):
        assert derive_voucher_number(vtype, count) == expected

    def test_beyond_four_digits(self):
        assert derive_voucher_number("SALES", 12345) == "SV-12346"


class TestBuildPostings:
    def test_sales_from_items(self):
        result = build_postings(
            "SALES",
            system_accounts=SYSTEM,
            existing_count=4,
            party_id=PARTY,
            items=[ItemInput(quantity=1, rate=1000, gst_rate=18)],
        )
        assert result.voucher_type == VoucherType.SALES
        assert result.voucher_number == "SV-0005"
        assert result.total_amount == pytest.approx(1180)
        assert result.base_amount == pytest.approx(1000)
        assert result.tax_amount == pytest.approx(180)
        assert len(result.lines) == 1
        assert _legs(result.entries) == [
            (PARTY, pytest.approx(1180), 0),
            (SALES, 0, pytest.approx(1000)),
            (OUTPUT_GST, 0, pytest.approx(180)),
        ]

    def test_purchase_from_items(self):
        result = build_postings(
            "purchase",
            system_accounts=SYSTEM,
            party_id=PARTY,
            items=[ItemInput(quantity=5, rate=100, gst_rate=18)],
        )
        assert result.voucher_number == "PV-0001"
        assert _legs(result.entries) == [
            (PURCHASE, pytest.approx(500), 0),
            (INPUT_GST, pytest.approx(90), 0),
            (PARTY, 0, pytest.approx(590)),
        ]

    def test_sales_without_items_posts_untaxed_amount(self):
        result = build_postings(
            "SALES", system_accounts=SYSTEM, party_id=PARTY, amount=500
        )
        assert result.total_amount == 500
        assert result.tax_amount == 0
        assert result.lines == []
        assert validate_balance(result.entries)

    def test_payment_uses_amount(self):
        result = build_postings(
            "PAYMENT",
            system_accounts=SystemAccounts(),
            amount=2000,
            bank_account_id=BANK,
            party_id=PARTY,
        )
        assert result.total_amount == 2000
        assert _legs(result.entries) == [(BANK, 0, 2000), (PARTY, 2000, 0)]

    def test_receipt_direct_income(self):
        result = build_postings(
            "RECEIPT",
            system_accounts=SystemAccounts(),
            amount=3000,
            bank_account_id=BANK,
            income_account_id=SERVICE,
        )
        assert result.voucher_number == "RC-0001"
        assert _legs(result.entries) == [(BANK, 3000, 0), (SERVICE, 0, 3000)]

    def test_invalid_type(self):
        with pytest.raises(InvalidVoucherType) as exc_info:
            build_postings("JOURNAL", system_accounts=SYSTEM, amount=10)
        assert "no matching posting rule" in str(exc_info.value).lower()

    @pytest.mark.parametrize(
        "vtype,missing",
        [
            ("SALES", {"sales": None}),
            ("SALES", {"output_tax": None}),
            ("PURCHASE", {"purchase": None}),
            ("PURCHASE", {"input_tax": None}),
        ],
    )
    def test_missing_counter_account(self, vtype, missing):
        system = SYSTEM.model_copy(update=missing)
        with pytest.raises(MissingCounterAccount):
            build_postings(
                vtype,
                system_accounts=system,
                party_id=PARTY,
                items=[ItemInput(quantity=1, rate=10)],
            )

    def test_missing_counter_account_checked_before_party(self):
        with pytest.raises(MissingCounterAccount):
            build_postings("SALES", system_accounts=SystemAccounts(), amount=10)

    def test_trade_voucher_needs_party(self):
        with pytest.raises(MissingRequiredReference):
            build_postings(
                "SALES", system_accounts=SYSTEM, items=[ItemInput(quantity=1, rate=10)]
            )

    def test_payment_needs_bank(self):
        with pytest.raises(MissingRequiredReference):
            build_postings(
                "PAYMENT", system_accounts=SYSTEM, amount=10, party_id=PARTY
            )

    def test_unbalanced_rejected(self, monkeypatch):
        import erp.accounting.posting as posting

        monkeypatch.setattr(
            posting,
            "derive_receipt_entries",
            lambda *a, **k: [EntryDraft(account_id=BANK, debit=10)],
        )
        with pytest.raises(UnbalancedEntries):
            posting.build_postings(
                "RECEIPT",
                system_accounts=SYSTEM,
                amount=10,
                bank_account_id=BANK,
                party_id=PARTY,
            )
