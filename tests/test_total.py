from receipt_ocr_parser.core.parsers import extract_total, extract_subtotal, extract_tax


def test_labelled_total_beats_largest_amount() -> None:
    assert extract_total(["Subtotal 9.00", "Total 13.50"], [9.00, 13.50]) == 13.50


def test_subtotal_line_is_never_the_total() -> None:
    assert extract_total(["Subtotal 99.00", "Cash 100.00"], [99.00, 100.00]) == 100.00


def test_last_total_line_wins() -> None:
    lines = ["Total 10.00", "Tip 2.00", "Total 12.00"]

    assert extract_total(lines, [2.00, 10.00, 12.00]) == 12.00


def test_total_line_without_amount_is_passed_over() -> None:
    assert extract_total(["Total 20.00", "TOTAL"], [20.00]) == 20.00


def test_largest_amount_fallback() -> None:
    assert extract_total(["Coffee 0.50", "Sandwich 45.00"], [0.50, 45.00]) == 45.00


def test_fallback_range() -> None:
    assert extract_total(["x"], [0.50]) is None
    assert extract_total(["x"], [1.00]) == 1.00
    assert extract_total(["x"], [99999.99]) == 99999.99
    assert extract_total(["x"], [100000.00]) is None
    assert extract_total(["x"], [150000.00]) is None


def test_no_total() -> None:
    assert extract_total([], []) is None


def test_subtotal_and_tax_lines() -> None:
    lines = ["Subtotal $9.00", "Sales Tax $0.75", "Total $9.75"]

    assert extract_subtotal(lines) == 9.00
    assert extract_tax(lines) == 0.75


def test_tax_keywords() -> None:
    assert extract_tax(["GST 1.30"]) == 1.30
    assert extract_tax(["VAT: 2.00"]) == 2.00
    assert extract_tax(["Total 5.00"]) is None
