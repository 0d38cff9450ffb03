from datetime import datetime, timedelta, timezone

from core.stock import StockSummary, sort_newest_first, summarize_stock


T0 = datetime(2026, 10, 1, 9, 0, tzinfo=timezone.utc)


def _tx(item_id, new_stock, created_at, name=None, tx_id=None):
    return {
        "id": tx_id or f"{item_id}-{new_stock}",
        "item_id": item_id,
        "new_stock": new_stock,
        "created_at": created_at,
        "item": {"name": name or item_id, "category": "Civil", "unit": "bag"},
    }


def test_empty_log_gives_empty_summary():
    assert summarize_stock([]) == {}


def test_first_row_per_item_wins():
    t1, t2 = T0, T0 + timedelta(hours=1)
    rows = [_tx("A", 5, t2), _tx("B", 9, t2), _tx("A", 3, t1)]

    summary = summarize_stock(rows)

    assert {k: v.current_stock for k, v in summary.items()} == {"A": 5.0, "B": 9.0}
    assert summary["A"].last_updated == t2


def test_keeps_first_seen_order():
    rows = [_tx("B", 1, T0), _tx("A", 2, T0), _tx("B", 7, T0 - timedelta(days=1))]
    assert list(summarize_stock(rows)) == ["B", "A"]


def test_summarizing_is_idempotent():
    rows = [_tx("A", 5, T0), _tx("A", 2, T0 - timedelta(hours=2)), _tx("C", 0, T0)]
    first = summarize_stock(rows)
    again = summarize_stock(rows)
    assert first == again


def test_item_details_come_from_joined_item():
    row = _tx("A", 12, T0, name="Cement")
    s = summarize_stock([row])["A"]
    assert s == StockSummary(
        item_id="A",
        item_name="Cement",
        item_category="Civil",
        item_unit="bag",
        current_stock=12.0,
        last_updated=T0,
    )


def test_accepts_inventory_items_key_and_missing_item():
    with_alias = {"id": "1", "item_id": "A", "new_stock": 4, "created_at": T0, "inventory_items": {"name": "Sand"}}
    bare = {"id": "2", "item_id": "B", "new_stock": None, "created_at": T0}

    summary = summarize_stock([with_alias, bare])

    assert summary["A"].item_name == "Sand"
    assert summary["B"].item_name is None
    assert summary["B"].current_stock == 0.0


def test_sort_newest_first_breaks_ties_by_id_desc():
    rows = [
        _tx("A", 1, T0, tx_id="a"),
        _tx("A", 2, T0, tx_id="c"),
        _tx("A", 3, T0 - timedelta(minutes=1), tx_id="z"),
        _tx("A", 4, None, tx_id="n"),
    ]
    ordered = sort_newest_first(rows)
    assert [r["id"] for r in ordered] == ["c", "a", "z", "n"]


def test_sort_newest_first_handles_iso_strings():
    rows = [
        _tx("A", 1, "2026-10-01T09:00:00Z", tx_id="1"),
        _tx("A", 2, "2026-10-01T15:00:00+05:30", tx_id="2"),  # 09:30 UTC
    ]
    ordered = sort_newest_first(rows)
    assert [r["id"] for r in ordered] == ["2", "1"]
    assert summarize_stock(ordered)["A"].current_stock == 2.0
