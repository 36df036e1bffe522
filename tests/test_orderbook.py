import pytest

from tokenvm.orderbook import ALL_PAIRS, Order, OrderBook

PAIR = "a-b"


def test_untracked_pair_is_ignored():
    book = OrderBook([PAIR])
    book.add("o1", "owner", "c-d", 1, 2, 10)
    assert book.orders("c-d", 10) == []


def test_orders_sorted_by_best_rate():
    book = OrderBook([PAIR])
    book.add("low", "owner", PAIR, 1, 4, 10)
    book.add("high", "owner", PAIR, 3, 1, 10)
    book.add("mid", "owner", PAIR, 1, 1, 10)
    assert [o.id for o in book.orders(PAIR, 10)] == ["high", "mid", "low"]


def test_rates_are_non_increasing():
    book = OrderBook([PAIR])
    for i, (a, b) in enumerate([(5, 2), (1, 9), (7, 7), (2, 3), (9, 1)]):
        book.add(i, "owner", PAIR, a, b, 1)
    rates = [o.rate() for o in book.orders(PAIR, 10)]
    assert rates == sorted(rates, reverse=True)


def test_limit_truncates():
    book = OrderBook([PAIR])
    for i in range(5):
        book.add(i, "owner", PAIR, i + 1, 1, 1)
    result = book.orders(PAIR, 2)
    assert [o.id for o in result] == [4, 3]


def test_negative_limit_rejected():
    book = OrderBook([PAIR])
    with pytest.raises(ValueError):
        book.orders(PAIR, -1)


def test_track_all_pairs():
    book = OrderBook([ALL_PAIRS])
    book.add("o1", "owner", "x-y", 2, 1, 5)
    assert [o.id for o in book.orders("x-y", 10)] == ["o1"]


def test_star_with_other_pairs_is_literal():
    book = OrderBook([ALL_PAIRS, PAIR])
    book.add("o1", "owner", "x-y", 2, 1, 5)
    assert book.orders("x-y", 10) == []


def test_remove_order():
    book = OrderBook([PAIR])
    book.add("o1", "owner", PAIR, 1, 1, 5)
    book.add("o2", "owner", PAIR, 2, 1, 5)
    book.remove("o1")
    assert [o.id for o in book.orders(PAIR, 10)] == ["o2"]


def test_remove_unknown_leaves_book_unchanged():
    book = OrderBook([PAIR])
    book.add("o1", "owner", PAIR, 1, 1, 5)
    book.remove("missing")
    assert [o.id for o in book.orders(PAIR, 10)] == ["o1"]


def test_update_remaining():
    book = OrderBook([PAIR])
    book.add("o1", "owner", PAIR, 1, 1, 5)
    book.update_remaining("o1", 2)
    assert book.orders(PAIR, 1)[0].remaining == 2
    book.update_remaining("missing", 9)
    assert book.orders(PAIR, 1)[0].remaining == 2


def test_add_records_fields():
    book = OrderBook([PAIR])
    book.add("o1", "owner-addr", PAIR, 3, 4, 11)
    assert book.orders(PAIR, 1) == [Order("o1", "owner-addr", 3, 4, 11)]


def test_order_dict_round_trip():
    order = Order("o1", "owner-addr", 3, 4, 11)
    data = order.to_dict()
    assert data == {
        "id": "o1",
        "owner": "owner-addr",
        "inTick": 3,
        "outTick": 4,
        "remaining": 11,
    }
    assert Order.from_dict(data) == order


def test_rate_is_in_over_out():
    assert Order("o", "w", 3, 4, 1).rate() == 3 / 4