from reloop.sales import Sale, SalesRepo

SELLER = "0x" + "a" * 40
BUYER = "0x" + "b" * 40


def test_sales_repo_insert_or_ignore(sales_repo: SalesRepo):
    sale = Sale("0xab-1", 7, SELLER, BUYER, 1000, 80, 100, "0xab", 10)
    assert sales_repo.insert(sale)
    assert not sales_repo.insert(sale)
    assert sales_repo.get("0xab-1") == sale
    assert sales_repo.find_by_transaction("0xAB", 7) == sale
    assert sales_repo.find_by_transaction("0xab", 8) is None


def test_sales_repo_totals(sales_repo: SalesRepo):
    assert sales_repo.totals() == (0, 0, 0)
    sales_repo.insert(Sale("0x01-0", 1, SELLER, BUYER, 2**70, 10, 100, "0x01", 10))
    sales_repo.insert(Sale("0x02-0", 1, BUYER, SELLER, 2**70, 20, 200, "0x02", 20))
    assert sales_repo.totals() == (2, 2**71, 30)
    assert [s.id for s in sales_repo.find_by_token(1)] == ["0x02-0", "0x01-0"]
    assert [s.id for s in sales_repo.find(1, 1)] == ["0x01-0"]


def test_sales_repo_orders_log_index_numerically(sales_repo: SalesRepo):
    sales_repo.insert(Sale("0xcc-9", 3, SELLER, BUYER, 10, 0, 300, "0xcc", 30))
    sales_repo.insert(Sale("0xcc-10", 3, BUYER, SELLER, 10, 0, 300, "0xcc", 30))
    assert [s.id for s in sales_repo.find_by_token(3)] == ["0xcc-10", "0xcc-9"]
    assert [s.id for s in sales_repo.find(2, 0)] == ["0xcc-10", "0xcc-9"]
