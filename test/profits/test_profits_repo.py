from reloop.profits import ProfitDistribution, ProfitDistributionsRepo

RECIPIENT = "0x" + "a" * 40


def test_profits_repo_link_sale(profits_repo: ProfitDistributionsRepo):
    profits_repo.insert(ProfitDistribution("0xab-2", 7, None, RECIPIENT, 50, 0, 100, "0xab"))
    profits_repo.insert(ProfitDistribution("0xab-3", 8, None, RECIPIENT, 50, 0, 100, "0xab"))
    assert profits_repo.link_sale("0xab", 7, "0xab-1") == 1
    assert profits_repo.link_sale("0xab", 7, "0xab-9") == 0
    assert profits_repo.get("0xab-2").sale_id == "0xab-1"
    assert profits_repo.get("0xab-3").sale_id is None


def test_profits_repo_recent_by_recipient(profits_repo: ProfitDistributionsRepo):
    for i in range(60):
        profits_repo.insert(
            ProfitDistribution(f"0x01-{i}", 1, None, RECIPIENT, i, 0, 100 + i, "0x01")
        )
    recent = profits_repo.find_by_recipient(RECIPIENT.upper().replace("0X", "0x"))
    assert len(recent) == 50
    assert recent[0].amount == 59
    assert [d.id for d in profits_repo.find_by_token(1)][:2] == ["0x01-59", "0x01-58"]
