# tests/unit/test_loyalty_service.py

from decimal import Decimal
from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest

from bolerie.services.loyalty_service import LoyaltyService, points_for_order, select_tier
from bolerie.services.result import FailureKind


def _level(id, minimum_points):
    return SimpleNamespace(id=id, name=f"Nível {minimum_points}", minimum_points=minimum_points)


LEVELS = [_level(1, 0), _level(2, 100), _level(3, 300), _level(4, 1000)]


@pytest.mark.parametrize(
    "total, expected",
    [(Decimal("250"), 25), (Decimal("97"), 9), (Decimal("5"), 0), (Decimal("9.99"), 0), (Decimal("0"), 0)],
)
def test_points_for_order(total, expected):
    assert points_for_order(total) == expected


@pytest.mark.parametrize(
    "points, expected_id",
    [(0, 1), (99, 1), (100, 2), (299, 2), (300, 3), (5000, 4)],
)
def test_select_tier_picks_highest_qualifying_level(points, expected_id):
    assert select_tier(LEVELS, points).id == expected_id


def test_select_tier_ignores_list_order():
    assert select_tier(list(reversed(LEVELS)), 299).id == 2


def test_select_tier_returns_none_when_nothing_qualifies():
    assert select_tier([_level(1, 50)], 10) is None
    assert select_tier([], 10) is None


def test_award_points_updates_points_and_tier(mocker):
    # --- Arrange ---
    mock_db = MagicMock()
    mocker.patch("bolerie.crud.loyalty_level.get_multi", return_value=LEVELS)
    customer = SimpleNamespace(id=1, branch_id=1, loyalty_points=90, loyalty_level_id=1)
    service = LoyaltyService(db=mock_db)

    # --- Act ---
    awarded = service.award_points_for_order(customer, Decimal("100"))

    # --- Assert ---
    assert awarded == 10
    assert customer.loyalty_points == 100
    assert customer.loyalty_level_id == 2
    # Participa da transação de quem chamou
    mock_db.commit.assert_not_called()


def test_award_zero_points_is_a_no_op(mocker):
    mock_db = MagicMock()
    get_levels = mocker.patch("bolerie.crud.loyalty_level.get_multi", return_value=LEVELS)
    customer = SimpleNamespace(id=1, branch_id=1, loyalty_points=3, loyalty_level_id=1)

    awarded = LoyaltyService(db=mock_db).award_points_for_order(customer, Decimal("7"))

    assert awarded == 0
    assert customer.loyalty_points == 3
    get_levels.assert_not_called()


def test_recompute_tier_keeps_current_level_when_nothing_qualifies(mocker):
    mocker.patch("bolerie.crud.loyalty_level.get_multi", return_value=[_level(5, 50)])
    customer = SimpleNamespace(id=1, branch_id=1, loyalty_points=10, loyalty_level_id=99)

    LoyaltyService(db=MagicMock()).recompute_tier(customer, 10)

    assert customer.loyalty_level_id == 99


def test_redeem_with_insufficient_points_changes_nothing(mocker):
    # --- Arrange ---
    mock_db = MagicMock()
    customer = SimpleNamespace(id=1, branch_id=1, loyalty_points=40)
    reward = SimpleNamespace(id=3, name="Cupcake Grátis", points_required=75, is_active=True)
    mocker.patch("bolerie.crud.customer.get", return_value=customer)
    mocker.patch("bolerie.crud.loyalty_reward.get", return_value=reward)
    create_redemption = mocker.patch("bolerie.crud.crud_loyalty.create_redemption")

    # --- Act ---
    result = LoyaltyService(db=mock_db).redeem(customer_id=1, reward_id=3, branch_id=1)

    # --- Assert ---
    assert not result.ok
    assert result.kind == FailureKind.CONSTRAINT
    assert customer.loyalty_points == 40
    create_redemption.assert_not_called()
    mock_db.commit.assert_not_called()


def test_redeem_missing_reward_is_not_found(mocker):
    mocker.patch("bolerie.crud.customer.get", return_value=SimpleNamespace(id=1, loyalty_points=500))
    mocker.patch("bolerie.crud.loyalty_reward.get", return_value=None)

    result = LoyaltyService(db=MagicMock()).redeem(customer_id=1, reward_id=42, branch_id=1)

    assert result.kind == FailureKind.NOT_FOUND
