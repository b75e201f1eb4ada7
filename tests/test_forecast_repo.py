"""예측 저장소 / 상품·주문 조회 테스트"""

from datetime import datetime, timezone

import pytest

from src.infrastructure.database.repos import (
    ForecastRepository,
    OrderItemRepository,
    ProductRepository,
)


# ── 픽스처 ──────────────────────────────────────────

@pytest.fixture
def shop_with_products(seed):
    seed.shop("shop-1")
    seed.shop("shop-2", owner_id="other-owner")
    seed.product("P1", name="우유")
    seed.product("P2", name="두부")
    seed.product("P3", name="단종상품", is_active=0)
    seed.product("Q1", shop_id="shop-2", name="다른매장상품")
    seed.inventory("P1", quantity=15, min_stock_level=10)
    return seed


class TestForecastUpsert:
    """(product_id, shop_id) 당 1행"""

    def test_insert_then_update_keeps_one_row(self, forecast_db, shop_with_products):
        repo = ForecastRepository(db_path=forecast_db)

        repo.upsert_forecast("P1", "shop-1", current_stock=15, daily_sales_avg=2.0,
                             days_until_stockout=7, risk_level="warning", confidence_score=80)
        repo.upsert_forecast("P1", "shop-1", current_stock=10, daily_sales_avg=2.5,
                             days_until_stockout=4, risk_level="critical", confidence_score=90)

        assert repo.count_for_product("P1", "shop-1") == 1
        row = repo.get_forecast("P1", "shop-1")
        assert row["current_stock"] == 10
        assert row["risk_level"] == "critical"
        assert row["confidence_score"] == 90

    def test_same_input_is_idempotent(self, forecast_db, shop_with_products):
        repo = ForecastRepository(db_path=forecast_db)
        for _ in range(3):
            repo.upsert_forecast("P2", "shop-1", current_stock=50, daily_sales_avg=0,
                                 days_until_stockout=None, risk_level="healthy")

        assert repo.count_for_product("P2", "shop-1") == 1
        assert repo.get_forecast("P2", "shop-1")["days_until_stockout"] is None

    def test_updated_at_returned(self, forecast_db, shop_with_products):
        repo = ForecastRepository(db_path=forecast_db)
        updated_at = repo.upsert_forecast("P1", "shop-1", current_stock=1, daily_sales_avg=1.0)
        assert repo.get_forecast("P1", "shop-1")["updated_at"] == updated_at

    def test_shop_forecasts_include_product_name(self, forecast_db, shop_with_products):
        repo = ForecastRepository(db_path=forecast_db)
        repo.upsert_forecast("P1", "shop-1", current_stock=15, daily_sales_avg=2.0)
        repo.upsert_forecast("Q1", "shop-2", current_stock=1, daily_sales_avg=1.0)

        rows = repo.get_shop_forecasts("shop-1")
        assert len(rows) == 1
        assert rows[0]["product_name"] == "우유"

    def test_missing_forecast(self, forecast_db):
        assert ForecastRepository(db_path=forecast_db).get_forecast("P1", "shop-1") is None


class TestProductRepository:
    """활성 상품 + 재고 조회"""

    def test_active_products_only(self, forecast_db, shop_with_products):
        products = ProductRepository(db_path=forecast_db).get_active_products("shop-1")
        assert {p["id"] for p in products} == {"P1", "P2"}

    def test_missing_inventory_is_none(self, forecast_db, shop_with_products):
        products = {p["id"]: p for p in ProductRepository(db_path=forecast_db).get_active_products("shop-1")}
        assert products["P1"]["quantity"] == 15
        assert products["P2"]["quantity"] is None
        assert products["P2"]["min_stock_level"] is None


class TestOrderItemRepository:
    """최근 30일 완료 주문"""

    def test_window_and_status_filter(self, forecast_db, shop_with_products):
        seed = shop_with_products
        seed.order("shop-1", {"P1": 20}, days_ago=1)
        seed.order("shop-1", {"P1": 40}, days_ago=29)
        seed.order("shop-1", {"P1": 100}, days_ago=31)                   # 기간 밖
        seed.order("shop-1", {"P1": 7}, status="pending", days_ago=1)    # 미완료
        seed.order("shop-1", {"P1": 9}, status="cancelled", days_ago=1)  # 취소
        seed.order("shop-2", {"Q1": 5}, days_ago=1)                      # 다른 매장

        items = OrderItemRepository(db_path=forecast_db).get_completed_items(
            "shop-1", days=30, now=datetime.now(timezone.utc)
        )

        assert sorted(i["quantity"] for i in items) == [20, 40]
        assert all(i["product_id"] == "P1" for i in items)

    def test_boundary_day_with_space_separated_timestamp(self, forecast_db, shop_with_products):
        """SQLite 기본 형식('YYYY-MM-DD HH:MM:SS')도 기간 경계에서 포함"""
        seed = shop_with_products
        seed.order("shop-1", {"P1": 3}, created_at="2026-09-19 12:45:00")   # 29일 23시간 전
        seed.order("shop-1", {"P1": 5}, created_at="2026-09-19 10:45:00")   # 30일 1시간 전

        items = OrderItemRepository(db_path=forecast_db).get_completed_items(
            "shop-1", days=30, now=datetime(2026, 10, 19, 11, 45, tzinfo=timezone.utc)
        )

        assert [i["quantity"] for i in items] == [3]

    def test_offset_timestamps_normalized_to_utc(self, forecast_db, shop_with_products):
        """오프셋이 있는 값은 UTC 로 환산 후 비교"""
        seed = shop_with_products
        # UTC 2026-09-19 12:45 (경계 안)
        seed.order("shop-1", {"P1": 7}, created_at="2026-09-19T21:45:00+09:00")
        # UTC 2026-09-19 10:45 (경계 밖)
        seed.order("shop-1", {"P1": 9}, created_at="2026-09-19T10:45:00Z")

        items = OrderItemRepository(db_path=forecast_db).get_completed_items(
            "shop-1", days=30, now=datetime(2026, 10, 19, 11, 45, tzinfo=timezone.utc)
        )

        assert [i["quantity"] for i in items] == [7]

    def test_naive_now_treated_as_utc(self, forecast_db, shop_with_products):
        seed = shop_with_products
        seed.order("shop-1", {"P1": 4}, created_at="2026-10-18T00:00:00")

        repo = OrderItemRepository(db_path=forecast_db)
        naive = repo.get_completed_items("shop-1", days=1, now=datetime(2026, 10, 18, 23, 0))
        aware = repo.get_completed_items(
            "shop-1", days=1, now=datetime(2026, 10, 18, 23, 0, tzinfo=timezone.utc)
        )

        assert naive == aware
        assert [i["quantity"] for i in naive] == [4]
