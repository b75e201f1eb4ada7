"""예측 서비스 DB / 접근 권한 관리 CLI

Usage:
    python scripts/manage_access.py init-db
    python scripts/manage_access.py grant-admin --user-id 0b6f...
    python scripts/manage_access.py add-staff --shop-id shop-1 --user-id 7c21...
    python scripts/manage_access.py show-forecasts --shop-id shop-1
"""

import argparse
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from src.domain.forecast.risk_summary import sort_by_risk, summarize_risk
from src.infrastructure.database.repos import ForecastRepository, ShopAccessRepository
from src.infrastructure.database.schema import init_db
from src.settings.constants import ROLE_ADMIN


def cmd_init_db(args):
    print(f"[OK] DB 초기화 완료: {args.db or '기본 경로'}")
    return 0


def cmd_grant_admin(args):
    repo = ShopAccessRepository(db_path=args.db)
    if repo.grant_role(args.user_id, ROLE_ADMIN):
        print(f"[OK] 관리자 권한 부여: user_id={args.user_id}")
    else:
        print(f"[SKIP] 이미 관리자입니다: user_id={args.user_id}")
    return 0


def cmd_add_staff(args):
    repo = ShopAccessRepository(db_path=args.db)
    if repo.get_owner_id(args.shop_id) is None:
        print(f"[ERROR] 매장을 찾을 수 없습니다: {args.shop_id}")
        return 1
    if repo.add_staff(args.shop_id, args.user_id):
        print(f"[OK] 직원 등록: shop_id={args.shop_id}, user_id={args.user_id}")
    else:
        print(f"[SKIP] 이미 등록된 직원입니다: shop_id={args.shop_id}, user_id={args.user_id}")
    return 0


def cmd_show_forecasts(args):
    repo = ForecastRepository(db_path=args.db)
    rows = sort_by_risk(repo.get_shop_forecasts(args.shop_id))
    if not rows:
        print("저장된 예측이 없습니다.")
        return 0

    print(f"{'위험도':<10} {'상품':<24} {'재고':>6} {'일평균':>8} {'품절까지':>8} {'신뢰도':>6}")
    print("-" * 70)
    for r in rows:
        days = r["days_until_stockout"]
        print(f"{r['risk_level'] or '-':<10} {(r['product_name'] or r['product_id'])[:24]:<24} "
              f"{r['current_stock']:>6} {r['daily_sales_avg']:>8.2f} "
              f"{days if days is not None else '-':>8} {r['confidence_score'] or 0:>6.0f}")

    summary = summarize_risk(rows)
    print(f"\ncritical={summary['critical']} warning={summary['warning']} "
          f"healthy={summary['healthy']} total={summary['total']}")
    return 0


def main():
    parser = argparse.ArgumentParser(description="재고 예측 서비스 관리")
    parser.add_argument("--db", type=Path, default=None, help="DB 파일 경로 (기본: 설정값)")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("init-db", help="스키마 생성")

    p = sub.add_parser("grant-admin", help="전역 관리자 권한 부여")
    p.add_argument("--user-id", required=True)

    p = sub.add_parser("add-staff", help="매장 직원 등록")
    p.add_argument("--shop-id", required=True)
    p.add_argument("--user-id", required=True)

    p = sub.add_parser("show-forecasts", help="저장된 예측 출력")
    p.add_argument("--shop-id", required=True)

    args = parser.parse_args()

    # 모든 명령 전에 스키마 보장 (이미 있으면 유지)
    init_db(args.db)

    handlers = {
        "init-db": cmd_init_db,
        "grant-admin": cmd_grant_admin,
        "add-staff": cmd_add_staff,
        "show-forecasts": cmd_show_forecasts,
    }
    return handlers[args.command](args)


if __name__ == "__main__":
    sys.exit(main())
