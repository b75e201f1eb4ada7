"""
Application 계층 -- 오케스트레이션 + 서비스

Usage:
    from src.application.services.forecast_service import InventoryForecastService
    from src.application.services.shop_access_service import authorize_shop_access
"""
