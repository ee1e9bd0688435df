"""
Alert Service

CONTRACT:
    Input:  AlertBatchRequest (candle series per symbol)
    Output: AlertBatchResponse (buy / sell / monitoring alerts)

RESPONSIBILITIES:
    - Build an indicator snapshot per symbol
    - Apply BUY, SELL and MONITORING rules
    - Format recommendation text for the dashboard

Alert ids and timestamps are the only time-dependent output.
"""

from cryptoalert.services.alerts.formatting import base_symbol, format_price
from cryptoalert.services.alerts.interface import AlertServiceInterface
from cryptoalert.services.alerts.rules import generate_alerts
from cryptoalert.services.alerts.service import AlertService, get_alert_service

__all__ = [
    "AlertServiceInterface",
    "AlertService",
    "generate_alerts",
    "get_alert_service",
    "format_price",
    "base_symbol",
]
