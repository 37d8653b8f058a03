"""
额度换算
"""

from typing import Optional

from relay_core.station_models import DEFAULT_QUOTA_PER_UNIT


def _factor(quota_per_unit: Optional[int]) -> int:
    if quota_per_unit is None or quota_per_unit <= 0:
        return DEFAULT_QUOTA_PER_UNIT
    return quota_per_unit


def to_currency_amount(quota: int, quota_per_unit: Optional[int] = None) -> float:
    """原始额度换算为金额"""
    return quota / _factor(quota_per_unit)


def to_display_price(quota: Optional[int], quota_per_unit: Optional[int] = None) -> str:
    """
    原始额度换算为显示价格

    Args:
        quota: 原始额度，None 表示没有数据
        quota_per_unit: 站点的换算系数，缺失或非正数时使用 500000

    Returns:
        "$x.xxxx" 格式的价格，quota 缺失时返回 "$0.00"
    """
    if quota is None:
        return "$0.00"
    return f"${to_currency_amount(quota, quota_per_unit):.4f}"
