"""额度换算测试"""

import pytest

from relay_core.session.quota import to_currency_amount, to_display_price


class TestDisplayPrice:
    """显示价格测试"""

    @pytest.mark.parametrize(
        "quota,factor,expected",
        [
            (500000, 500000, "$1.0000"),
            (1234, 500000, "$0.0025"),
            (250000, 1000000, "$0.2500"),
            (3, 7, "$0.4286"),
        ],
    )
    def test_quota_divided_by_factor(self, quota, factor, expected):
        assert to_display_price(quota, factor) == expected

    def test_absent_quota(self):
        """没有额度数据时显示 $0.00"""
        assert to_display_price(None, 500000) == "$0.00"
        assert to_display_price(None) == "$0.00"

    def test_absent_factor_uses_default(self):
        assert to_display_price(1000000) == "$2.0000"
        assert to_display_price(1000000, None) == "$2.0000"

    def test_non_positive_factor_uses_default(self):
        """换算系数为0或负数时不能除零"""
        assert to_display_price(500000, 0) == "$1.0000"
        assert to_display_price(500000, -10) == "$1.0000"

    def test_zero_quota(self):
        assert to_display_price(0, 500000) == "$0.0000"


class TestCurrencyAmount:
    def test_amount(self):
        assert to_currency_amount(750000, 500000) == pytest.approx(1.5)

    def test_amount_default_factor(self):
        assert to_currency_amount(250000) == pytest.approx(0.5)
