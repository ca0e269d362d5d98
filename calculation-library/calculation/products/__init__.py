"""Products: zero-coupon bond, fixed-float swap, FX forward."""

from calculation.products.bond import ZeroCouponBond
from calculation.products.fx import FXForward
from calculation.products.swap import FixedFloatSwap

__all__ = ["ZeroCouponBond", "FixedFloatSwap", "FXForward"]
