# homeserve/services/commission.py
from typing import Optional, Tuple

from ..config import settings


def calculate_commission(
    amount: float,
    rate: Optional[float] = None,
    minimum: Optional[float] = None,
    maximum: Optional[float] = None
) -> float:
    """Platform cut of a booking amount, clamped to [minimum, maximum]"""
    rate = settings.commission_rate if rate is None else rate
    minimum = settings.minimum_commission if minimum is None else minimum
    maximum = settings.maximum_commission if maximum is None else maximum
    commission = amount * rate
    return round(min(max(commission, minimum), maximum), 2)


def split_payment(amount: float) -> Tuple[float, float]:
    """Return (commission, provider_earnings) for a booking amount"""
    commission = calculate_commission(amount)
    return commission, round(amount - commission, 2)


def commission_percentage(rate: Optional[float] = None) -> str:
    rate = settings.commission_rate if rate is None else rate
    return f"{rate * 100:.1f}%"
