"""
TRADE CALCULATOR
Profit / ROI / spread for the pending sale

Pure and side-effect free. Every input goes through the numeric guard,
so bad text counts as zero and nothing here can raise on user input.
"""

from decimal import Decimal

from p2p_desk.domain.models import TradeCalculation
from p2p_desk.utils.numeric import HUNDRED, ZERO, NumericInput, parse_decimal


def calculate_trade(
    buy_price: NumericInput,
    sell_price: NumericInput,
    amount: NumericInput,
    inventory: NumericInput,
) -> TradeCalculation:
    """
    Compute derived results for the current calculator inputs

    Args:
        buy_price: Buy price per unit (fiat)
        sell_price: Sell price per unit (fiat)
        amount: Units to sell
        inventory: Units currently held

    Returns:
        TradeCalculation
    """
    buy = parse_decimal(buy_price)
    sell = parse_decimal(sell_price)
    qty = parse_decimal(amount)
    held = parse_decimal(inventory)

    gross_revenue = sell * qty
    cost_basis = buy * qty
    net_profit = gross_revenue - cost_basis

    return TradeCalculation(
        gross_revenue=gross_revenue,
        cost_basis=cost_basis,
        net_profit=net_profit,
        roi_pct=roi_pct(net_profit, cost_basis),
        spread_pct=spread_pct(buy, sell),
        # display only; oversell is rejected at commit time
        remaining_inventory=max(ZERO, held - qty),
    )


def roi_pct(profit: Decimal, cost_basis: Decimal) -> Decimal:
    if cost_basis <= ZERO:
        return ZERO
    return profit / cost_basis * HUNDRED


def spread_pct(buy: Decimal, sell: Decimal) -> Decimal:
    if buy <= ZERO:
        return ZERO
    return (sell - buy) / buy * HUNDRED
