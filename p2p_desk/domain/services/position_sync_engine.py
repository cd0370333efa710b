"""
POSITION SYNC ENGINE
Keep buy price / acquisition cost / inventory consistent under single-field edits

RULES:
✅ Edited field stored verbatim
✅ Inventory quantity is the anchor on buy price edits
✅ Recomputed field rendered as fixed two-decimal text
✅ Unresolvable edits touch only the edited field (drift allowed)
❌ No clamping, no validation beyond parse-ability
"""

from dataclasses import dataclass, replace
from decimal import Decimal
from typing import Optional

from p2p_desk.domain.models import PositionField, PositionState
from p2p_desk.utils.numeric import ZERO, format_fixed2, try_parse_decimal


@dataclass(frozen=True)
class SyncUpdate:
    """Dependent field to overwrite after an edit"""
    field: PositionField
    value: Decimal

    @property
    def text(self) -> str:
        return format_fixed2(self.value)


def resolve_position_edit(
    edited: PositionField,
    text: str,
    position: PositionState,
) -> Optional[SyncUpdate]:
    """
    Decide which field an edit recomputes

    Args:
        edited: Field the user edited
        text: New raw text of the edited field
        position: Position before the edit

    Returns:
        SyncUpdate for the dependent field, or None when the edit
        cannot be resolved (missing / zero buy price, unparseable operand)
    """
    new_value = try_parse_decimal(text)

    if edited is PositionField.BUY_PRICE:
        buy = new_value
        quantity = try_parse_decimal(position.inventory_quantity)
        if buy is None or buy <= ZERO or quantity is None:
            return None
        return SyncUpdate(PositionField.ACQUISITION_COST, quantity * buy)

    buy = try_parse_decimal(position.buy_price)
    if buy is None or buy <= ZERO or new_value is None:
        return None

    if edited is PositionField.ACQUISITION_COST:
        return SyncUpdate(PositionField.INVENTORY_QUANTITY, new_value / buy)

    return SyncUpdate(PositionField.ACQUISITION_COST, new_value * buy)


def apply_position_edit(
    position: PositionState,
    edited: PositionField,
    text: str,
) -> PositionState:
    """Return the position after storing `text` and running the sync rule."""
    update = resolve_position_edit(edited, text, position)
    changes = {edited.value: text}
    if update is not None:
        changes[update.field.value] = update.text
    return replace(position, **changes)


def position_after_sale(position: PositionState, remaining: Decimal) -> PositionState:
    """
    Position after a committed sale

    Inventory becomes the remaining quantity; acquisition cost is
    recomputed from it only when the buy price is usable.
    """
    changes = {PositionField.INVENTORY_QUANTITY.value: format_fixed2(remaining)}
    buy = try_parse_decimal(position.buy_price)
    if buy is not None and buy != ZERO:
        changes[PositionField.ACQUISITION_COST.value] = format_fixed2(remaining * buy)
    return replace(position, **changes)
