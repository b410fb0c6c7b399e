import math
from typing import List, Sequence

from ..domain.entities.catalog_entity import BasketItem
from ..domain.entities.execution_entity import AllocationRow


class AllocationService:
    """
    Stateless helper that splits a total spend across weighted basket items.

    Smallest-unit amounts are always floored, so the sum of the rows never
    exceeds the smallest-unit equivalent of the total. Same inputs always
    give the same rows, which is what lets the recurring math match the
    buy-now math.
    """

    @staticmethod
    def to_smallest_units(amount: float, decimals: int) -> int:
        """
        floor(amount * 10 ** decimals), truncating toward zero.
        Raises ValueError when the scaled amount overflows a float.
        """
        if not math.isfinite(amount) or amount <= 0:
            return 0
        scaled = amount * (10 ** int(decimals))
        if not math.isfinite(scaled):
            raise ValueError(f"amount {amount!r} does not fit in {decimals}-decimal units")
        return int(math.floor(scaled))

    def allocate(
        self,
        total_amount: float,
        items: Sequence[BasketItem],
        input_decimals: int,
    ) -> List[AllocationRow]:
        """
        :param total_amount: Total spend in input-asset units (USD for USDC), >= 0.
        :param items: Basket items, order preserved in the output.
        :param input_decimals: Decimals of the asset paying for the purchase.
        :return: One AllocationRow per item.
        """
        if total_amount < 0 or not math.isfinite(total_amount):
            raise ValueError(f"total_amount must be a finite number >= 0, got {total_amount!r}")
        if not items:
            return []

        # a single-item basket takes the whole amount whatever its weight says
        if len(items) == 1:
            only = items[0]
            return [
                AllocationRow(
                    mint=only.mint,
                    usd_amount=float(total_amount),
                    smallest_amount=self.to_smallest_units(total_amount, input_decimals),
                )
            ]

        weights_sum = sum(float(i.weight) for i in items)

        rows: List[AllocationRow] = []
        for item in items:
            usd = (total_amount * float(item.weight)) / weights_sum if weights_sum > 0 else 0.0
            rows.append(
                AllocationRow(
                    mint=item.mint,
                    usd_amount=usd,
                    smallest_amount=self.to_smallest_units(usd, input_decimals),
                )
            )
        return rows

    @staticmethod
    def per_order_amount(total_amount: float, item_count: int, order_count: int) -> float:
        """
        Approximate spend per asset per recurring order.
        """
        per_asset = total_amount / max(1, int(item_count))
        return per_asset / max(1, int(order_count))


def allocate(total_amount: float, items: Sequence[BasketItem], input_decimals: int) -> List[AllocationRow]:
    return AllocationService().allocate(total_amount, items, input_decimals)
