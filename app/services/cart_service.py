from app.core.config import Settings
from app.schemas.cart import CartLineRead, CartSummary
from app.schemas.order import LineItem


class CartService:
    """
    Pricing for cart contents.

    Responsibilities:
      - compute line totals and item count
      - free delivery above FREE_DELIVERY_THRESHOLD, DELIVERY_FEE otherwise
      - tax at TAX_RATE on the subtotal
      - savings against originalPrice where the line carries one
    """

    def __init__(self, settings: Settings):
        self.settings = settings

    def delivery_fee(self, subtotal: float) -> float:
        if subtotal <= 0:
            return 0.0
        if subtotal > self.settings.FREE_DELIVERY_THRESHOLD:
            return 0.0
        return self.settings.DELIVERY_FEE

    def quote(self, items: list[LineItem]) -> CartSummary:
        """
        Price the given cart lines.

          subtotal = sum(price * quantity)
          total    = subtotal + delivery_fee + subtotal * TAX_RATE
        """
        line_reads: list[CartLineRead] = []
        item_count = 0
        subtotal = 0.0
        savings = 0.0

        for it in items:
            line_total = it.line_total
            item_count += it.quantity
            subtotal += line_total
            if it.original_price is not None:
                savings += (it.original_price - it.price) * it.quantity

            line_reads.append(
                CartLineRead(
                    product_id=it.product_id,
                    name=it.name,
                    quantity=it.quantity,
                    price=it.price,
                    line_total=line_total,
                )
            )

        delivery_fee = self.delivery_fee(subtotal)
        tax = subtotal * self.settings.TAX_RATE

        return CartSummary(
            items=line_reads,
            item_count=item_count,
            subtotal=subtotal,
            delivery_fee=delivery_fee,
            tax=tax,
            total=subtotal + delivery_fee + tax,
            savings=savings,
            currency=self.settings.CURRENCY_SYMBOL,
        )
