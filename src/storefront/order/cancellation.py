"""Order cancellation: command, handler and stock restoration."""

from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Identifier
from protean.utils.globals import current_domain

from storefront.domain import logger, storefront
from storefront.order.order import Order
from storefront.product.product import Product


def release_order_stock(order: Order) -> None:
    """Put every line of the order back into stock.

    Products deleted since the order was placed are skipped.
    """
    repo = current_domain.repository_for(Product)
    for line in order.item_quantities():
        try:
            product = repo.get(line["product_id"])
        except ObjectNotFoundError:
            logger.warning("stock_release_skipped", order_id=str(order.id), product_id=line["product_id"])
            continue
        product.release_stock(line["quantity"], order_id=order.id)
        repo.add(product)


def get_order_for_user(order_id, user_id) -> Order:
    """Load an order, hiding orders that belong to someone else."""
    order = current_domain.repository_for(Order).get(order_id)
    if str(order.user_id) != str(user_id):
        raise ObjectNotFoundError({"_entity": "Order not found"})
    return order


@storefront.command(part_of="Order")
class CancelOrder:
    order_id = Identifier(required=True)
    user_id = Identifier(required=True)


@storefront.command_handler(part_of=Order)
class CancelOrderHandler:
    @handle(CancelOrder)
    def cancel_order(self, command):
        order = get_order_for_user(command.order_id, command.user_id)
        order.cancel()
        release_order_stock(order)
        current_domain.repository_for(Order).add(order)

        logger.info("order_cancelled", order_id=str(order.id), user_id=str(command.user_id))
        return str(order.id)
