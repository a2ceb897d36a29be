"""Storefront bounded context: catalog, promotions, orders and payments.

Products, offers and orders are plain (non event-sourced) aggregates. Every
write goes through a command handler so that stock reservation, order
persistence and offer redemption commit in a single unit of work.
"""

import structlog
from protean.domain import Domain

from shared.logging import configure_logging

configure_logging()

storefront = Domain(name="storefront")

logger = structlog.get_logger(__name__)
