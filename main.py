#!/usr/bin/env python3
"""
Entry point for the shop cart demo session

Seeds a small catalog, runs a guest cart, signs in (merging the guest cart
into the remote one) and logs the resulting summary.
"""

import asyncio
import logging

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

from shop_cart.domain.entities.product_entity import Product
from shop_cart.infrastructure.configuration.config import get_config
from shop_cart.infrastructure.container.dependency_injection import DependencyContainer
from shop_cart.infrastructure.logging.logger_config import (
    LoggingConfigOptions,
    setup_logging,
)

DEMO_CATALOG = [
    Product(id="whey-1kg", name="Whey Protein 1kg", price="1000", images=["whey.jpg"], inventory=5),
    Product(id="creatine-250", name="Creatine 250g", price="300", images=["creatine.jpg"], inventory=20),
    Product(id="shaker", name="Shaker Bottle", price="149.50", inventory=0),
]

DEMO_USER_ID = "demo-user"


async def run_session(container: DependencyContainer) -> None:
    """Guest adds items, then signs in and checks out"""
    logger = logging.getLogger(__name__)
    orchestrator = container.get_cart_orchestrator()
    cart = container.get_cart_management_use_case()
    products = {product.id: product for product in DEMO_CATALOG}

    await cart.start()
    await cart.add_to_cart(products["creatine-250"], 2)
    await cart.add_to_cart(products["shaker"])  # out of stock, rejected

    signed_in = await cart.set_user(DEMO_USER_ID)
    logger.info("Signed in as %s: %d items", DEMO_USER_ID, signed_in.cart_summary.total_items)
    await cart.add_to_cart(products["whey-1kg"], 2)
    await cart.update_quantity("creatine-250", 1)

    validation = await cart.validate_cart()
    logger.info("Validation: %s", validation.message)

    await orchestrator.flush()
    summary = cart.get_cart_summary()
    logger.info(
        "🧾 CART SUMMARY: %d items, subtotal %s, tax %s, shipping %s, total %s",
        summary.total_items,
        summary.subtotal,
        summary.tax,
        summary.shipping,
        summary.total_amount,
    )


def main():
    """Main entry point"""
    config = get_config()
    setup_logging(LoggingConfigOptions.from_settings(config))
    logger = logging.getLogger(__name__)
    logger.info("Starting shop cart demo (environment: %s)", config.environment)

    container = DependencyContainer(settings=config)
    db_manager = container.get_database_manager()
    db_manager.create_tables()
    db_manager.seed_products(DEMO_CATALOG)

    async def _run():
        try:
            await run_session(container)
        finally:
            await container.cleanup()

    asyncio.run(_run())


if __name__ == "__main__":
    main()
