# app/tasks/low_stock.py
from app.celery_worker import celery_app
from app.data.database import SessionLocal
from app.services.inventory_service import InventoryService
from app.utils.settings import LOW_STOCK_THRESHOLD
from app.utils.logging import get_logger

logger = get_logger(__name__)


@celery_app.task(name="app.tasks.low_stock.report_low_stock_task")
def report_low_stock_task(threshold: int = LOW_STOCK_THRESHOLD):
    logger.info(f"Low stock task started (threshold {threshold})")

    db = SessionLocal()
    try:
        products = InventoryService(db).low_stock(threshold)

        logger.info(f"Found {len(products)} products with low stock")

        for product in products:
            logger.warning(f"Niski stan produktu {product.id} ({product.name}): {product.stock}")

        return [{"product_id": p.id, "stock": p.stock} for p in products]

    finally:
        db.close()
