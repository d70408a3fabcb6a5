# app/services/notification_service.py
from app.celery_worker import celery_app
from app.utils.logging import get_logger

logger = get_logger(__name__)

ORDER_PLACED = "order_placed"
ORDER_CANCELLED = "order_cancelled"


class NotificationService:
    """
    Serwis do wysyłania powiadomień.
    Używa Celery do asynchronicznego przetwarzania.
    """

    @staticmethod
    def send_order_notification(user_id: int, order_id: int, event: str):
        """
        Wysyła powiadomienie o zmianie zamówienia (złożone / anulowane).
        """
        send_order_notification_task.delay(user_id, order_id, event)


@celery_app.task(name="app.services.notification_service.send_order_notification_task")
def send_order_notification_task(user_id: int, order_id: int, event: str):
    """
    Celery task - w prawdziwym systemie wysłałby email/SMS/push.
    Teraz tylko loguje.
    """
    logger.info(f"[NOTIFICATION] User {user_id}: Order {order_id} -> {event}")

    return {"user_id": user_id, "order_id": order_id, "event": event, "status": "sent"}
