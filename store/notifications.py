"""
Transactional order emails.

Senders return True/False and never raise. Views and services call
``enqueue`` which hands the work to a background worker once the current
database transaction has committed, so a slow or failing mail provider can
neither block a response nor undo an order change.
"""
import logging
import queue
import threading

from anymail.message import AnymailMessage
from django.conf import settings
from django.db import close_old_connections, transaction
from django.template.loader import render_to_string

from .pricing import calculate_totals

logger = logging.getLogger(__name__)

ORDER_CONFIRMATION = "order_confirmation"
OUT_FOR_DELIVERY = "out_for_delivery"
CANCELLATION = "cancellation"


def admin_recipients():
    """ORDER_NOTIFY_EMAILS as a clean list, falling back to DEFAULT_FROM_EMAIL."""
    raw_admins = getattr(settings, "ORDER_NOTIFY_EMAILS", None)
    if isinstance(raw_admins, str):
        recipient_list = [e.strip() for e in raw_admins.split(",") if e.strip()]
    elif isinstance(raw_admins, (list, tuple)):
        recipient_list = [e.strip() for e in raw_admins if e and e.strip()]
    else:
        recipient_list = []

    if not recipient_list:
        recipient_list = [settings.DEFAULT_FROM_EMAIL]

    seen = set()
    clean_recipients = []
    for r in recipient_list:
        low = r.lower()
        if low not in seen:
            clean_recipients.append(r)
            seen.add(low)
    return clean_recipients


def _order_context(order, **extra):
    items = list(order.items.all())
    user = order.user
    ctx = {
        "order": order,
        "items": items,
        "summary": calculate_totals(items),
        "name": user.get_full_name() or user.get_username() or "Customer",
        "site_url": settings.SITE_URL,
    }
    ctx.update(extra)
    return ctx


def _send(subject, template, ctx, to, bcc=None):
    plain = render_to_string(f"store/emails/{template}.txt", ctx)
    html = render_to_string(f"store/emails/{template}.html", ctx)

    msg = AnymailMessage(
        subject=subject,
        body=plain,
        from_email=settings.DEFAULT_FROM_EMAIL,
        to=to,
        bcc=bcc or [],
    )
    msg.attach_alternative(html, "text/html")
    msg.send()


def send_order_confirmation(order):
    try:
        ctx = _order_context(order)
        admins = admin_recipients()
        customer = order.user.email
        if customer:
            _send(f"Order confirmed — Presento #{order.id}", "order_confirmation", ctx, to=[customer], bcc=admins)
        else:
            _send(f"New Order #{order.id} - ₹{ctx['summary'].total}", "order_confirmation", ctx, to=admins)
        logger.info("Order confirmation sent for order %s", order.id)
        return True
    except Exception:
        logger.exception("Order confirmation send failed for order %s", order.id)
        return False


def send_out_for_delivery(order):
    if not order.user.email:
        logger.warning("No customer email for order %s; skipping out-for-delivery mail", order.id)
        return False
    try:
        ctx = _order_context(order)
        _send(f"Your Presento order #{order.id} is out for delivery", "out_for_delivery", ctx, to=[order.user.email])
        logger.info("Out for delivery email sent for order %s", order.id)
        return True
    except Exception:
        logger.exception("Out for delivery email failed for order %s", order.id)
        return False


def send_cancellation(order, reason=None):
    if not order.user.email:
        logger.warning("No customer email for order %s; skipping cancellation mail", order.id)
        return False
    try:
        ctx = _order_context(order, reason=reason)
        _send(f"Your Presento order #{order.id} has been cancelled", "order_cancelled", ctx, to=[order.user.email])
        logger.info("Cancellation email sent for order %s", order.id)
        return True
    except Exception:
        logger.exception("Cancellation email failed for order %s", order.id)
        return False


SENDERS = {
    ORDER_CONFIRMATION: send_order_confirmation,
    OUT_FOR_DELIVERY: send_out_for_delivery,
    CANCELLATION: send_cancellation,
}


def run_task(kind, order_id, **kwargs):
    from .models import Order

    try:
        order = (
            Order.objects.select_related('user')
            .prefetch_related('items__product')
            .filter(pk=order_id)
            .first()
        )
        if order is None:
            logger.warning("Order %s vanished before %s could be sent", order_id, kind)
            return False
        return SENDERS[kind](order, **kwargs)
    except Exception:
        logger.exception("Notification task %s failed for order %s", kind, order_id)
        return False


class NotificationDispatcher:
    """Single daemon worker draining a queue of email tasks."""

    def __init__(self):
        self._queue = queue.Queue()
        self._worker = None
        self._lock = threading.Lock()

    def submit(self, kind, order_id, **kwargs):
        if kind not in SENDERS:
            logger.error("Unknown notification kind %s for order %s", kind, order_id)
            return
        if not getattr(settings, "STORE_NOTIFICATIONS_ASYNC", True):
            run_task(kind, order_id, **kwargs)
            return
        self._ensure_worker()
        self._queue.put((kind, order_id, kwargs))
        logger.debug("Queued %s notification for order %s", kind, order_id)

    def _ensure_worker(self):
        with self._lock:
            if self._worker is None or not self._worker.is_alive():
                self._worker = threading.Thread(target=self._drain, name="store-notifications", daemon=True)
                self._worker.start()
                logger.info("Started notification worker thread")

    def _drain(self):
        while True:
            kind, order_id, kwargs = self._queue.get()
            close_old_connections()
            try:
                run_task(kind, order_id, **kwargs)
            except Exception:
                logger.exception("Notification worker failed on %s for order %s", kind, order_id)
            finally:
                close_old_connections()
                self._queue.task_done()

    def join(self):
        self._queue.join()


dispatcher = NotificationDispatcher()


def enqueue(kind, order_id, **kwargs):
    """Submit a notification once the surrounding transaction commits."""
    transaction.on_commit(lambda: dispatcher.submit(kind, order_id, **kwargs))
