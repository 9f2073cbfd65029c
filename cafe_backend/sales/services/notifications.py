# sales/services/notifications.py

"""
ORDER NOTIFICATIONS (OUTBOUND)

The storefront hands the customer a WhatsApp deep link pre-filled with the order
summary; the café confirms the order in chat. Nothing is sent from the server.

Link format:
    https://wa.me/<number>?text=<urlencoded message>
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from urllib.parse import quote

from django.conf import settings

from catalog.services.money import format_amount

logger = logging.getLogger(__name__)

WHATSAPP_BASE_URL = "https://wa.me"


@dataclass(frozen=True)
class OrderConfirmation:
    order_id: int
    customer_name: str
    final_total: int

    def to_dict(self) -> dict:
        return {
            "order_id": self.order_id,
            "customer_name": self.customer_name,
            "final_total": self.final_total,
        }


def whatsapp_number() -> str:
    raw = settings.ORDER_NOTIFICATIONS.get("WHATSAPP_NUMBER") or ""
    return re.sub(r"\D", "", raw)


def build_order_message(order, lines=None) -> str:
    lines = list(order.lines.all()) if lines is None else list(lines)

    parts = [
        f"Hello, I'd like to confirm order #{order.pk}",
        f"Name: {order.customer_name}",
        f"Type: {order.get_fulfillment_type_display()}",
        "",
    ]
    for line in lines:
        parts.append(f"- {line.quantity}x {line.product_name} ({format_amount(line.line_total)})")
        for label in line.modifier_labels or []:
            parts.append(f"    {label['group']}: {label['options']}")
        if line.note:
            parts.append(f"    Note: {line.note}")

    parts.append("")
    if order.promo_discount:
        parts.append(f"Promo {order.promo_code}: -{format_amount(order.promo_discount)}")
    if order.points_used:
        parts.append(f"Points: -{format_amount(order.points_used)}")
    parts.append(f"Total: {format_amount(order.final_total)}")

    if order.is_delivery:
        if order.address:
            parts.append(f"Address: {order.address}")
        if order.maps_link:
            parts.append(f"Location: {order.maps_link}")

    return "\n".join(parts)


def build_whatsapp_link(order, lines=None) -> str | None:
    number = whatsapp_number()
    if not number:
        return None
    return f"{WHATSAPP_BASE_URL}/{number}?text={quote(build_order_message(order, lines))}"


def log_order_confirmation(confirmation: OrderConfirmation) -> None:
    """Default notifier: the confirmation is delivered through the WhatsApp link."""
    logger.info("Order confirmed", extra=confirmation.to_dict())
