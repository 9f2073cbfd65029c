# sales/services/order_repository.py

"""
ORDER REPOSITORY (WRITES)

insert_order()       -> Order header with an explicit id (force_insert)
insert_order_lines() -> OrderLine snapshots of the cart lines

Both are meant to run inside the checkout transaction.
"""

from __future__ import annotations

import logging

from django.db import IntegrityError, transaction

from catalog.models import Product
from sales.models import Order, OrderLine
from sales.services.exceptions import OrderIdConflictError

logger = logging.getLogger(__name__)


def insert_order(*, order_id: int, **fields) -> Order:
    order = Order(id=order_id, **fields)
    try:
        # savepoint: a failed insert must not poison the outer transaction
        with transaction.atomic():
            order.save(force_insert=True)
    except IntegrityError as exc:
        if Order.objects.filter(pk=order_id).exists():
            logger.warning("Order id collision", extra={"order_id": order_id})
            raise OrderIdConflictError(f"Order id {order_id} already exists") from exc
        raise
    return order


def insert_order_lines(*, order: Order, lines) -> list[OrderLine]:
    lines = list(lines)
    # products deleted since the line was added keep only product_ref
    live_ids = set(
        Product.objects.filter(pk__in=[line.product_id for line in lines]).values_list("pk", flat=True)
    )

    created = []
    for line in lines:
        created.append(
            OrderLine.objects.create(
                order=order,
                product_id=line.product_id if line.product_id in live_ids else None,
                product_ref=line.product_id,
                product_name=line.name,
                base_price=int(line.base_price),
                unit_price=int(line.unit_price),
                quantity=int(line.quantity),
                line_total=int(line.line_total),
                selections={g: list(opts) for g, opts in line.selections.items()},
                modifier_labels=line.modifier_labels,
                note=line.note or "",
            )
        )
    return created
