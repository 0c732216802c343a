# contract_kernel/order_contracts.py
"""
Order Domain Contracts

Reference contracts for an order-approval workflow:
- CommonCustomerConditions: reusable customer rules
- ApproveOrderContract: pre/post/invariant checks around approve_order()
- OrderService: the guarded operation
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Tuple

from .builder import ConditionBuilder, conditions
from .contract import Contract, with_contract
from .groups import ConditionGroup
from .predicates import (
    Patterns,
    between,
    contains_text,
    does_not_have,
    has_all,
    has_count_in_range,
    has_unique_elements,
    is_not_blank,
    is_not_empty,
    is_not_none,
    matches_pattern,
)


logger = logging.getLogger(__name__)


class OrderStatus(Enum):
    CREATED = "created"
    APPROVED = "approved"
    CANCELLED = "cancelled"


@dataclass
class Order:
    id: int
    amount: int
    items: List[str] = field(default_factory=list)
    status: OrderStatus = OrderStatus.CREATED


@dataclass
class Customer:
    id: int
    name: str
    email: str
    phone: str = ""


MIN_ORDER_AMOUNT = 1
MAX_ORDER_AMOUNT = 10_000
REQUIRED_ITEMS = ("A", "B")
FORBIDDEN_ITEM = "C"


class CommonCustomerConditions(ConditionGroup[Customer]):
    """Rules every order-placing customer must satisfy."""

    def apply_to(self, builder: ConditionBuilder, target: Customer) -> None:
        builder.quick_fix(
            "customer email must be well-formed",
            "use an address like name@example.com",
            code="CUSTOMER_EMAIL",
        ).means(lambda: matches_pattern(target.email, Patterns.EMAIL))
        builder.means("customer name must contain 'A'", lambda: contains_text(target.name, "A", ignore_case=True))
        builder.means_any_of(
            "customer must be reachable",
            lambda group: (group
                .means("email present", lambda: is_not_blank(target.email))
                .means("phone present", lambda: is_not_blank(target.phone))),
            remediation="add an email address or a phone number",
        )


OrderInput = Tuple[Order, Customer]


class ApproveOrderContract(Contract[OrderInput, Order]):
    """Contract for OrderService.approve_order(order, customer)."""

    customer_conditions = CommonCustomerConditions()

    def validate_pre(self, input: OrderInput) -> None:
        order, customer = input

        # Presence gets its own pass: the rules below dereference both
        conditions(lambda c: (c
            .means("order must not be None", lambda: is_not_none(order))
            .means("customer must not be None", lambda: is_not_none(customer))))

        def declare(c: ConditionBuilder) -> None:
            c.means(
                f"amount must be between {MIN_ORDER_AMOUNT} and {MAX_ORDER_AMOUNT}",
                lambda: between(order.amount, MIN_ORDER_AMOUNT, MAX_ORDER_AMOUNT),
                code="ORDER_AMOUNT",
            )
            c.means("items must not be empty", lambda: is_not_empty(order.items))
            c.means("items count must be between 1 and 5", lambda: has_count_in_range(order.items, 1, 5))
            c.means("items must not repeat", lambda: has_unique_elements(order.items))
            c.quick_fix(
                f"items must include {' and '.join(REQUIRED_ITEMS)}",
                f"add the missing items among {', '.join(REQUIRED_ITEMS)}",
            ).means(lambda: has_all(order.items, REQUIRED_ITEMS))
            c.means(f"items must not include {FORBIDDEN_ITEM}", lambda: does_not_have(order.items, FORBIDDEN_ITEM))
            c.may_be("large orders should be reviewed", lambda: order.amount <= 5_000)
            c.apply_group(customer, self.customer_conditions)

        conditions(declare)

    def validate_post(self, input: OrderInput, result: Order) -> None:
        conditions(lambda c: c.means(
            "returned order must be APPROVED",
            lambda: result is not None and result.status is OrderStatus.APPROVED,
            code="ORDER_STATUS",
        ))

    def validate_invariant(self, input: OrderInput, result: Order) -> None:
        order, _ = input
        conditions(lambda c: c.means(
            "order id must not change",
            lambda: result is None or result.id == order.id,
        ))


class OrderService:
    """Order operations guarded by contracts."""

    @with_contract(ApproveOrderContract)
    def approve_order(self, order: Order, customer: Customer) -> Order:
        logger.info(f"[ORDERS] Approving order {order.id} for customer {customer.id}")
        order.status = OrderStatus.APPROVED
        return order


__all__ = [
    "Order",
    "Customer",
    "OrderStatus",
    "CommonCustomerConditions",
    "ApproveOrderContract",
    "OrderService",
]
