# contract_kernel/__main__.py
"""
Contract Kernel - demo entry point.

    python -m contract_kernel

Runs the order-approval contract once with valid input and once with
invalid input, and prints the outcome of each invocation.
"""

import logging

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel

from .config import configure_logging
from .failures import AggregateFailure
from .order_contracts import Customer, Order, OrderService


logger = logging.getLogger(__name__)

console = Console()


def run_case(service: OrderService, title: str, order: Order, customer: Customer) -> bool:
    try:
        approved = service.approve_order(order, customer)
    except AggregateFailure as failure:
        console.print(Panel(escape(str(failure)), title=f"{title}: rejected", border_style="red"))
        return False

    console.print(Panel(
        f"Order {approved.id} is {approved.status.value}",
        title=f"{title}: accepted",
        border_style="green",
    ))
    return True


def main() -> int:
    configure_logging()
    service = OrderService()

    ok = run_case(
        service,
        "Valid order",
        Order(id=1, amount=3000, items=["A", "B"]),
        Customer(id=3, name="Alice", email="alice@example.com"),
    )
    rejected = not run_case(
        service,
        "Invalid order",
        Order(id=2, amount=-10),
        Customer(id=2, name="", email=""),
    )
    return 0 if ok and rejected else 1


if __name__ == "__main__":
    raise SystemExit(main())
