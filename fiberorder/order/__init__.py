"""
Order — the state machine and the contract summary it feeds.

Usage:
    from fiberorder import order as O

    machine = O.OrderMachine(policy)
    machine.set_address(address)
    machine.set_step(2)
    machine.select_tariff(tariff, offer=offer, promotions=promotions)
    number = machine.generate_order_number()
    summary = O.summarize(machine.state, machine.policy)
"""

from fiberorder.order._machine import (
    OrderNumberFactory,
    order_number_factory,
    INVALID_PROMO_CODE,
    PROMO_CODE_NOT_FOR_ADDRESS,
    REFERRER_NOT_FOUND,
    OrderMachine,
    can_navigate_to,
)
from fiberorder.order._summary import (
    RouterLine,
    ContractSummary,
    summarize,
)

__all__ = (
    # Machine
    "OrderNumberFactory",
    "order_number_factory",
    "INVALID_PROMO_CODE",
    "PROMO_CODE_NOT_FOR_ADDRESS",
    "REFERRER_NOT_FOUND",
    "OrderMachine",
    "can_navigate_to",
    # Summary
    "RouterLine",
    "ContractSummary",
    "summarize",
)
