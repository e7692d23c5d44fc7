"""
Wire Modules Configuration

Defines the modules that need dependency injection wiring.
Shared between production and test environments.
"""

from types import ModuleType

from src.service.checkout.app.command import (
    attach_identity_use_case,
    cancel_booking_use_case,
    cancel_checkout_use_case,
    extend_hold_use_case,
    open_checkout_use_case,
    reconcile_payment_use_case,
    request_hold_use_case,
    request_payment_use_case,
    resolve_escalation_use_case,
    send_code_use_case,
    verify_code_use_case,
)
from src.service.checkout.app.query import (
    get_checkout_use_case,
    list_bookings_use_case,
    list_escalations_use_case,
)
from src.service.checkout.driving_adapter.http_controller import (
    checkout_controller,
    identity_controller,
    payment_controller,
)
from src.service.inventory.app.command import (
    create_trip_use_case,
    delete_trip_use_case,
    update_trip_use_case,
)
from src.service.inventory.app.query import get_trip_use_case, search_trips_use_case
from src.service.operator.app.command import create_operator_use_case, login_operator_use_case
from src.service.operator.driving_adapter.http_controller import operator_controller
from src.service.operator.driving_adapter.http_controller.auth import role_auth


WIRE_MODULES: list[ModuleType] = [
    # Trip catalog
    create_trip_use_case,
    update_trip_use_case,
    delete_trip_use_case,
    get_trip_use_case,
    search_trips_use_case,
    # Checkout
    open_checkout_use_case,
    request_hold_use_case,
    attach_identity_use_case,
    extend_hold_use_case,
    request_payment_use_case,
    cancel_checkout_use_case,
    get_checkout_use_case,
    checkout_controller,
    # Identity verification
    send_code_use_case,
    verify_code_use_case,
    identity_controller,
    # Payment reconciliation
    reconcile_payment_use_case,
    payment_controller,
    # Operator console
    cancel_booking_use_case,
    resolve_escalation_use_case,
    list_bookings_use_case,
    list_escalations_use_case,
    create_operator_use_case,
    login_operator_use_case,
    operator_controller,
    role_auth,
]
