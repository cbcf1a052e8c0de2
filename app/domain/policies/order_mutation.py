"""
Order mutation rules.

`build_order` derives a complete set of column values for a new order, and
`authorize_order_update` decides what a requester may change on an existing
one. Both are pure: they take plain mappings and return new values, leaving
persistence to the caller.

Update rules, in order of precedence:

1. Scope: agents touch only their own orders, managers only orders of their
   agents, admins anything.
2. Allow-list: statusOrder and payments.*.status / payments.*.paidDate belong to
   managers and admins. An agent submitting a different value is rejected (422).
3. Paid-amount lock: once a payment is paid, an agent may not change its amount.
4. A payment that becomes paid without a paidDate gets today's date.
5. totalPrice follows officialPrice + taxClean - discount whenever one of them
   is part of the update.

A date change must keep checkOut after checkIn.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Dict, FrozenSet, List, Mapping, Optional

from app.core.exceptions import ForbiddenException, ValidationException
from app.domain.policies.visibility import can_see_order
from app.domain.roles import Requester

PAID = "paid"
UNPAID = "unpaid"
PAYMENT_STATUSES = (UNPAID, PAID)
PAYMENT_KINDS = ("deposit", "balance")

PENDING = "pending"
APPROVED = "approved"
REJECTED = "rejected"
ORDER_STATUSES = (PENDING, APPROVED, REJECTED)

PRICE_FIELDS = ("official_price", "tax_clean", "discount")

DESCRIPTIVE_FIELDS = frozenset({
    "agent_name",
    "check_in",
    "check_out",
    "nights",
    "country_travel",
    "city_travel",
    "property_name",
    "property_number",
    "reservation_number",
    "client_name",
    "client_phone",
    "client_email",
    "client_country",
    "client_document_number",
    "guests",
    "official_price",
    "tax_clean",
    "discount",
    "total_price",
    "bank_account",
})

# Sub-fields of a payment record that only managers and admins may set
SUPERVISOR_PAYMENT_FIELDS = ("status", "paid_date")
PAYMENT_FIELDS = ("amount", "status", "due_date", "paid_date", "payment_methods")

UPDATABLE_FIELDS = DESCRIPTIVE_FIELDS | {"payments", "status_order"}


@dataclass(frozen=True)
class OrderSnapshot:
    """Read-only view of a stored order plus the manager of its agent."""

    agent_id: str
    agent_manager_id: Optional[str]
    values: Mapping[str, Any]

    @property
    def payments(self) -> Mapping[str, Any]:
        return self.values.get("payments") or {}


@dataclass(frozen=True)
class OrderMutation:
    values: Dict[str, Any] = field(default_factory=dict)
    changed: FrozenSet[str] = frozenset()


def _iso(value: Any) -> Any:
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    return value


def empty_payment() -> Dict[str, Any]:
    return {
        "amount": 0,
        "status": UNPAID,
        "due_date": None,
        "paid_date": None,
        "payment_methods": [],
    }


def merge_payment(current: Optional[Mapping[str, Any]], patch: Mapping[str, Any]) -> Dict[str, Any]:
    """Overlay the fields present in `patch` onto a copy of `current`."""
    merged = empty_payment()
    merged.update(current or {})
    for key in PAYMENT_FIELDS:
        if key in patch:
            value = patch[key]
            if key == "status" and value is None:
                continue
            if key == "payment_methods":
                value = list(value or [])
            merged[key] = _iso(value)
    return merged


def stamp_paid_date(record: Mapping[str, Any], today: date) -> Dict[str, Any]:
    """Set paid_date to today for a paid record that has none."""
    stamped = dict(record)
    if stamped.get("status") == PAID and not stamped.get("paid_date"):
        stamped["paid_date"] = today.isoformat()
    return stamped


def compute_total(official_price: Any, tax_clean: Any, discount: Any) -> float:
    return (official_price or 0) + (tax_clean or 0) - (discount or 0)


def _restricted_changes(current: Mapping[str, Any], update: Mapping[str, Any]) -> List[str]:
    """Supervisor-only fields that `update` would actually change."""
    fields = []
    if "status_order" in update and update["status_order"] != current.get("status_order"):
        fields.append("statusOrder")

    current_payments = current.get("payments") or {}
    for kind, patch in (update.get("payments") or {}).items():
        if patch is None:
            continue
        existing = current_payments.get(kind) or empty_payment()
        for key in SUPERVISOR_PAYMENT_FIELDS:
            if key in patch and _iso(patch[key]) != existing.get(key):
                fields.append(f"payments.{kind}.{'paidDate' if key == 'paid_date' else key}")
    return fields


def authorize_order_update(
    requester: Requester,
    order: OrderSnapshot,
    update: Mapping[str, Any],
    today: date,
) -> OrderMutation:
    """Validate `update` against the order rules and return the accepted changes."""
    if not can_see_order(requester, order.agent_id, order.agent_manager_id):
        raise ForbiddenException("You are not authorized to modify this order")

    # agentId and unknown keys are never part of an update
    update = {key: value for key, value in update.items() if key in UPDATABLE_FIELDS}
    current = order.values

    if not requester.is_supervisor:
        restricted = _restricted_changes(current, update)
        if restricted:
            message = (
                "Agents cannot change order status"
                if "statusOrder" in restricted
                else "Agents cannot change payment status"
            )
            raise ValidationException(message, {"fields": restricted})

    if "check_in" in update or "check_out" in update:
        check_in = update.get("check_in", current.get("check_in"))
        check_out = update.get("check_out", current.get("check_out"))
        if check_in and check_out and check_out <= check_in:
            raise ValidationException(
                "Validation failed",
                [{"field": "checkOut", "message": "checkOut must be after checkIn"}],
            )

    values: Dict[str, Any] = {}
    changed = set()

    for key, value in update.items():
        if key == "payments":
            continue
        if value != current.get(key):
            values[key] = value
            changed.add(key)

    payments_patch = update.get("payments") or {}
    if payments_patch:
        current_payments = order.payments
        payments = {kind: dict(current_payments.get(kind) or empty_payment()) for kind in PAYMENT_KINDS}
        for kind in PAYMENT_KINDS:
            patch = payments_patch.get(kind)
            if patch is None:
                continue
            existing = payments[kind]
            if (
                not requester.is_supervisor
                and existing.get("status") == PAID
                and "amount" in patch
                and patch["amount"] != existing.get("amount")
            ):
                raise ForbiddenException(f"Cannot modify {kind} amount when {kind} status is paid")

            merged = merge_payment(existing, patch)
            if "status" in patch:
                merged = stamp_paid_date(merged, today)
            for key in PAYMENT_FIELDS:
                if merged.get(key) != existing.get(key):
                    changed.add(f"payments.{kind}.{key}")
            payments[kind] = merged

        if any(name.startswith("payments.") for name in changed):
            values["payments"] = payments

    if any(key in update for key in PRICE_FIELDS):
        merged_prices = {key: values.get(key, current.get(key)) for key in PRICE_FIELDS}
        total = compute_total(**merged_prices)
        if total != current.get("total_price"):
            values["total_price"] = total
            changed.add("total_price")

    return OrderMutation(values=values, changed=frozenset(changed))


def build_order(
    data: Mapping[str, Any],
    *,
    agent_id: str,
    agent_name: str,
    requester: Requester,
    today: date,
) -> Dict[str, Any]:
    """Derive every column of a new order from the submitted fields."""
    values = {key: value for key, value in data.items() if key in DESCRIPTIVE_FIELDS}

    status_order = data.get("status_order") or PENDING
    if status_order != PENDING and not requester.is_supervisor:
        raise ValidationException("Agents cannot change order status", {"fields": ["statusOrder"]})
    values["status_order"] = status_order

    submitted = data.get("payments") or {}
    payments = {}
    for kind in PAYMENT_KINDS:
        record = merge_payment(empty_payment(), submitted.get(kind) or {})
        payments[kind] = stamp_paid_date(record, today)
    values["payments"] = payments

    if not values.get("total_price"):
        values["total_price"] = compute_total(
            values.get("official_price"), values.get("tax_clean"), values.get("discount")
        )

    values["agent_id"] = agent_id
    values["agent_name"] = values.get("agent_name") or agent_name
    return values
