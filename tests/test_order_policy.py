from datetime import date

import pytest

from app.core.exceptions import ForbiddenException, ValidationException
from app.domain.policies.order_mutation import (
    OrderSnapshot,
    authorize_order_update,
    build_order,
    empty_payment,
    merge_payment,
)
from app.domain.roles import Requester, Role

TODAY = date(2026, 10, 19)

ADMIN = Requester(id="admin-1", role=Role.ADMIN)
MANAGER = Requester(id="manager-1", role=Role.MANAGER)
OTHER_MANAGER = Requester(id="manager-2", role=Role.MANAGER)
AGENT = Requester(id="agent-1", role=Role.AGENT, manager_id="manager-1")
OTHER_AGENT = Requester(id="agent-2", role=Role.AGENT, manager_id="manager-1")


def payment(**fields):
    record = empty_payment()
    record.update(fields)
    return record


def snapshot(deposit=None, balance=None, **values):
    base = {
        "official_price": 1000,
        "tax_clean": 50,
        "discount": 100,
        "total_price": 950,
        "status_order": "pending",
        "client_name": "John Smith",
        "payments": {
            "deposit": deposit or payment(amount=300),
            "balance": balance or payment(amount=650),
        },
    }
    base.update(values)
    return OrderSnapshot(agent_id="agent-1", agent_manager_id="manager-1", values=base)


def new_order(data, requester=AGENT):
    return build_order(data, agent_id="agent-1", agent_name="Andy Agent", requester=requester, today=TODAY)


class TestBuildOrder:
    def test_total_is_derived_from_prices(self):
        values = new_order({"official_price": 1000, "tax_clean": 50, "discount": 100})
        assert values["total_price"] == 950

    def test_missing_tax_and_discount_count_as_zero(self):
        assert new_order({"official_price": 400})["total_price"] == 400

    def test_explicit_nonzero_total_is_kept(self):
        values = new_order({"official_price": 1000, "tax_clean": 50, "total_price": 1200})
        assert values["total_price"] == 1200

    def test_explicit_zero_total_is_recomputed(self):
        values = new_order({"official_price": 1000, "discount": 100, "total_price": 0})
        assert values["total_price"] == 900

    def test_payment_status_defaults_to_unpaid(self):
        payments = new_order({"official_price": 100})["payments"]
        assert payments["deposit"]["status"] == "unpaid"
        assert payments["balance"] == empty_payment()

    def test_explicit_status_is_preserved_and_stamped(self):
        values = new_order({"official_price": 100, "payments": {"deposit": {"amount": 50, "status": "paid"}}})
        deposit = values["payments"]["deposit"]
        assert deposit["status"] == "paid"
        assert deposit["paid_date"] == "2026-10-19"

    def test_existing_paid_date_is_kept(self):
        values = new_order({
            "official_price": 100,
            "payments": {"deposit": {"status": "paid", "paid_date": date(2026, 9, 1)}},
        })
        assert values["payments"]["deposit"]["paid_date"] == "2026-09-01"

    def test_agent_cannot_create_approved_order(self):
        with pytest.raises(ValidationException):
            new_order({"official_price": 100, "status_order": "approved"})

    def test_manager_may_create_approved_order(self):
        assert new_order({"official_price": 100, "status_order": "approved"}, MANAGER)["status_order"] == "approved"

    def test_owner_fields_are_set(self):
        values = new_order({"official_price": 100, "agent_id": "someone-else"})
        assert values["agent_id"] == "agent-1"
        assert values["agent_name"] == "Andy Agent"


class TestScope:
    def test_agent_on_own_order(self):
        mutation = authorize_order_update(AGENT, snapshot(), {"client_name": "Jane"}, TODAY)
        assert mutation.values == {"client_name": "Jane"}
        assert mutation.changed == {"client_name"}

    def test_agent_on_foreign_order(self):
        with pytest.raises(ForbiddenException):
            authorize_order_update(OTHER_AGENT, snapshot(), {"client_name": "Jane"}, TODAY)

    def test_manager_of_other_agents(self):
        with pytest.raises(ForbiddenException):
            authorize_order_update(OTHER_MANAGER, snapshot(), {"client_name": "Jane"}, TODAY)

    def test_admin_is_unrestricted(self):
        mutation = authorize_order_update(ADMIN, snapshot(), {"status_order": "approved"}, TODAY)
        assert mutation.values == {"status_order": "approved"}

    def test_agent_id_is_never_applied(self):
        mutation = authorize_order_update(MANAGER, snapshot(), {"agent_id": "agent-2"}, TODAY)
        assert mutation.values == {}
        assert mutation.changed == frozenset()


class TestAllowList:
    def test_agent_cannot_change_order_status(self):
        with pytest.raises(ValidationException) as exc:
            authorize_order_update(AGENT, snapshot(), {"status_order": "approved"}, TODAY)
        assert exc.value.message == "Agents cannot change order status"
        assert exc.value.status_code == 422

    def test_agent_cannot_change_payment_status(self):
        with pytest.raises(ValidationException) as exc:
            authorize_order_update(AGENT, snapshot(), {"payments": {"deposit": {"status": "paid"}}}, TODAY)
        assert exc.value.details == {"fields": ["payments.deposit.status"]}

    def test_agent_cannot_set_paid_date(self):
        with pytest.raises(ValidationException):
            authorize_order_update(AGENT, snapshot(), {"payments": {"balance": {"paid_date": TODAY}}}, TODAY)

    def test_agent_resubmitting_current_status_is_accepted(self):
        update = {"status_order": "pending", "payments": {"deposit": {"status": "unpaid", "amount": 350}}}
        mutation = authorize_order_update(AGENT, snapshot(), update, TODAY)
        assert mutation.changed == {"payments.deposit.amount"}
        assert mutation.values["payments"]["deposit"]["amount"] == 350


class TestPaidAmountLock:
    def test_agent_blocked_on_paid_deposit(self):
        order = snapshot(deposit=payment(amount=300, status="paid", paid_date="2026-10-01"))
        with pytest.raises(ForbiddenException) as exc:
            authorize_order_update(AGENT, order, {"payments": {"deposit": {"amount": 999}}}, TODAY)
        assert exc.value.message == "Cannot modify deposit amount when deposit status is paid"

    def test_lock_message_names_the_balance(self):
        order = snapshot(balance=payment(amount=650, status="paid", paid_date="2026-10-01"))
        with pytest.raises(ForbiddenException) as exc:
            authorize_order_update(AGENT, order, {"payments": {"balance": {"amount": 1}}}, TODAY)
        assert "balance" in exc.value.message

    def test_agent_may_change_unpaid_amount_next_to_paid_one(self):
        order = snapshot(deposit=payment(amount=300, status="paid", paid_date="2026-10-01"))
        mutation = authorize_order_update(AGENT, order, {"payments": {"balance": {"amount": 700}}}, TODAY)
        assert mutation.values["payments"]["balance"]["amount"] == 700
        assert mutation.values["payments"]["deposit"]["amount"] == 300

    def test_same_amount_is_not_a_change(self):
        order = snapshot(deposit=payment(amount=300, status="paid", paid_date="2026-10-01"))
        mutation = authorize_order_update(AGENT, order, {"payments": {"deposit": {"amount": 300}}}, TODAY)
        assert mutation.changed == frozenset()

    @pytest.mark.parametrize("requester", [MANAGER, ADMIN])
    def test_supervisors_are_never_locked(self, requester):
        order = snapshot(deposit=payment(amount=300, status="paid", paid_date="2026-10-01"))
        mutation = authorize_order_update(requester, order, {"payments": {"deposit": {"amount": 999}}}, TODAY)
        assert mutation.values["payments"]["deposit"]["amount"] == 999
        assert mutation.values["payments"]["deposit"]["status"] == "paid"


class TestPaidDate:
    def test_stamped_when_marked_paid(self):
        mutation = authorize_order_update(MANAGER, snapshot(), {"payments": {"deposit": {"status": "paid"}}}, TODAY)
        deposit = mutation.values["payments"]["deposit"]
        assert deposit["status"] == "paid"
        assert deposit["paid_date"] == "2026-10-19"
        assert {"payments.deposit.status", "payments.deposit.paid_date"} <= mutation.changed

    def test_existing_paid_date_is_not_overwritten(self):
        order = snapshot(deposit=payment(amount=300, paid_date="2026-09-30"))
        mutation = authorize_order_update(MANAGER, order, {"payments": {"deposit": {"status": "paid"}}}, TODAY)
        assert mutation.values["payments"]["deposit"]["paid_date"] == "2026-09-30"

    def test_explicit_paid_date_wins(self):
        update = {"payments": {"deposit": {"status": "paid", "paid_date": date(2026, 10, 2)}}}
        mutation = authorize_order_update(MANAGER, snapshot(), update, TODAY)
        assert mutation.values["payments"]["deposit"]["paid_date"] == "2026-10-02"


class TestTotalRecompute:
    def test_price_change_recomputes_total(self):
        mutation = authorize_order_update(AGENT, snapshot(), {"discount": 200}, TODAY)
        assert mutation.values["total_price"] == 850
        assert mutation.changed == {"discount", "total_price"}

    def test_explicit_total_alone_is_accepted(self):
        mutation = authorize_order_update(AGENT, snapshot(), {"total_price": 900}, TODAY)
        assert mutation.values == {"total_price": 900}

    def test_price_fields_override_explicit_total(self):
        mutation = authorize_order_update(AGENT, snapshot(), {"official_price": 2000, "total_price": 5}, TODAY)
        assert mutation.values["total_price"] == 1950


class TestStayDates:
    def test_check_out_before_check_in_is_rejected(self):
        order = snapshot(check_in=date(2026, 7, 1), check_out=date(2026, 7, 8))
        with pytest.raises(ValidationException) as exc:
            authorize_order_update(AGENT, order, {"check_out": date(2026, 6, 1)}, TODAY)
        assert exc.value.status_code == 422
        assert exc.value.details[0]["field"] == "checkOut"

    def test_check_in_moved_past_check_out_is_rejected(self):
        order = snapshot(check_in=date(2026, 7, 1), check_out=date(2026, 7, 8))
        with pytest.raises(ValidationException):
            authorize_order_update(MANAGER, order, {"check_in": date(2026, 7, 8)}, TODAY)

    def test_moving_both_dates_together(self):
        order = snapshot(check_in=date(2026, 7, 1), check_out=date(2026, 7, 8))
        update = {"check_in": date(2026, 8, 1), "check_out": date(2026, 8, 5)}
        mutation = authorize_order_update(AGENT, order, update, TODAY)
        assert mutation.changed == {"check_in", "check_out"}


def test_merge_payment_leaves_current_untouched():
    current = payment(amount=300, payment_methods=["cash"])
    merged = merge_payment(current, {"amount": 400, "due_date": date(2026, 11, 1), "payment_methods": ["card"]})
    assert current == payment(amount=300, payment_methods=["cash"])
    assert merged["amount"] == 400
    assert merged["due_date"] == "2026-11-01"
    assert merged["payment_methods"] == ["card"]
    assert merged["status"] == "unpaid"
