"""
User actions on obligations.

Each operation takes the current record and the target month and returns a
MutationResult: record states to add/update/remove plus ledger transaction
requests. Inputs are never modified; callers persist the result. History and
exclusion lists are append-only, so recomputing an operation from the same
inputs yields the same record state.
"""

import uuid
from dataclasses import replace
from datetime import date, datetime
from typing import List

from bills_engine.domain.exceptions import (
    AlreadyPaidError,
    DebtAlreadySettledError,
    NothingToSettleError,
    NotVisibleError,
    ObligationValidationError,
    UnsupportedOperationError,
)
from bills_engine.domain.models import (
    SETTLEMENT_EPSILON_CENTS,
    Debt,
    FixedBill,
    InstallmentPlan,
    LedgerTransactionRequest,
    MutationResult,
    Obligation,
    ObligationKind,
    RecurringObligation,
)
from bills_engine.domain.projection import project, remaining_installments
from bills_engine.utils.date_utils import (
    MONTH_NAMES,
    add_months,
    exclusion_token,
    month_bounds,
    validate_month,
)


def create_obligation(
    kind: ObligationKind | str,
    *,
    description: str,
    amount_cents: int,
    due_day: int,
    category: str = "",
    sub_category: str = "",
    start_date: date | None = None,
    end_date: date | None = None,
    total_installments: int | None = None,
    amount_is_total: bool = False,
    obligation_id: str | None = None,
    today: date | None = None,
) -> MutationResult:
    """
    Validate form input and build a new obligation of the given kind.

    For installment plans entered as a total value (amount_is_total=True) the
    persisted per-installment amount is the total divided by
    total_installments, rounded half up to the cent.

    Raises:
        ObligationValidationError: unknown kind or missing/invalid field
    """
    try:
        kind = ObligationKind(kind)
    except ValueError:
        raise ObligationValidationError(f"Unknown obligation kind: {kind}")

    if amount_cents is None or amount_cents < 0:
        raise ObligationValidationError("amount_cents must be non-negative")
    if total_installments is not None and kind != ObligationKind.INSTALLMENT:
        raise ObligationValidationError(f"total_installments does not apply to {kind.value} obligations")
    if amount_is_total and kind != ObligationKind.INSTALLMENT:
        raise ObligationValidationError(f"amount_is_total does not apply to {kind.value} obligations")
    if end_date is not None and kind != ObligationKind.FIXED:
        raise ObligationValidationError(f"end_date does not apply to {kind.value} obligations")

    common = dict(
        id=obligation_id or str(uuid.uuid4()),
        description=description,
        due_day=due_day,
        category=category,
        sub_category=sub_category,
    )

    if kind == ObligationKind.INSTALLMENT:
        if not total_installments or total_installments < 1:
            raise ObligationValidationError("total_installments is required for installment plans")
        if start_date is None:
            raise ObligationValidationError("start_date is required for installment plans")
        if amount_is_total:
            amount_cents = (2 * amount_cents + total_installments) // (2 * total_installments)
        obligation: Obligation = InstallmentPlan(
            amount_cents=amount_cents,
            start_date=start_date,
            total_installments=total_installments,
            **common,
        )

    elif kind == ObligationKind.DEBT:
        if start_date is None:
            raise ObligationValidationError("start_date is required for debts")
        # a balance at or under the epsilon would be born settled, with no settled_date
        if amount_cents <= SETTLEMENT_EPSILON_CENTS:
            raise ObligationValidationError("amount_cents must be greater than 1 cent for debts")
        obligation = Debt(amount_cents=amount_cents, start_date=start_date, **common)

    else:
        obligation = FixedBill(
            amount_cents=amount_cents,
            start_date=start_date or today or date.today(),
            end_date=end_date,
            **common,
        )

    return MutationResult(added=[obligation])


def pay(
    obligation: Obligation,
    year: int,
    month: int,
    paid_amount_cents: int,
    bank: str,
    method: str,
    now: datetime | None = None,
) -> MutationResult:
    """
    Record the payment of one monthly occurrence.

    The history entry is dated on the due day (capped at 28) at noon of the
    paid month, so it always lands in that month whatever day the payment
    is actually made.

    Raises:
        UnsupportedOperationError: obligation is a debt
        NotVisibleError: no occurrence in that month
        AlreadyPaidError: the month already has a payment
    """
    recurring = _require_recurring(obligation, "pay")
    _require_positive(paid_amount_cents)
    projection = project(recurring, year, month)
    if not projection.visible:
        raise NotVisibleError(f"{recurring.description} has no occurrence in {year}-{month:02d}")
    if projection.is_paid_this_month:
        raise AlreadyPaidError(f"{recurring.description} is already paid for {year}-{month:02d}")

    now = now or datetime.now()
    reference = datetime(year, month, min(recurring.due_day, 28), 12, 0, 0)

    changes = dict(
        payment_history=[*recurring.payment_history, reference],
        last_paid_date=now,
    )
    if isinstance(recurring, InstallmentPlan):
        changes["current_installment"] = recurring.current_installment + 1
        suffix = "(Installment)"
    else:
        suffix = "(Bill)"

    request = _ledger_request(recurring, f"{recurring.description} {suffix}", paid_amount_cents, bank, method, now)
    return MutationResult(updated=[replace(recurring, **changes)], ledger_requests=[request])


def settle_remaining(
    plan: Obligation,
    year: int,
    month: int,
    bank: str,
    method: str,
    total_payoff_cents: int | None = None,
    now: datetime | None = None,
) -> MutationResult:
    """
    Pay off every installment from (year, month) to the end of the plan.

    One ledger request covers the payoff (default: remaining * amount) and one
    day-1 history entry is appended per remaining month, so all of them
    project as paid.

    Raises:
        UnsupportedOperationError: obligation is not an installment plan
        NotVisibleError: no installment falls in that month
        NothingToSettleError: nothing remains open from that month on
    """
    if not isinstance(plan, InstallmentPlan):
        raise UnsupportedOperationError(f"settle_remaining does not apply to {plan.kind.value} obligations")

    projection = project(plan, year, month)
    remaining = remaining_installments(plan, year, month)
    if remaining <= 0:
        raise NothingToSettleError(f"{plan.description} has no installments left after {year}-{month:02d}")
    if not projection.visible:
        raise NotVisibleError(f"{plan.description} has no installment in {year}-{month:02d}")
    if projection.is_paid_this_month:
        raise NothingToSettleError(f"{plan.description} is already paid for {year}-{month:02d}")

    if total_payoff_cents is None:
        total_payoff_cents = remaining * plan.amount_cents
    _require_positive(total_payoff_cents)

    now = now or datetime.now()
    settled_months: List[datetime] = []
    for offset in range(remaining):
        paid_year, paid_month = add_months(year, month, offset)
        settled_months.append(datetime(paid_year, paid_month, 1))

    updated = replace(
        plan,
        payment_history=[*plan.payment_history, *settled_months],
        last_paid_date=now,
    )
    request = _ledger_request(
        plan,
        f"Payoff {plan.description} ({remaining} installments left)",
        total_payoff_cents,
        bank,
        method,
        now,
    )
    return MutationResult(updated=[updated], ledger_requests=[request])


def abate_debt(
    debt: Obligation,
    paid_amount_cents: int,
    bank: str,
    method: str,
    now: datetime | None = None,
) -> MutationResult:
    """
    Reduce a debt's balance by an arbitrary payment.

    The balance never drops below zero; any excess over the balance is not
    tracked. The debt is settled once 1 cent or less remains.

    Raises:
        UnsupportedOperationError: obligation is not a debt
        DebtAlreadySettledError: balance already at zero
    """
    if not isinstance(debt, Debt):
        raise UnsupportedOperationError(f"abate_debt does not apply to {debt.kind.value} obligations")
    if debt.is_settled:
        raise DebtAlreadySettledError(f"{debt.description} is already settled")
    _require_positive(paid_amount_cents)

    now = now or datetime.now()
    new_balance = max(0, debt.current_balance_cents - paid_amount_cents)
    settled = new_balance <= SETTLEMENT_EPSILON_CENTS

    updated = replace(
        debt,
        current_balance_cents=new_balance,
        is_settled=settled,
        settled_date=now if settled else None,
        last_paid_date=now,
    )
    request = _ledger_request(debt, f"{debt.description} (Debt payment)", paid_amount_cents, bank, method, now)
    return MutationResult(updated=[updated], ledger_requests=[request])


def defer_to_next_month(
    obligation: Obligation,
    year: int,
    month: int,
    new_id: str | None = None,
) -> MutationResult:
    """
    Move this month's occurrence to the following month.

    The origin record gets an exclusion for (year, month) and a one-off copy is
    created for next month: a fixed bill bounded to that month by its dates,
    or a single-installment plan.

    Raises:
        UnsupportedOperationError: obligation is a debt
        NotVisibleError: no occurrence in that month
    """
    recurring = _require_recurring(obligation, "defer_to_next_month")
    if not project(recurring, year, month).visible:
        raise NotVisibleError(f"{recurring.description} has no occurrence in {year}-{month:02d}")

    origin = _with_exclusion(recurring, year, month)

    next_year, next_month = add_months(year, month, 1)
    first_day, last_day = month_bounds(next_year, next_month)
    title = f"{recurring.description} (BILL FROM {MONTH_NAMES[month - 1]}/{year})"

    common = dict(
        id=new_id or str(uuid.uuid4()),
        description=title,
        amount_cents=recurring.amount_cents,
        due_day=recurring.due_day,
        category=recurring.category,
        sub_category=recurring.sub_category,
        start_date=first_day,
    )
    if isinstance(recurring, InstallmentPlan):
        copy: Obligation = InstallmentPlan(total_installments=1, **common)
    else:
        copy = FixedBill(end_date=last_day, **common)

    return MutationResult(added=[copy], updated=[origin])


def delete_occurrence(obligation: Obligation, year: int, month: int) -> MutationResult:
    """
    Hide one month's occurrence. There is no way back short of editing the record.

    Raises:
        UnsupportedOperationError: obligation is a debt (delete the record instead)
    """
    recurring = _require_recurring(obligation, "delete_occurrence")
    return MutationResult(updated=[_with_exclusion(recurring, year, month)])


def delete_all(obligation: Obligation) -> MutationResult:
    return MutationResult(removed_ids=[obligation.id])


def _with_exclusion(obligation: RecurringObligation, year: int, month: int) -> RecurringObligation:
    validate_month(year, month)
    token = exclusion_token(year, month)
    if token in obligation.exclusions:
        return replace(obligation, exclusions=list(obligation.exclusions))
    return replace(obligation, exclusions=[*obligation.exclusions, token])


def _require_recurring(obligation: Obligation, operation: str) -> RecurringObligation:
    if not isinstance(obligation, RecurringObligation):
        raise UnsupportedOperationError(f"{operation} does not apply to {obligation.kind.value} obligations")
    return obligation


def _require_positive(amount_cents: int) -> None:
    if amount_cents is None or amount_cents <= 0:
        raise ObligationValidationError("payment amount must be positive")


def _ledger_request(
    obligation: Obligation,
    description: str,
    amount_cents: int,
    bank: str,
    method: str,
    now: datetime,
) -> LedgerTransactionRequest:
    return LedgerTransactionRequest(
        description=description,
        amount_cents=amount_cents,
        date=now,
        category=obligation.category,
        sub_category=obligation.sub_category,
        bank=bank,
        payment_method=method,
    )
