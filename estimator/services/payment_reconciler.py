"""Payment ledger reconciliation against a project's grand total."""

from datetime import date, datetime, time, timezone
from decimal import Decimal
from typing import Any, Callable, List, Optional

import structlog

from config.errors import CalculationError, ErrorCode
from models.diagnostics import Diagnostics
from models.project_settings import Payment
from models.results import PaymentCounts, PaymentSummary
from utils.numbers import ZERO, format_money, parse_number

logger = structlog.get_logger(__name__)

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def parse_payment_date(value: Any) -> Optional[datetime]:
    """Read a ledger date as an aware UTC datetime.

    Naive values are taken as UTC and a bare date means midnight UTC.
    Numbers are epoch milliseconds. Anything unreadable yields None.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        try:
            return datetime.fromtimestamp(value / 1000, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime.combine(value, time.min)
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return None
    else:
        return None

    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


class PaymentReconciler:
    """Splits a payment ledger into paid, due and overdue amounts."""

    def __init__(self, clock: Optional[Clock] = None):
        """Initialize PaymentReconciler.

        Args:
            clock: Returns the current time; defaults to UTC now.
        """
        self.clock = clock or utc_now

    def reconcile(
        self,
        grand_total: Any,
        payments: List[Optional[Payment]],
        diagnostics: Diagnostics,
        legacy_deposit: Optional[Decimal] = None
    ) -> PaymentSummary:
        """Reconcile payments against a grand total.

        Args:
            grand_total: Project grand total (string, number or Decimal).
            payments: Validated ledger; None marks a malformed entry.
            diagnostics: Caller's collector.
            legacy_deposit: Flat deposit from older projects, applied as a paid
                deposit when the ledger has no deposit entry.

        Returns:
            PaymentSummary; all zeros with an error when the total is unusable.
        """
        try:
            return self._reconcile(grand_total, payments, diagnostics, legacy_deposit)
        except Exception as e:
            logger.error("payment_calculation_failed", error=str(e))
            diagnostics.add_error(
                f"Payment calculation error: {e}",
                ErrorCode.PAYMENT_CALCULATION_ERROR,
                original_error=str(e)
            )
            return PaymentSummary(
                errors=diagnostics.errors,
                warnings=diagnostics.warnings,
            )

    def _reconcile(
        self,
        grand_total: Any,
        payments: List[Optional[Payment]],
        diagnostics: Diagnostics,
        legacy_deposit: Optional[Decimal]
    ) -> PaymentSummary:
        total = self._parse_total(grand_total)
        now = self.clock()
        if now.tzinfo is None:
            now = now.replace(tzinfo=timezone.utc)

        total_paid = ZERO
        overdue = ZERO
        deposit = ZERO
        paid_count = 0
        overdue_count = 0

        for index, payment in enumerate(payments):
            if not isinstance(payment, Payment):
                diagnostics.add_warning(
                    f"Invalid payment at index {index}",
                    ErrorCode.INVALID_PAYMENT,
                    index=index
                )
                continue

            try:
                amount = self._parse_amount(payment, index, diagnostics)
                due = parse_payment_date(payment.due_date)
                is_overdue = not payment.is_paid and due is not None and due < now

                if payment.is_paid:
                    paid_count += 1
                    if amount > 0:
                        total_paid += amount
                        if payment.is_deposit:
                            deposit += amount
                elif is_overdue:
                    overdue_count += 1
                    if amount > 0:
                        overdue += amount
            except Exception as e:
                logger.warning("payment_processing_failed", index=index, error=str(e))
                diagnostics.add_warning(
                    f"Error processing payment {index + 1}: {e}",
                    ErrorCode.PAYMENT_PROCESSING_ERROR,
                    index=index,
                    error=str(e)
                )

        has_deposit_entry = any(isinstance(p, Payment) and p.is_deposit for p in payments)
        if legacy_deposit is not None and legacy_deposit > 0 and not has_deposit_entry:
            logger.debug("legacy_deposit_applied", deposit=str(legacy_deposit))
            total_paid += legacy_deposit
            deposit += legacy_deposit

        total_due = max(ZERO, total - total_paid)

        return PaymentSummary(
            total_paid=format_money(total_paid),
            total_due=format_money(total_due),
            overdue_payments=format_money(overdue),
            grand_total=format_money(total),
            deposit=format_money(deposit),
            errors=diagnostics.errors,
            warnings=diagnostics.warnings,
            summary=PaymentCounts(
                total_payments=len(payments),
                paid_payments=paid_count,
                overdue_payments=overdue_count,
            ),
        )

    @staticmethod
    def _parse_total(grand_total: Any) -> Decimal:
        if grand_total is None or grand_total == "":
            return ZERO
        parsed = parse_number(grand_total)
        if parsed is None:
            raise CalculationError(
                ErrorCode.PAYMENT_CALCULATION_ERROR,
                f"Invalid grand total: {grand_total!r}"
            )
        return parsed

    @staticmethod
    def _parse_amount(payment: Payment, index: int, diagnostics: Diagnostics) -> Decimal:
        if payment.amount is None or payment.amount == "":
            return ZERO
        parsed = parse_number(payment.amount)
        if parsed is None:
            diagnostics.add_warning(
                f"Invalid amount for payment {index + 1}; using 0",
                ErrorCode.INVALID_PAYMENT_AMOUNT,
                index=index,
                amount=repr(payment.amount)
            )
            return ZERO
        return parsed
