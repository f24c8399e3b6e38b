# services/profile-service/src/apps/core/payments/gateways.py
"""
Payment Gateways

Payout transfers for payroll records. The active backend is selected by
``settings.PAYMENT_GATEWAY['BACKEND']``.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from functools import lru_cache
from typing import Any, Dict, List, Optional

import stripe
from django.conf import settings
from django.utils import timezone
from django.utils.module_loading import import_string

logger = logging.getLogger(__name__)


class PaymentGatewayError(Exception):
    """Raised when the gateway rejects or fails a transfer."""
    pass


@dataclass(frozen=True)
class TransferRequest:
    amount: Decimal
    currency: str
    reference: str
    payment_method: str
    attempt: int = 1
    destination: str = ''
    description: str = ''
    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def idempotency_key(self) -> str:
        """Stable for one attempt, new after a failed one."""
        return f"payroll-{self.reference}-{self.attempt}"


@dataclass(frozen=True)
class TransferResult:
    transaction_id: str
    processed_at: datetime
    status: str = 'completed'


class PaymentGateway(ABC):
    """Interface of a payout gateway."""

    @abstractmethod
    def transfer(self, request: TransferRequest) -> TransferResult:
        """Send ``request.amount`` to the payee or raise ``PaymentGatewayError``."""


class StripePaymentGateway(PaymentGateway):
    """Payouts through the Stripe Transfers API to connected accounts."""

    def __init__(self, api_key: Optional[str] = None):
        self.api_key = api_key or settings.STRIPE_SECRET_KEY

    def transfer(self, request: TransferRequest) -> TransferResult:
        if not request.destination:
            raise PaymentGatewayError("No connected payout account configured")

        stripe.api_key = self.api_key

        # Convert to cents
        amount_cents = int(request.amount * 100)

        try:
            transfer = stripe.Transfer.create(
                amount=amount_cents,
                currency=request.currency.lower(),
                destination=request.destination,
                description=request.description or None,
                transfer_group=request.reference,
                metadata={**request.metadata, 'payroll_id': request.reference},
                idempotency_key=request.idempotency_key,
            )
        except stripe.StripeError as e:
            logger.error(
                f"Stripe transfer failed: {e}",
                extra={'payroll_id': request.reference}
            )
            raise PaymentGatewayError(f"Stripe transfer failed: {e.user_message or e}")

        logger.info(
            f"Stripe transfer {transfer.id} created",
            extra={'payroll_id': request.reference, 'amount': str(request.amount)}
        )
        return TransferResult(
            transaction_id=transfer.id,
            processed_at=timezone.now(),
        )


class InMemoryPaymentGateway(PaymentGateway):
    """
    Deterministic gateway that records transfers in memory.

    Set ``fail_with`` to a reason to make the following transfers fail.
    """

    def __init__(self):
        self.transfers: List[TransferRequest] = []
        self.fail_with: Optional[str] = None

    def transfer(self, request: TransferRequest) -> TransferResult:
        if self.fail_with:
            raise PaymentGatewayError(self.fail_with)

        self.transfers.append(request)
        return TransferResult(
            transaction_id=f"TXN-{request.reference}-{len(self.transfers)}",
            processed_at=timezone.now(),
        )

    def reset(self):
        self.transfers.clear()
        self.fail_with = None


@lru_cache(maxsize=None)
def _load_gateway(backend: str) -> PaymentGateway:
    logger.info(f"Loading payment gateway {backend}")
    return import_string(backend)()


def get_payment_gateway() -> PaymentGateway:
    """Gateway instance for the configured backend."""
    return _load_gateway(settings.PAYMENT_GATEWAY['BACKEND'])
