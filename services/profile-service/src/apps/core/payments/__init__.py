# services/profile-service/src/apps/core/payments/__init__.py
"""
Payment gateways used to pay out payroll records.
"""

from .gateways import (
    PaymentGateway,
    PaymentGatewayError,
    TransferRequest,
    TransferResult,
    StripePaymentGateway,
    InMemoryPaymentGateway,
    get_payment_gateway,
)

__all__ = [
    'PaymentGateway',
    'PaymentGatewayError',
    'TransferRequest',
    'TransferResult',
    'StripePaymentGateway',
    'InMemoryPaymentGateway',
    'get_payment_gateway',
]
