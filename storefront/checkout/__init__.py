"""Checkout package: state machine, payment providers and orchestrator."""
from .constants import CheckoutState
from .models import CheckoutHandle, PaymentRequest, PaymentResult
from .orchestrator import CheckoutOrchestrator
from .providers import DemoProvider, PaymentProvider, RazorpayProvider

__all__ = [
    "CheckoutState",
    "CheckoutHandle",
    "PaymentRequest",
    "PaymentResult",
    "CheckoutOrchestrator",
    "DemoProvider",
    "PaymentProvider",
    "RazorpayProvider",
]
