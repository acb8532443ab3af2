"""Checkout state machine states."""
from enum import Enum


class CheckoutState(str, Enum):
    """
    Checkout attempt lifecycle.

    Flow:
        idle -> preparing -> awaiting_provider -> success -> idle
                          -> failed -> idle

    - idle: No attempt in flight; start() may begin one
    - preparing: Building the payment request and opening the provider
    - awaiting_provider: Provider is open; waiting for its success callback
    - success: Payment confirmed; cart cleared
    - failed: Provider could not be opened; cart kept for a retry
    """
    IDLE = "idle"
    PREPARING = "preparing"
    AWAITING_PROVIDER = "awaiting_provider"
    SUCCESS = "success"
    FAILED = "failed"


# Transitions the orchestrator is allowed to make
TRANSITIONS: dict[CheckoutState, frozenset[CheckoutState]] = {
    CheckoutState.IDLE: frozenset({CheckoutState.PREPARING}),
    CheckoutState.PREPARING: frozenset({
        CheckoutState.AWAITING_PROVIDER,
        CheckoutState.SUCCESS,
        CheckoutState.FAILED,
    }),
    CheckoutState.AWAITING_PROVIDER: frozenset({CheckoutState.SUCCESS}),
    CheckoutState.SUCCESS: frozenset({CheckoutState.IDLE}),
    CheckoutState.FAILED: frozenset({CheckoutState.IDLE}),
}

# States in which a provider success callback is accepted
OPEN_STATES: frozenset[CheckoutState] = frozenset({
    CheckoutState.PREPARING,
    CheckoutState.AWAITING_PROVIDER,
})
