"""Payment request and result models exchanged with providers."""
from typing import Awaitable, Callable, Optional

from pydantic import BaseModel, ConfigDict, Field

from storefront.config import Prefill


class PaymentRequest(BaseModel):
    """What the provider is asked to collect. amount is in paise."""
    model_config = ConfigDict(frozen=True)

    provider_key: str
    amount: int = Field(gt=0)
    currency: str = "INR"
    display_name: str
    description: str
    image: str = ""
    prefill: Prefill = Prefill()
    notes: dict[str, str] = Field(default_factory=dict)
    theme_color: str = "#111827"
    receipt: str = Field(description="Checkout attempt id, echoed back by the provider")

    def to_checkout_options(self, order_id: Optional[str] = None) -> dict:
        """Options object for the Razorpay Checkout widget."""
        options = {
            "key": self.provider_key,
            "amount": self.amount,
            "currency": self.currency,
            "name": self.display_name,
            "description": self.description,
            "image": self.image,
            "prefill": self.prefill.model_dump(),
            "notes": dict(self.notes),
            "theme": {"color": self.theme_color},
        }
        if order_id:
            options["order_id"] = order_id
        return options


class PaymentResult(BaseModel):
    """Delivered to the success continuation."""
    payment_id: str
    order_id: Optional[str] = None


class CheckoutHandle(BaseModel):
    """Returned by a provider once it is open."""
    order_id: str
    options: dict


SuccessCallback = Callable[[PaymentResult], Awaitable[None]]
