from datetime import datetime
from typing import Optional

import attrs


@attrs.frozen
class PaymentIntent:
    """One hosted-checkout request; every retry gets its own reference."""

    reference: str
    session_id: str
    amount: int
    authorization_url: str = ''
    created_at: Optional[datetime] = None
