from typing import Optional

import httpx

from src.platform.config.core_setting import settings
from src.platform.exception.exceptions import OtpDeliveryError
from src.platform.logging.loguru_io import Logger
from src.service.checkout.app.interface.i_otp_transport import IOtpTransport


class HttpSmsOtpTransport(IOtpTransport):
    """Posts the code to an SMS gateway; any gateway failure is a delivery failure."""

    def __init__(
        self,
        *,
        gateway_url: Optional[str] = None,
        api_key: Optional[str] = None,
        sender_id: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.gateway_url = gateway_url or settings.SMS_GATEWAY_URL
        self.api_key = api_key or settings.SMS_GATEWAY_API_KEY.get_secret_value()
        self.sender_id = sender_id or settings.SMS_SENDER_ID
        self.transport = transport

    @Logger.io
    async def send(self, *, contact: str, code: str) -> None:
        if not self.gateway_url:
            raise OtpDeliveryError()
        message = f'Your coach booking verification code is {code}'
        try:
            async with httpx.AsyncClient(timeout=10.0, transport=self.transport) as client:
                response = await client.post(
                    self.gateway_url,
                    headers={'Authorization': f'Bearer {self.api_key}'},
                    json={'to': contact, 'from': self.sender_id, 'message': message},
                )
                response.raise_for_status()
        except httpx.HTTPError as e:
            Logger.base.error(f'📵 [OTP] SMS gateway error for {contact}: {e!r}')
            raise OtpDeliveryError() from e
