from datetime import datetime, timezone
from typing import List

from src.platform.logging.loguru_io import Logger
from src.service.checkout.app.interface.i_otp_transport import IOtpTransport


class LoggingOtpTransport(IOtpTransport):
    """Development transport: writes codes to the log instead of sending them."""

    def __init__(self) -> None:
        self.sent: List[dict] = []  # kept for tests and local debugging

    @Logger.io
    async def send(self, *, contact: str, code: str) -> None:
        self.sent.append({'contact': contact, 'code': code, 'sent_at': datetime.now(timezone.utc)})
        Logger.base.info(f'📨 [OTP] (log transport) code for {contact}: {code}')
