import httpx
import orjson
import pytest

from src.platform.exception.exceptions import OtpDeliveryError
from src.service.checkout.driven_adapter.otp.http_sms_otp_transport import HttpSmsOtpTransport
from src.service.checkout.driven_adapter.otp.logging_otp_transport import LoggingOtpTransport


@pytest.mark.unit
class TestHttpSmsOtpTransport:
    @pytest.mark.asyncio
    async def test_posts_code_to_gateway(self):
        captured: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            captured.append(request)
            return httpx.Response(200, json={'queued': True})

        transport = HttpSmsOtpTransport(
            gateway_url='https://sms.test/send',
            api_key='sms-key',
            sender_id='COACH',
            transport=httpx.MockTransport(handler),
        )

        await transport.send(contact='+2348031234567', code='123456')

        body = orjson.loads(captured[0].content)
        assert body['to'] == '+2348031234567'
        assert body['from'] == 'COACH'
        assert '123456' in body['message']
        assert captured[0].headers['Authorization'] == 'Bearer sms-key'

    @pytest.mark.asyncio
    async def test_gateway_failure_is_delivery_error(self):
        transport = HttpSmsOtpTransport(
            gateway_url='https://sms.test/send',
            api_key='sms-key',
            sender_id='COACH',
            transport=httpx.MockTransport(lambda request: httpx.Response(500)),
        )

        with pytest.raises(OtpDeliveryError):
            await transport.send(contact='+2348031234567', code='123456')

    @pytest.mark.asyncio
    async def test_unconfigured_gateway_cannot_deliver(self):
        transport = HttpSmsOtpTransport(gateway_url='', api_key='sms-key', sender_id='COACH')

        with pytest.raises(OtpDeliveryError):
            await transport.send(contact='+2348031234567', code='123456')


@pytest.mark.unit
class TestLoggingOtpTransport:
    @pytest.mark.asyncio
    async def test_records_sent_codes(self):
        transport = LoggingOtpTransport()

        await transport.send(contact='ada@passenger.test', code='654321')

        assert transport.sent[0]['contact'] == 'ada@passenger.test'
        assert transport.sent[0]['code'] == '654321'
