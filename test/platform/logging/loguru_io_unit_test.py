from typing import Generator

import pytest

from src.platform.exception.exceptions import ConflictError
from src.platform.logging.loguru_io import Logger
from src.platform.logging.loguru_io_config import MASK
from src.platform.logging.loguru_io_utils import (
    mask_sensitive,
    normalize_args_kwargs,
    truncate_content,
)


@pytest.mark.unit
class TestMaskSensitive:
    def test_masks_keyword_assignment_in_repr(self):
        # Act
        masked = mask_sensitive("Operator(email='a@b.test', password='hunter2')")

        # Assert
        assert 'hunter2' not in masked
        assert f"password='{MASK}'" in masked
        assert "email='a@b.test'" in masked

    def test_masks_dict_style_values(self):
        masked = mask_sensitive({'contact': '+2348039876540', 'code': '123456'})

        assert '123456' not in masked
        assert '+2348039876540' in masked

    def test_keyword_inside_longer_identifier_is_left_alone(self):
        text = "Trip(trip_code='LAG-ABU-20301220-AB12')"

        assert mask_sensitive(text) == text

    def test_numbers_and_none_pass_through(self):
        assert mask_sensitive(42) == 42
        assert mask_sensitive(None) is None

    def test_truncates_long_strings(self):
        truncated = truncate_content('x' * 600)

        assert truncated.startswith('x' * 500)
        assert truncated.endswith('(+100 chars)')


@pytest.mark.unit
class TestNormalizeArgsKwargs:
    def test_drops_keywords_the_function_does_not_accept(self):
        def handler(a, *, b):
            return a, b

        args, kwargs = normalize_args_kwargs(handler, 1, b=2, extra=3)

        assert args == (1,)
        assert kwargs == {'b': 2}


@pytest.mark.unit
class TestLoggerIo:
    def test_sync_function_returns_value(self):
        @Logger.io
        def add(a: int, b: int) -> int:
            return a + b

        assert add(2, 3) == 5

    @pytest.mark.asyncio
    async def test_async_function_reraises_domain_errors(self):
        @Logger.io
        async def fail() -> None:
            raise ConflictError('taken')

        with pytest.raises(ConflictError, match='taken'):
            await fail()

    def test_swallows_when_reraise_disabled(self):
        @Logger.io(reraise=False)
        def fail() -> int:
            raise ValueError('boom')

        assert fail() is None

    def test_generator_is_wrapped_and_iterates(self):
        @Logger.io
        def countdown(n: int) -> Generator[int, None, None]:
            while n > 0:
                yield n
                n -= 1

        assert list(countdown(3)) == [3, 2, 1]

    def test_generator_send_is_forwarded(self):
        @Logger.io
        def echo() -> Generator[str, str, None]:
            received = yield 'ready'
            while True:
                received = yield f'got {received}'

        gen = echo()
        assert next(gen) == 'ready'
        assert gen.send('seat 3') == 'got seat 3'
        gen.close()
