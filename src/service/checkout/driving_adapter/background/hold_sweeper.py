import anyio
from anyio.abc import TaskGroup

from src.platform.logging.loguru_io import Logger
from src.service.checkout.app.command.sweep_expired_holds_use_case import (
    SweepExpiredHoldsUseCase,
)


class HoldSweeper:
    """Periodically expire lapsed holds so their seats return to sale."""

    def __init__(self, *, use_case: SweepExpiredHoldsUseCase, interval_seconds: float) -> None:
        self.use_case = use_case
        self.interval_seconds = interval_seconds

    async def start(self, *, task_group: TaskGroup) -> None:
        task_group.start_soon(self._sweep_loop)
        Logger.base.info(f'⏰ [SWEEP] Hold sweeper started (every {self.interval_seconds}s)')

    async def run_once(self) -> int:
        return await self.use_case.sweep()

    async def _sweep_loop(self) -> None:
        while True:
            try:
                await self.run_once()
            except Exception:
                # Keep sweeping; the next pass retries whatever this one missed
                Logger.base.exception('❌ [SWEEP] Sweep pass failed')
            await anyio.sleep(self.interval_seconds)
