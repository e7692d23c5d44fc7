from typing import List

import attrs


@attrs.frozen
class SeatTransitionResult:
    ok: bool
    conflicting_positions: List[int] = attrs.field(factory=list)

    @classmethod
    def success(cls) -> 'SeatTransitionResult':
        return cls(ok=True)

    @classmethod
    def conflict(cls, positions: List[int]) -> 'SeatTransitionResult':
        return cls(ok=False, conflicting_positions=sorted(positions))
