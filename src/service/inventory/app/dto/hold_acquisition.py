from typing import List, Optional

import attrs

from src.service.inventory.domain.entity.hold_entity import Hold


@attrs.frozen
class HoldAcquisition:
    """Outcome of an acquire: either the new hold or the seats that blocked it."""

    hold: Optional[Hold] = None
    conflicting_positions: List[int] = attrs.field(factory=list)

    @property
    def acquired(self) -> bool:
        return self.hold is not None

    @classmethod
    def granted(cls, hold: Hold) -> 'HoldAcquisition':
        return cls(hold=hold)

    @classmethod
    def conflict(cls, positions: List[int]) -> 'HoldAcquisition':
        return cls(conflicting_positions=sorted(positions))
