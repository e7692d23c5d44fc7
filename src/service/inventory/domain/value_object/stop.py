import attrs


@attrs.frozen
class Stop:
    """A pickup or drop-off point: a city and the terminal within it."""

    city: str
    terminal: str

    @classmethod
    def of(cls, *, city: str, terminal: str) -> 'Stop':
        return cls(city=city.strip(), terminal=terminal.strip())
