"""Error taxonomy for exposure evaluation."""


class UvDoseError(Exception):
    """Base class for all evaluation errors."""


class InvalidForecastData(UvDoseError, ValueError):
    """The forecast payload is missing, mismatched or malformed."""


class UnknownSkinClass(UvDoseError, KeyError):
    def __init__(self, skin_type: object):
        self.skin_type = skin_type
        super().__init__(
            f"Unknown skin type: {skin_type!r} (use I, II, III, IV, V, VI)"
        )

    def __str__(self) -> str:
        # KeyError.__str__ would repr() the message
        return str(self.args[0])


class InsufficientForecastData(UvDoseError):
    """The forecast does not cover the rest of the day."""
