class InvalidConfiguration(Exception):
    """Raised before planning or following starts when the scenario cannot be used as given:
    start or goal out of bounds or inside an obstacle, or a non-positive numeric parameter."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


def require_positive(name: str, value: float):
    if not value > 0:
        raise InvalidConfiguration(f"{name} must be positive, got {value}")


def require_in_range(name: str, value: float, low: float, high: float):
    if not low <= value <= high:
        raise InvalidConfiguration(
            f"{name} must lie in [{low}, {high}], got {value}"
        )
