class VarStreamError(Exception):
    pass


class InvalidArgumentError(VarStreamError, ValueError):
    def __init__(self, name: str, value: object, reason: str = "must be numeric") -> None:
        self.name = name
        self.value = value
        super().__init__(f"Invalid {name}: {value!r} {reason}")


class DegenerateVarianceError(VarStreamError, ZeroDivisionError):
    def __init__(self, count: int) -> None:
        self.count = count
        super().__init__(f"Sample variance is undefined for {count} observation(s)")


class AccumulatorStateError(VarStreamError, RuntimeError):
    pass


class StreamClosedError(VarStreamError, RuntimeError):
    pass
