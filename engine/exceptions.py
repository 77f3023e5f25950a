# engine/exceptions.py

class SolarWatchError(Exception):
    pass


class NotFoundError(SolarWatchError):
    pass


class ValidationError(SolarWatchError):
    pass


class StoreUnavailable(SolarWatchError):
    pass


class InvalidTransition(SolarWatchError):
    pass


class DetectionRunError(SolarWatchError):
    def __init__(self, message: str, summary=None) -> None:
        super().__init__(message)
        self.summary = summary


class UpstreamError(SolarWatchError):
    pass


class PartialRecordError(SolarWatchError):
    def __init__(self, message: str, saved: int = 0) -> None:
        super().__init__(message)
        self.saved = saved
