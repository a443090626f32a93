class EngineError(ValueError):
    """Base class for data errors raised by the aggregation engine."""


class InvalidRecordError(EngineError):
    def __init__(self, message: str, record_id: str | None = None, field: str | None = None):
        super().__init__(message)
        self.record_id = record_id
        self.field = field


class UnknownCategoryError(InvalidRecordError):
    pass


class MixedOwnerError(EngineError):
    def __init__(self, owners: set[str]):
        super().__init__(f"Records of more than one owner were mixed: {sorted(owners)}")
        self.owners = owners
