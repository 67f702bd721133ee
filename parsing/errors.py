class ExtractionAnomaly(Exception):
    """A pipeline stage failed on its input; the caller falls back to an empty record."""

    def __init__(self, stage: str, cause: BaseException):
        super().__init__(f"{stage}: {cause.__class__.__name__}: {cause}")
        self.stage = stage
        self.cause = cause
