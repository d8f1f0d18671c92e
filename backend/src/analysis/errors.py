class AnalysisError(Exception):
    pass


class ConfigurationError(AnalysisError):
    """Raised when a module is misconfigured, before any event is replayed"""


class WindowClosedError(AnalysisError):
    pass


class AnalysisCancelled(AnalysisError):
    def __init__(self, timestamp=None):
        super().__init__(f"Analysis cancelled at {timestamp}")
        self.timestamp = timestamp
