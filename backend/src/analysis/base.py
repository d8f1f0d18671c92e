class Window:
    def __init__(self, start, end=None):
        self.start = start
        self.end = end

    def __repr__(self):
        return f"{type(self).__name__}({self.start}, {self.end})"

    def contains(self, timestamp):
        if self.end is None:
            return self.start <= timestamp
        return self.start <= timestamp < self.end


class BaseAnalyzer:
    """
    Analysis modules implement any subset of the handlers listed in
    analysis.dispatch.CAPABILITIES. Handlers they don't implement are skipped.
    """

    @property
    def name(self):
        return type(self).__name__

    def validate(self):
        """Check module configuration, called once when the module is registered"""

    def finish(self, end_time):
        """Called after the last event has been dispatched"""

    def report(self):
        return {}
