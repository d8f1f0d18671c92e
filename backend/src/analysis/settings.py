import os

TRUTHY = {"1", "true", "yes", "on"}


def _flag(value):
    return value is not None and value.strip().lower() in TRUTHY


class AnalysisSettings:
    def __init__(self, fail_fast=False, debug=False):
        # stop at the first failing module instead of isolating it
        self.fail_fast = fail_fast
        # log every cooldown window opening and closing, passed to each tracker
        self.debug = debug

    @classmethod
    def from_env(cls, environ=None):
        environ = os.environ if environ is None else environ
        return cls(
            fail_fast=_flag(environ.get("ANALYSIS_FAIL_FAST")),
            debug=_flag(environ.get("ANALYSIS_DEBUG")),
        )
