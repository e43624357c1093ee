"""culprit - isolate the test that crashes a test run."""

__version__ = "0.1.0"
