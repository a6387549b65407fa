"""Exceptions raised by bridgegen"""


class BridgeGenerationError(Exception):
    """The run cannot start, e.g. the output root is not writable"""


class FrontendError(Exception):
    """A header could not be loaded by the front end"""
