"""
Error types used throughout the library.

Every error carries a reason, and optionally the task
that was being performed when the problem was caught, so
that messages read sensibly even when raised from deep
inside a composed model.
"""
import textwrap
from typing import Optional


def dedent(string: str) -> str:
    """Strips common leading whitespace so multiline reasons print cleanly."""
    return textwrap.dedent(string).strip("\n")


class ValidationError(Exception):
    """
    An error class for validation problems
    """
    def __init__(self,
                 type: str,
                 reason: str,
                 task: Optional[str] = None
                 ):

        self.reason = reason
        self.task = task

        msg = ""
        msg += "A %s error occurred \n" % type
        msg += "The error occurred because: \n\n %s\n" % reason
        if task is not None:
            msg += "This happened while doing: \n %s" % task
        super().__init__(msg)


class ParameterBlockException(ValidationError):
    """
    Raised when a parameter or a captured model
    cannot be registered or found by name.
    """
    def __init__(self, reason: str, task: Optional[str] = None):
        typing = "ParameterBlockException"
        super().__init__(typing, reason, task)


class BatchException(ValidationError):
    """
    Raised when the items handed to a batch
    combinator do not line up.
    """
    def __init__(self, reason: str, task: Optional[str] = None):
        typing = "BatchException"
        super().__init__(typing, reason, task)


class MinibatchConversionException(ValidationError):
    """
    Raised when converting packed minibatch data into
    per sequence tensors fails.
    """
    def __init__(self, reason: str, task: Optional[str] = None):
        typing = "MinibatchConversionException"
        super().__init__(typing, reason, task)


class LayerException(ValidationError):
    """
    Raised when a layer closure is called with
    something it cannot process.
    """
    def __init__(self, reason: str, task: Optional[str] = None):
        typing = "LayerException"
        super().__init__(typing, reason, task)


class DataFormatException(ValidationError):
    """
    Raised when a text format corpus cannot be parsed.
    """
    def __init__(self, reason: str, task: Optional[str] = None):
        typing = "DataFormatException"
        super().__init__(typing, reason, task)


class ConfigurationException(ValidationError):
    """
    Raised when a training configuration holds
    values that cannot be used.
    """
    def __init__(self, reason: str, task: Optional[str] = None):
        typing = "ConfigurationException"
        super().__init__(typing, reason, task)
