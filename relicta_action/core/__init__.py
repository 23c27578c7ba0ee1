"""Core domain types and logic."""

from .errors import ErrorCode
from .inputs import ActionInputs, read_inputs
from .result import Err, Ok, Result, is_err, is_ok
from .settings import Settings, SettingsError, load_settings

__all__ = [
    # errors
    "ErrorCode",
    # inputs
    "ActionInputs",
    "read_inputs",
    # result
    "Err",
    "Ok",
    "Result",
    "is_err",
    "is_ok",
    # settings
    "Settings",
    "SettingsError",
    "load_settings",
]
