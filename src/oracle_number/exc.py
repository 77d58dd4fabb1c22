import json
import logging

logger = logging.getLogger(__name__)


class Error(Exception):
    """Base class for number mapping errors.
    `message`: An optional user-friendly error message. It should be short, actionable and stable
    `context`: Optional extra context about the error. MUST be JSON serializable
    """

    def __init__(self, message=None, context=None, *args, **kwargs):
        super().__init__(message, *args, **kwargs)
        self.message = message
        self.context = context or {}

    def __str__(self):
        return self.message

    def message_with_context(self):
        return self.message + ": " + json.dumps(self.context, default=str)


class ConfigurationInvalidError(Error):
    """Thrown when a configuration value is out of range or conflicts with another setting.
    Its context will have the following keys:
    "key": The configuration key being set or read
    "value": The rejected value (if available)
    """

    pass


class SkipFieldError(Error):
    """Signals that a column should be left out of the result schema.

    Only raised by `NumberResolution.unwrap()`; the resolution engine itself returns
    skips by value.
    """

    pass


class UnsupportedConversionError(Error):
    """Thrown when a column type cannot be represented and the configured strategy is FAIL,
    or when no strategy exists to resolve an undefined scale.
    Its context will have the following keys:
    "type": The description of the offending type, e.g. NUMERIC(40, -127)
    """

    pass


class NotSupportedError(Error):
    """Thrown when a set of columns has no supported column left after mapping"""

    pass


class DataError(Error):
    """Thrown when a fetched value cannot be converted to its target representation"""

    pass


class RescaleLossError(DataError):
    """Thrown when the rounding mode is UNNECESSARY and rescaling would drop non-zero digits.
    Its context will have the following keys:
    "value": The fetched value
    "scale": The target scale
    """

    pass


class NumericOverflowError(DataError):
    """Thrown when a converted value does not fit the target precision or integer width"""

    pass
