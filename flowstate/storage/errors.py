"""Storage-layer exceptions."""


class DataImportError(ValueError):
    """An import payload could not be parsed; nothing was written."""
