class InvalidArgumentError(ValueError):
    """Raised when an argument has no defined result, e.g. maxout of nothing."""
