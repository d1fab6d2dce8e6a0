"""
Exceptions raised by the tabstats pipeline.
"""


class DatasetError(ValueError):
    """The input table or its profile does not have the expected shape."""
