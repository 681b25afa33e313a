"""
LottoLens - Engine Exceptions
=============================

Error kinds raised by the analysis engine and the record loader.
"""


class LottoLensError(Exception):
    """Base class for all LottoLens errors"""


class NoDataError(LottoLensError):
    """Raised when an analysis is requested before draw data is available"""


class InvalidQueryError(LottoLensError):
    """Raised when the query is not a 1-3 digit string"""


class DataLoadError(LottoLensError):
    """Raised when the draw data source cannot be read or parsed"""
