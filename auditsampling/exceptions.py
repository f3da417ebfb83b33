#  Author:   Audit Sampling Developers
#
#  License: Apache Software License 2.0

"""Custom exceptions."""


class AuditSamplingException(Exception):
    """Base class for all auditsampling exceptions."""


class InvalidArgumentsException(AuditSamplingException):
    """An exception indicating that the inputs for a function are invalid."""


class InvalidFieldException(InvalidArgumentsException):
    """An exception indicating a named field is absent from the data set or holds non-numeric values."""


class NotFoundException(AuditSamplingException):
    """An exception indicating a lookup in a confidence factor table found no matching entry."""


class EmptyPopulationException(AuditSamplingException):
    """An exception indicating there is nothing left in the population to draw a sample from."""


class CalculatorException(AuditSamplingException):
    """An exception indicating an error occurred during calculation."""


class ReaderException(AuditSamplingException):
    """An exception indicating something went wrong whilst trying to read out data."""


class WriterException(AuditSamplingException):
    """An exception indicating something went wrong whilst trying to write out results."""


class IOException(AuditSamplingException):
    """An exception indicating something went wrong during IO."""
