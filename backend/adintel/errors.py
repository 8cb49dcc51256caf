"""
Error taxonomy for the analysis pipeline.

Only InvalidInput and InternalFailure ever reach the HTTP layer.
AcquisitionDegraded and PersistenceFailed are raised and absorbed internally.
"""


class AdIntelligenceError(Exception):
    """Base class for pipeline errors."""
    pass


class InvalidInput(AdIntelligenceError):
    """Bad or missing brand name — user-correctable."""
    pass


class AcquisitionDegraded(AdIntelligenceError):
    """Creative Source failed, timed out or returned nothing usable."""
    pass


class PersistenceFailed(AdIntelligenceError):
    """Intelligence Store rejected or failed to record a report."""
    pass


class InternalFailure(AdIntelligenceError):
    """Unexpected failure while building the report. The cause is chained, never exposed."""
    pass
