# rodsteward/errors.py
"""
Exceptions raised while validating input and generating geometry.

InvalidInputError is fatal and reaches the caller. The other three are
raised by the per-edge / per-vertex builders and caught by the generation
pass, which records them as Issue entries and keeps going.

The analysis failure (AnalysisSingularError) lives next to the solver in
rodsteward.kernel.solve.
"""


class RodStewardError(Exception):
    """Base class for all rodsteward errors."""
    pass


class InvalidInputError(RodStewardError, ValueError):
    """Raised when parameters or the graph are rejected before generation."""
    pass


class GeometryIssue(RodStewardError):
    """
    Recoverable geometry failure tied to one edge, edge end or vertex.

    `kind` names the issue category and `key` identifies the item
    (an edge tuple, a DirectedEdge, or a vertex index).
    """
    kind = 'geometry'

    def __init__(self, key, message: str):
        super().__init__(message)
        self.key = key


class RodDegenerateError(GeometryIssue):
    """Trimmed rod length is zero or negative."""
    kind = 'rod_degenerate'


class JointOverlapError(GeometryIssue):
    """Joint arm would reach past the far end of its edge."""
    kind = 'joint_overlap'


class HullDegenerateError(GeometryIssue):
    """Convex hull of the joint core points could not be built."""
    kind = 'hull_degenerate'
