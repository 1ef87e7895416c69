"""UIO (Unique Input/Output) sequence generation.

- enumerate_candidates: Depth-first candidate enumeration from one state
- is_unique_for_state: Cross-state uniqueness check
- UIOFinder: Length-ascending assignment under the no-reuse constraint
- find_identifying_sequences: Convenience wrapper returning state -> (input, output)
- audit_assignment: Independent replay check of an assignment
"""

from mealyqa.uio.audit import AuditReport, StateAudit, audit_assignment
from mealyqa.uio.engine import (
    DEFAULT_MAX_LENGTH,
    UIOFinder,
    enumerate_candidates,
    find_identifying_sequences,
    is_unique_for_state,
)
from mealyqa.uio.sequence import IdentifyingSequence, Sequence, UIOResult

__all__ = [
    "DEFAULT_MAX_LENGTH",
    "Sequence",
    "IdentifyingSequence",
    "UIOResult",
    "UIOFinder",
    "enumerate_candidates",
    "is_unique_for_state",
    "find_identifying_sequences",
    "AuditReport",
    "StateAudit",
    "audit_assignment",
]
