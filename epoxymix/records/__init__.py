"""
Records Module - Storage, Submission & Edit Paths
=================================================

Components:
- models / service: SQLAlchemy storage of mix records (flag columns)
- submission: operator entry validation and submission-time ratio
- access_gate: shared-passcode gate for the edit view

HTTP routers live in ``records.api_records``.
"""

from .access_gate import AccessGate, get_access_gate, require_edit_access
from .submission import PreparedSubmission, SubmissionError, prepare_submission, preview

__all__ = [
    "AccessGate",
    "get_access_gate",
    "require_edit_access",
    "PreparedSubmission",
    "SubmissionError",
    "prepare_submission",
    "preview",
]
