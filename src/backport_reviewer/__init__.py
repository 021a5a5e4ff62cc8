"""
Backport Reviewer

Audits backport pull requests against the upstream pull requests they port:
diff equality, cherry-pick provenance of every commit, and the tracking
issue's reference to the upstream change.
"""

__version__ = "1.0.0"

from .review.reviewer import BackportReviewer

__all__ = ["BackportReviewer", "__version__"]
