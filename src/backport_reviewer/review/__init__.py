"""
Review Processing

Upstream resolution, diff comparison, commit provenance and
tracking issue checks for backport pull requests.
"""

from .reviewer import BackportReviewer

__all__ = ['BackportReviewer']
