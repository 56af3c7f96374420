"""
Answer Grader - two-tier grading of free-text exam answers.

This package grades a student answer against an expected answer and a mark
allocation. A generative model is consulted first; when it is disabled,
slow, or replies with unusable output, a deterministic similarity scorer
takes over so every question still receives a result.
"""

__version__ = "1.0.0"
__author__ = "Answer Grader Team"
