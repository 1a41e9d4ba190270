"""
Candidate generation.
"""

from disc_lib.candidates.slim_generator import SlimGenerator

__all__ = ["SlimGenerator"]
