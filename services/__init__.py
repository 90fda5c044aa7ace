"""
Assurance Services
==================

Service packages for the assurance platform.

Services:
- assurance: Projects, profession assessments, reference data and change history
"""

__all__ = [
    "assurance",
]
