"""
Assurance Routes
================

API route handlers for the Assurance Service.
"""

from services.assurance.routes import (
    assessments,
    delivery_groups,
    delivery_partners,
    insights,
    professions,
    project_delivery_partners,
    projects,
    service_standards,
    themes,
)


__all__ = [
    "assessments",
    "delivery_groups",
    "delivery_partners",
    "insights",
    "professions",
    "project_delivery_partners",
    "projects",
    "service_standards",
    "themes",
]
