"""
Assurance Services
==================

Business logic for the update-with-history workflows.

Services:
- aggregate_status: Status Reducer
- detect_changes: Change Detector
- resolve_history_timestamp / guard_update_date: Backdating Guard
- StandardsSummaryAggregator: Assessment Aggregator
- ProjectService / AssessmentService: update orchestration and archive-and-recompute
- ProfessionService / ServiceStandardService / DeliveryGroupService: history-tracked reference data
- DeliveryPartnerService / ProjectDeliveryPartnerService / ThemeService: plain CRUD
- InsightsService: prioritisation of stale and worsening deliveries

Version: 0.1.0
"""

from services.assurance.services.assessments import AssessmentService
from services.assurance.services.backdating import (
    guard_update_date,
    parse_effective_date,
    parse_range_end,
    resolve_history_timestamp,
    utc_now,
)
from services.assurance.services.changes import detect_changes
from services.assurance.services.delivery import (
    DeliveryGroupService,
    DeliveryPartnerService,
    ProjectDeliveryPartnerService,
)
from services.assurance.services.insights import InsightsService, is_worsening
from services.assurance.services.projects import ProjectService
from services.assurance.services.reference import ProfessionService, ServiceStandardService
from services.assurance.services.status import aggregate_status, collapse_status
from services.assurance.services.summary import StandardsSummaryAggregator, build_standards_summary
from services.assurance.services.themes import ThemeService


__all__ = [
    # Pure rules
    "aggregate_status",
    "collapse_status",
    "detect_changes",
    "parse_effective_date",
    "parse_range_end",
    "resolve_history_timestamp",
    "guard_update_date",
    "utc_now",
    "build_standards_summary",
    "is_worsening",
    # Workflows
    "StandardsSummaryAggregator",
    "ProjectService",
    "AssessmentService",
    "ProfessionService",
    "ServiceStandardService",
    "DeliveryGroupService",
    "DeliveryPartnerService",
    "ProjectDeliveryPartnerService",
    "ThemeService",
    "InsightsService",
]
