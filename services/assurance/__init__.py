"""
Assurance Service
=================

Delivery project assurance: projects, per-profession service standard
assessments, reference data and the change history behind them.

Features:
- Project CRUD with field-level change history
- Backdated updates that cannot regress the audit trail
- Profession assessments rolled up into a per-standard summary
- Archiving of history entries with recomputation of current state
- Professions, service standards, delivery groups, partners and themes

Port: 8000
"""

__version__ = "0.1.0"
