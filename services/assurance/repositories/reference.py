"""
Reference Data Repositories
===========================

Version: 0.1.0
"""

from pymongo import ASCENDING

from services.assurance.models.reference import Profession, ServiceStandard
from services.assurance.repositories.base import SoftDeleteRepository


class ProfessionRepository(SoftDeleteRepository[Profession]):
    collection_name = "professions"
    model = Profession
    default_sort = [("name", ASCENDING)]


class ServiceStandardRepository(SoftDeleteRepository[ServiceStandard]):
    collection_name = "service_standards"
    model = ServiceStandard
    default_sort = [("number", ASCENDING)]
