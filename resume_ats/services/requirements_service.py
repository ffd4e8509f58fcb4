"""
Company requirement lookup and storage
"""
from datetime import datetime
from typing import Any, Dict, List, Optional

from resume_ats.helpers.role_defaults import fallback_requirements
from resume_ats.models.models import CompanyRequirements
from resume_ats.services.db import requirements_coll, to_dict
from resume_ats.utils.logging_config import get_logger

logger = get_logger(__name__)

CUSTOM_COMPANY_ID = "custom"


class RequirementsService:
    """Resolves the requirement record an analysis is scored against"""

    @staticmethod
    async def get(company_id: str, role: Optional[str] = None) -> Optional[CompanyRequirements]:
        query: Dict[str, Any] = {"company_id": company_id}
        if role:
            query["role"] = role
        doc = await requirements_coll.find_one(query)
        if not doc:
            return None
        return CompanyRequirements(**to_dict(doc))

    @staticmethod
    async def resolve(company_id: Optional[str], company_name: Optional[str], role: str) -> CompanyRequirements:
        """
        Stored record for (company, role), else the company's record for any
        role re-targeted at ``role``, else generic fallback requirements.
        """
        if company_id and company_id != CUSTOM_COMPANY_ID:
            exact = await RequirementsService.get(company_id, role)
            if exact:
                logger.debug(f"Using stored requirements for {company_id} / {role}")
                return exact

            any_role = await RequirementsService.get(company_id)
            if any_role:
                logger.info(f"No requirements for role '{role}' at {company_id}, reusing role '{any_role.role}'")
                return any_role.copy(update={"role": role})

        resolved_name = company_name or company_id or "Unknown Company"
        logger.info(f"No stored requirements for {resolved_name}, using fallback requirements")
        return fallback_requirements(resolved_name, role)

    @staticmethod
    async def upsert(requirements: CompanyRequirements) -> CompanyRequirements:
        doc = requirements.dict()
        doc["updated_at"] = datetime.utcnow()
        await requirements_coll.update_one(
            {"company_id": requirements.company_id, "role": requirements.role},
            {"$set": doc, "$setOnInsert": {"created_at": datetime.utcnow()}},
            upsert=True,
        )
        logger.info(f"Stored requirements for {requirements.company_id} / {requirements.role}")
        return requirements

    @staticmethod
    async def list_companies() -> List[Dict[str, Any]]:
        cursor = requirements_coll.find(
            {}, {"_id": 0, "company_id": 1, "company_name": 1, "role": 1}
        ).sort("company_name", 1)
        return await cursor.to_list(length=None)
