from __future__ import annotations

import logging
from typing import Optional

from ..authorization.policy import ADMIN_ONLY, ADMIN_OR_MANAGER, authorize
from ..common.validators import optional_str, optional_url, require_non_empty
from ..core.exceptions import NotFoundError, ValidationError
from ..users.model import Identity
from .model import Organization
from .repository import OrganizationRepository

logger = logging.getLogger(__name__)


def _clean_fields(payload: dict, *, partial: bool) -> dict:
    out: dict = {}
    if not partial or "name" in payload:
        out["name"] = require_non_empty(payload.get("name"), "name")
    if "location" in payload:
        out["location"] = optional_str(payload.get("location"), "location")
    if "logo_url" in payload:
        out["logo_url"] = optional_url(payload.get("logo_url"), "logo_url")
    return out


class OrganizationService:
    """Use case: tenant CRUD. Writes are admin-only; managers may read their own."""

    def __init__(self, organizations: OrganizationRepository):
        self._organizations = organizations

    def list_organizations(self, identity: Optional[Identity]) -> list[Organization]:
        authorize(identity, ADMIN_ONLY)
        return list(self._organizations.list_all())

    def get_organization(self, identity: Optional[Identity], organization_id: int) -> dict:
        authorize(identity, ADMIN_OR_MANAGER, resource_org_id=organization_id)

        org = self._organizations.get_by_id(organization_id)
        if not org:
            raise NotFoundError("Organization not found")

        data = org.to_dict()
        data["employee_count"] = self._organizations.count_employees(org.id)
        return data

    def create_organization(self, identity: Optional[Identity], payload: dict) -> Organization:
        authorize(identity, ADMIN_ONLY)
        fields = _clean_fields(payload, partial=False)

        org = self._organizations.create(
            name=fields["name"],
            location=fields.get("location"),
            logo_url=fields.get("logo_url"),
            created_by=identity.id,
        )
        logger.info("Organization %s created by %s", org.id, identity.email)
        return org

    def update_organization(self, identity: Optional[Identity], organization_id: int, payload: dict) -> Organization:
        authorize(identity, ADMIN_ONLY)
        changes = _clean_fields(payload, partial=True)
        if not changes:
            raise ValidationError("Nothing to update")

        org = self._organizations.update(organization_id, changes)
        if not org:
            raise NotFoundError("Organization not found")
        return org

    def delete_organization(self, identity: Optional[Identity], organization_id: int) -> None:
        authorize(identity, ADMIN_ONLY)
        if not self._organizations.delete(organization_id):
            raise NotFoundError("Organization not found")
        logger.info("Organization %s deleted by %s", organization_id, identity.email)
