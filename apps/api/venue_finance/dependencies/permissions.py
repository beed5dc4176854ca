from __future__ import annotations

from typing import Optional
from uuid import UUID

from fastapi import Depends, HTTPException, status
from sqlalchemy.orm import Session

from venue_finance.dependencies.auth import get_current_user
from venue_finance.models.company import CompanyORM
from venue_finance.models.enums import UserRole
from venue_finance.models.user import User
from venue_finance.services.errors import UnauthorizedAccess

# roles allowed to read or generate financial reports
REPORT_ROLES = (UserRole.SUPERADMIN.value, UserRole.ADMIN.value)


def require_roles(*allowed: str):
    """Role gate, enforced on the API side."""

    def _dep(user: User = Depends(get_current_user)) -> User:
        role = getattr(user, "role", None)
        if role not in allowed:
            raise UnauthorizedAccess(f"Role {role!r} may not access this resource")
        return user

    return _dep


def resolve_company_id(user: User, company_id: Optional[UUID]) -> UUID:
    """Company the request acts on.

    - SUPERADMIN: company_id is required and may be any company
    - others: defaults to the user's own company; any other company is 403
    """
    if user.is_superadmin:
        if company_id is None:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="company_id required")
        return company_id

    own = user.company_id
    if own is None:
        raise UnauthorizedAccess("User is not assigned to a company")
    if company_id is not None and company_id != own:
        raise UnauthorizedAccess("Access to this company is not allowed")
    return own


def load_company(db: Session, user: User, company_id: Optional[UUID]) -> CompanyORM:
    cid = resolve_company_id(user, company_id)
    company = db.get(CompanyORM, cid)
    if company is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Company not found")
    return company
