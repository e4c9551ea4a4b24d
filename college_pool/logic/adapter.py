"""
Reference Dataset Adapter

Reads the `ref_institutions` table and transforms rows into
ReferenceInstitution contracts for the engine.

This is a pure READ + TRANSFORM layer:
- NO scoring logic
- NO classification
- NO DB writes
"""

import logging
from typing import List, Optional

from pydantic import ValidationError
from sqlalchemy import select
from sqlalchemy.orm import Session

from college_pool.models import RefInstitution
from .constants import TestingPolicy
from .contracts import ReferenceInstitution

logger = logging.getLogger(__name__)


def _normalize_policy(raw: Optional[str]) -> str:
    """Stored policies may be free text ("Test Required"); default is optional."""
    text = (raw or "").lower()
    if "blind" in text:
        return TestingPolicy.BLIND.value
    if "required" in text:
        return TestingPolicy.REQUIRED.value
    return TestingPolicy.OPTIONAL.value


def row_to_reference(row: RefInstitution) -> Optional[ReferenceInstitution]:
    """Transform one ORM row; None when the row fails validation."""
    try:
        return ReferenceInstitution(
            name=row.name,
            url=row.url or "",
            state=(row.state or "").upper(),
            enrollment=row.enrollment or 0,
            admit_rate=row.admit_rate,
            testing_policy=_normalize_policy(row.testing_policy),
        )
    except ValidationError as e:
        logger.warning(f"[Adapter] Skipping invalid reference row {row.name!r}: {e.errors()[0]['msg']}")
        return None


def fetch_reference_institutions(db: Session, state_filter: Optional[str] = None) -> List[ReferenceInstitution]:
    """
    Fetch reference institutions ordered by name.

    Args:
        db: Database session
        state_filter: Optional two-letter state code

    Returns:
        Valid reference institutions
    """
    query = select(RefInstitution).order_by(RefInstitution.name)
    if state_filter:
        query = query.where(RefInstitution.state == state_filter.upper())

    institutions = []
    for row in db.execute(query).scalars():
        institution = row_to_reference(row)
        if institution is not None:
            institutions.append(institution)

    logger.info(f"[Adapter] Loaded {len(institutions)} reference institutions from database")
    return institutions
