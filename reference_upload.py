import os
import csv
import sys
from datetime import datetime
from typing import Iterable, List, Tuple

from sqlalchemy import select
from sqlalchemy.orm import Session
from dotenv import load_dotenv

from db import get_db, init_db
from college_pool.models import RefInstitution
from college_pool.logic.contracts import ReferenceInstitution
from college_pool.logic.reference_data import REFERENCE_DATASET_VERSION, load_reference_dataset

load_dotenv()

# Optional CSV override: name,url,state,enrollment,admit_rate,testing_policy
CSV_PATH = os.environ.get("REFERENCE_CSV_PATH")


def load_csv(path: str) -> List[ReferenceInstitution]:
    institutions = []
    with open(path, newline="", encoding="utf-8") as f:
        for row in csv.DictReader(f):
            institutions.append(ReferenceInstitution(
                name=row["name"].strip(),
                url=(row.get("url") or "").strip(),
                state=row["state"].strip().upper(),
                enrollment=int(row.get("enrollment") or 0),
                admit_rate=float(row["admit_rate"]),
                testing_policy=(row.get("testing_policy") or "optional").strip().lower(),
            ))
    return institutions


def upload_reference_institutions(
    db: Session,
    institutions: Iterable[ReferenceInstitution],
    dataset_version: str = REFERENCE_DATASET_VERSION
) -> Tuple[int, int]:
    """
    Upsert reference institutions by name.
    Returns (inserted, updated).
    """
    existing = {row.name: row for row in db.execute(select(RefInstitution)).scalars()}
    inserted = updated = 0
    now = datetime.utcnow()

    for institution in institutions:
        row = existing.get(institution.name)
        if row is None:
            row = RefInstitution(name=institution.name)
            db.add(row)
            existing[institution.name] = row
            inserted += 1
        else:
            updated += 1

        row.url = institution.url
        row.state = institution.state
        row.enrollment = institution.enrollment
        row.admit_rate = institution.admit_rate
        row.testing_policy = institution.testing_policy
        row.dataset_version = dataset_version
        row.last_reviewed_at = now

    db.flush()
    return inserted, updated


def main(csv_path=None):
    init_db()
    path = csv_path or CSV_PATH
    if path:
        print(f"Loading reference institutions from {path} ...")
        institutions = load_csv(path)
    else:
        print("Loading bundled reference dataset ...")
        institutions = list(load_reference_dataset())

    with get_db() as db:
        inserted, updated = upload_reference_institutions(db, institutions)

    print(f"Reference upload complete: {inserted} inserted, {updated} updated.")


if __name__ == "__main__":
    main(sys.argv[1] if len(sys.argv) > 1 else None)
