from sqlalchemy import Column, Integer, String, Float, DateTime

from .base import Base


class RefInstitution(Base):
    __tablename__ = "ref_institutions"

    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False, unique=True)
    url = Column(String)
    state = Column(String(2), nullable=False)
    enrollment = Column(Integer, nullable=False, default=0)
    admit_rate = Column(Float, nullable=False)
    testing_policy = Column(String, nullable=False, default="optional")
    dataset_version = Column(String)
    last_reviewed_at = Column(DateTime)
