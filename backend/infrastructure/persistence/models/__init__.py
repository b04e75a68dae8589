"""
ORM 모델 — 모든 모델을 re-export
"""
from infrastructure.persistence.database import Base
from infrastructure.persistence.models.access_key import AccessKey
from domain.enums import Plan
