"""액세스 키 ORM 모델"""
from sqlalchemy import Column, String, Boolean, DateTime, Enum
from infrastructure.persistence.database import Base
from domain.enums import Plan


class AccessKey(Base):
    __tablename__ = "access_keys"
    code = Column(String(6), primary_key=True)
    plan = Column(Enum(Plan), nullable=False)
    plan_code = Column(String(1), nullable=False)
    # 시각은 모두 UTC (tz 정보 없이 저장)
    expires_at = Column(DateTime, nullable=False)
    created_at = Column(DateTime, nullable=False)
    used = Column(Boolean, default=False, nullable=False)
    used_at = Column(DateTime, nullable=True)
    used_by = Column(String(255), nullable=True)

    def __repr__(self):
        return f"<AccessKey {self.code} - {self.plan.value}{' (used)' if self.used else ''}>"
