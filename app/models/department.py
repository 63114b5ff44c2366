"""
Department and Section lookups.
Employees reference both by code; admin listings resolve codes to names.
"""
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Boolean
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from app.database import Base


class Department(Base):
    __tablename__ = "departments"

    id = Column(Integer, primary_key=True, index=True)
    code = Column(String, unique=True, nullable=False, index=True)  # Short code like "psc-hr"
    name = Column(String, nullable=False)
    company = Column(String, nullable=True, index=True)  # Company code

    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    sections = relationship("Section", back_populates="department_rel")

    def __repr__(self):
        return f"<Department {self.code}: {self.name}>"


class Section(Base):
    __tablename__ = "sections"

    id = Column(Integer, primary_key=True, index=True)
    code = Column(String, unique=True, nullable=False, index=True)
    name = Column(String, nullable=False)
    department_id = Column(Integer, ForeignKey("departments.id"), nullable=True)

    is_active = Column(Boolean, default=True, nullable=False)

    department_rel = relationship("Department", back_populates="sections")

    def __repr__(self):
        return f"<Section {self.code}: {self.name}>"
