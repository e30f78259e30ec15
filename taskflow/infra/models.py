from __future__ import annotations

from sqlalchemy import Column, DateTime, Integer, String, Text

from .db import Base


class TaskModel(Base):
    __tablename__ = "tasks"

    id = Column(Integer, primary_key=True)
    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=False, default="")
    category_id = Column(Integer, nullable=True, index=True)
    due_date = Column(DateTime, nullable=False)
    reminder_time = Column(DateTime, nullable=True)
    status = Column(String(20), nullable=False, default="pending", index=True)
    created_at = Column(DateTime, nullable=False)
    parent_task_id = Column(Integer, nullable=True, index=True)


class CategoryModel(Base):
    __tablename__ = "categories"

    id = Column(Integer, primary_key=True)
    name = Column(String(100), nullable=False)
    color = Column(String(7), nullable=False, default="#5B21B6")
