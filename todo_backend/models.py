from sqlalchemy import Boolean, Column, Integer, Text, text
from sqlalchemy.orm import declarative_base

Base = declarative_base()


class Todo(Base):
    __tablename__ = "todos"
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True)
    title = Column(Text, nullable=False)
    completed = Column(Boolean, default=False, server_default=text("0"))
    # second schema revision; existing stores get it via ALTER TABLE
    priority = Column(Integer, default=0, server_default=text("0"))


# fixed order used to build SET clauses
UPDATABLE_FIELDS = ("title", "completed", "priority")
