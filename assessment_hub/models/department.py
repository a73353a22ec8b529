from sqlalchemy import Column, Integer, String

from assessment_hub.database import Base


class Department(Base):
    __tablename__ = "departments"
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False, index=True)

    def __repr__(self):
        return f"<Department {self.id}: {self.name}>"
