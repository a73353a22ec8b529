from assessment_hub.core.schemas import RecordModel


class Department(RecordModel):
    """Catalog entry. Departments are seeded once and never edited."""
    id: int
    name: str
