import logging

from assessment_hub.core.config import settings
from assessment_hub.schemas.auth import UserInsert, UserRole
from assessment_hub.services import auth as auth_service
from assessment_hub.storage import Storage

logger = logging.getLogger(__name__)

DEMO_PASSWORD = "Demo@123"

# username, display name, role
DEMO_USERS = (
    ("ana.silva", "Ana Silva", UserRole.MANAGER),
    ("bruno.oliveira", "Bruno Oliveira", UserRole.USER),
    ("carolina.santos", "Carolina Santos", UserRole.USER),
    ("daniel.pereira", "Daniel Pereira", UserRole.USER),
    ("eduardo.costa", "Eduardo Costa", UserRole.MANAGER),
    ("fernanda.lima", "Fernanda Lima", UserRole.USER),
    ("gabriel.almeida", "Gabriel Almeida", UserRole.USER),
    ("helena.martins", "Helena Martins", UserRole.ADMIN),
)


def init_system_data(storage: Storage) -> int:
    """
    Seeds demo users that can be added as participants.
    Skipped unless SEED_DEMO_DATA is on; existing usernames are left alone.
    Returns the number of users created.
    """
    if not settings.seed_demo_data:
        return 0

    created = 0
    hashed_pwd = None
    for username, name, role in DEMO_USERS:
        if storage.get_user_by_username(username):
            continue
        if hashed_pwd is None:
            hashed_pwd = auth_service.get_password_hash(DEMO_PASSWORD)
        storage.create_user(UserInsert(
            username=username,
            password=hashed_pwd,
            name=name,
            role=role.value,
        ))
        created += 1

    if created:
        logger.info(f"✓ Seeded {created} demo users (password set from code, demo use only)")
    else:
        logger.info("Demo users already present, nothing to seed.")
    return created
