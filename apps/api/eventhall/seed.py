"""Create the schema, the fixed role set and a bootstrap admin.

    python -m eventhall.seed

The admin is only created when ADMIN_EMAIL and ADMIN_PASSWORD are set and no
user with that email exists yet. Running it twice changes nothing.
"""

from __future__ import annotations

import structlog
from sqlalchemy.orm import Session

from eventhall.auth.password import hash_password
from eventhall.core.config import settings
from eventhall.core.logging import configure_logging
from eventhall.db import SessionLocal, init_db
from eventhall.models import Role, User
from eventhall.services.roles_service import ensure_roles, grant_role
from eventhall.services.users_service import find_user_by_email, normalize_email

logger = structlog.get_logger()


def seed_admin(db: Session, email: str, password: str, name: str = "Administrator") -> User:
    user = find_user_by_email(db, email)
    if user is None:
        user = User(name=name, email=normalize_email(email), password_hash=hash_password(password))
        db.add(user)
        logger.info("seed_admin_created", email=user.email)
    grant_role(db, user, Role.ADMIN)
    db.commit()
    return user


def seed(db: Session) -> None:
    ensure_roles(db)
    db.commit()

    if settings.admin_email and settings.admin_password:
        seed_admin(db, settings.admin_email, settings.admin_password)
    else:
        logger.info("seed_admin_skipped", reason="ADMIN_EMAIL or ADMIN_PASSWORD not set")


def main() -> None:
    configure_logging()
    init_db()
    db = SessionLocal()
    try:
        seed(db)
    finally:
        db.close()
    logger.info("seed_completed")


if __name__ == "__main__":
    main()
