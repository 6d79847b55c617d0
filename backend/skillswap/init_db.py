# backend/skillswap/init_db.py
"""
Create the SkillSwap tables and optionally seed demo users.

Usage:
    python -m skillswap.init_db           # create tables
    python -m skillswap.init_db --seed    # create tables and add demo users
"""

import argparse
import logging
from typing import Sequence, Tuple

from sqlalchemy.orm import Session

from . import models  # noqa: F401  (registers tables on Base.metadata)
from .database import Base, SessionLocal, engine
from .repositories.factory import RepositoryFactory

logger = logging.getLogger(__name__)

DEMO_USERS: Sequence[Tuple[str, str, Sequence[Tuple[str, str]]]] = (
    ("Ada Teacher", "ada@example.com", (("Python", "Expert"), ("SQL", "Advanced"))),
    ("Grace Teacher", "grace@example.com", (("Guitar", "Advanced"), ("Python", "Intermediate"))),
    ("Sam Student", "sam@example.com", (("Guitar", "Beginner"),)),
    ("Lee Student", "lee@example.com", ()),
)


def create_tables() -> None:
    Base.metadata.create_all(bind=engine)
    logger.info("Tables created")


def seed_demo_users(db: Session) -> int:
    """Insert demo users that are not already present; roles follow their skills."""
    users = RepositoryFactory.create_user_repository(db)
    created = 0
    for name, email, skills in DEMO_USERS:
        if users.get_by_email(email) is not None:
            continue
        user = users.create_user(name=name, email=email, skills=skills)
        logger.info("Seeded %s as %s", user.email, user.role)
        created += 1
    db.commit()
    return created


def main() -> None:
    parser = argparse.ArgumentParser(description="Initialise the SkillSwap database")
    parser.add_argument("--seed", action="store_true", help="add demo users")
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    create_tables()
    if args.seed:
        db = SessionLocal()
        try:
            created = seed_demo_users(db)
        finally:
            db.close()
        logger.info("Seeded %d demo users", created)


if __name__ == "__main__":
    main()
