#!/usr/bin/env python3
"""
Automatic database initialization script.
Runs migrations and seeds the default administrator on first startup.
"""

import os
import subprocess
import sys
import time
import logging
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from sqlalchemy import text, inspect
from sqlalchemy.exc import OperationalError, SQLAlchemyError

from backoffice.core.config import settings
from backoffice.core.database import Base, engine, SessionLocal
from backoffice.core.security import hash_password
from backoffice.models import Contractor, User, UserRole

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

BACKEND_DIR = Path(__file__).parent.parent
REQUIRED_TABLES = ["users", "contractors", "documents"]

SAMPLE_CONTRACTOR = {
    "short_name": "ООО Пример",
    "full_name": 'Общество с ограниченной ответственностью "Пример компании"',
    "ogrn": "12345678901234567",
    "inn": "123456789012",
    "kpp": "123401001",
    "okpo": "12345678",
    "okved": "62.01",
    "legal_address": "г. Москва, ул. Примерная, д. 1",
    "actual_address": "г. Москва, ул. Примерная, д. 1",
    "checking_account": "40702810000000000001",
    "bank_name": "ПАО СБЕРБАНК",
    "correspondent_account": "30101810400000000225",
    "bik": "044525225",
    "director": "Иванов Иван Иванович",
    "phone": "+7 (495) 123-45-67",
    "email": "info@example.com",
}


def wait_for_db(max_retries=30):
    """Wait for database to be ready."""
    logger.info("Waiting for database to be ready...")

    for i in range(max_retries):
        try:
            with engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            logger.info("✓ Database is ready")
            return True
        except OperationalError as e:
            if i < max_retries - 1:
                logger.info(f"Database not ready yet, waiting... ({i+1}/{max_retries})")
                time.sleep(2)
            else:
                logger.error(f"Database not ready after {max_retries} attempts: {e}")

    return False


def check_tables_exist():
    """Check if database tables exist."""
    tables = inspect(engine).get_table_names()
    missing_tables = [t for t in REQUIRED_TABLES if t not in tables]

    if missing_tables:
        logger.info(f"Missing tables: {missing_tables}")
        return False

    logger.info(f"✓ All required tables exist ({len(tables)} total)")
    return True


def run_migrations():
    """Run Alembic migrations."""
    logger.info("Running database migrations...")

    try:
        result = subprocess.run(
            ["alembic", "upgrade", "head"],
            cwd=str(BACKEND_DIR),
            capture_output=True,
            text=True,
            timeout=60,
        )
    except (OSError, subprocess.TimeoutExpired) as e:
        logger.error(f"Error running migrations: {e}")
        return False

    if result.returncode != 0:
        logger.error(f"Migration failed: {result.stderr}")
        return False

    logger.info("✓ Migrations completed successfully")
    logger.debug(result.stdout)
    return True


def create_tables():
    """Create tables straight from the models when Alembic is unavailable."""
    logger.info("Creating tables from models...")
    Base.metadata.create_all(bind=engine)
    logger.info("✓ Tables created")


def seed_admin():
    """
    Create the default administrator and a sample contractor.

    Does nothing once any admin exists, so it is safe to run on every start.
    """
    db = SessionLocal()
    try:
        if db.query(User).filter(User.role == UserRole.ADMIN.value).count() > 0:
            logger.info("✓ Admin user already exists")
            return True

        admin = db.query(User).filter(User.email == settings.ADMIN_EMAIL).first()
        if admin:
            admin.role = UserRole.ADMIN.value
            db.flush()
            logger.info(f"✓ Existing user {settings.ADMIN_EMAIL} promoted to admin")
        else:
            admin = User(
                email=settings.ADMIN_EMAIL,
                name=settings.ADMIN_NAME,
                password_hash=hash_password(settings.ADMIN_PASSWORD),
                role=UserRole.ADMIN.value,
            )
            db.add(admin)
            db.flush()
            logger.info(f"✓ Default admin user created (email: {settings.ADMIN_EMAIL})")

        exists = db.query(Contractor).filter(Contractor.inn == SAMPLE_CONTRACTOR["inn"]).first()
        if not exists:
            db.add(Contractor(**SAMPLE_CONTRACTOR, created_by=admin.id))
            logger.info("✓ Sample contractor created")

        db.commit()
        return True
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Error seeding admin user: {e}")
        return False
    finally:
        db.close()


def main():
    """Main initialization function."""
    logger.info("=" * 60)
    logger.info("DATABASE INITIALIZATION")
    logger.info("=" * 60)

    # Step 1: Wait for database
    if not wait_for_db():
        logger.error("Failed to connect to database")
        sys.exit(1)

    # Step 2: Migrate, falling back to create_all on a fresh database
    if not run_migrations():
        if check_tables_exist():
            logger.error("Migration failed on an existing schema")
            sys.exit(1)
        create_tables()

    # Step 3: Seed
    skip_seed = os.getenv("SKIP_SEED", "false").lower() == "true"
    if skip_seed:
        logger.info("SKIP_SEED is enabled, not creating the default admin")
    elif not seed_admin():
        sys.exit(1)

    logger.info("=" * 60)
    logger.info("DATABASE INITIALIZATION COMPLETE")
    logger.info("=" * 60)
    logger.info("")
    logger.info(f"  - API: http://localhost:{settings.PORT}/api/health")
    logger.info(f"  - Login with: {settings.ADMIN_EMAIL} / <ADMIN_PASSWORD>")
    logger.info("")


if __name__ == "__main__":
    main()
