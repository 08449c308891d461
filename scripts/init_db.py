from __future__ import annotations

import importlib
import logging
import sys
from pathlib import Path

from dotenv import load_dotenv

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from src.hrms.hrms.database.bootstrap import apply_schema, list_tables
from src.hrms.hrms.main import configure_logging
from src.hrms.hrms.policy.service import PolicyService
from src.hrms.hrms.policy.mysql_policy_repository import MySQLPolicyRepository
from src.hrms.hrms.database.connection import DatabaseConnection, DBConfig

logger = logging.getLogger("hrms.init_db")


def main() -> None:
    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))
    db_config = dict(settings.DB_CONFIG)

    schema_path = REPO_ROOT / "database" / "schema.sql"
    apply_schema(db_config, schema_path=schema_path)

    policies = PolicyService(MySQLPolicyRepository(DatabaseConnection(DBConfig.from_mapping(db_config))))
    policy = policies.get_active()

    tables = list_tables(db_config)
    logger.info(
        "Applied schema.sql -> %s@%s:%s/%s (tables=%d, work_hours=%s)",
        db_config.get("user"),
        db_config.get("host"),
        db_config.get("port", 3306),
        db_config.get("database"),
        len(tables),
        policy.work_hours,
    )


if __name__ == "__main__":
    main()
