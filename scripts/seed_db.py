from __future__ import annotations

import argparse
import importlib
import sys
from pathlib import Path

SRC_ROOT = Path(__file__).resolve().parents[1] / "src"
if str(SRC_ROOT) not in sys.path:
    sys.path.insert(0, str(SRC_ROOT))

from dotenv import load_dotenv

from attendsys.config import get_settings_module
from attendsys.database.bootstrap import ensure_admin_profile


def main() -> None:
    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    db_config = dict(settings.DB_CONFIG)

    parser = argparse.ArgumentParser(description="Create or reset the bootstrap admin profile.")
    parser.add_argument("--email", default=getattr(settings, "SEED_ADMIN_EMAIL", ""))
    parser.add_argument("--password", default=getattr(settings, "SEED_ADMIN_PASSWORD", ""))
    parser.add_argument("--name", default="Administrator")
    args = parser.parse_args()

    if not args.email or not args.password:
        parser.error("admin email and password are required (flags or SEED_ADMIN_EMAIL/SEED_ADMIN_PASSWORD)")

    profile_id = ensure_admin_profile(db_config, email=args.email, password=args.password, name=args.name)

    print(
        "OK: Seeded admin "
        f"{args.email} ({profile_id}) -> "
        f"{db_config.get('user')}@{db_config.get('host')}:{db_config.get('port', 3306)}/{db_config.get('database')}"
    )


if __name__ == "__main__":
    main()
