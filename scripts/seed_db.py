from __future__ import annotations

import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
for p in (REPO_ROOT, REPO_ROOT / "src" / "gate_pass"):
    if str(p) not in sys.path:
        sys.path.insert(0, str(p))

from config import get_settings_module

from gate_pass.database.bootstrap import DEFAULT_STAFF, ensure_default_staff


def main() -> None:
    settings = importlib.import_module(get_settings_module())
    db_config = dict(settings.DB_CONFIG)

    ensure_default_staff(db_config)
    print(
        "OK: Default accounts ready ("
        + ", ".join(username for username, *_ in DEFAULT_STAFF)
        + f") -> {db_config.get('user')}@{db_config.get('host')}/{db_config.get('database')}"
    )


if __name__ == "__main__":
    main()
