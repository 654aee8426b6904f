"""Example: use the service layer directly (no Flask).

Controllers are thin; the workflow lives in the services.
"""

import importlib

from config import get_settings_module

from gate_pass.container import build_container


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(
        db_config=settings.DB_CONFIG,
        upload_folder=settings.UPLOAD_FOLDER,
        secret_key=settings.SECRET_KEY,
    )
    container.open()
    try:
        for row in container.pass_service.list_by_status(status="pending"):
            print(row.gate_pass.pass_id, row.student.name, row.gate_pass.out_date, row.gate_pass.out_time)
    finally:
        container.close()


if __name__ == "__main__":
    main()
