# scripts/setup/create_admin.py
"""
Create an administrator account from the command line.
Usage: python scripts/setup/create_admin.py admin@example.com <credential> [phone]
"""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", ".."))

from aet_portal.database import SessionLocal, create_tables
from aet_portal.exceptions import AetError
from aet_portal.schemas.user import UserCreate
from aet_portal.services.store import Store
from aet_portal.services.user_service import register_user


def main(argv):
    if len(argv) < 3:
        print(__doc__.strip())
        sys.exit(2)

    email, password = argv[1], argv[2]
    phone = argv[3] if len(argv) > 3 else "0000000000"

    create_tables()
    db = SessionLocal()
    try:
        user = register_user(Store(db), UserCreate(
            email=email, password=password, full_name="Administrador", phone=phone,
        ), is_admin=True)
        print(f"✅ Admin created: {user.email} (id={user.id})")
    except AetError as e:
        print(f"❌ {e.message}")
        sys.exit(1)
    finally:
        db.close()


if __name__ == "__main__":
    main(sys.argv)
