"""
scripts/view_users.py

Print every registered user from the project root:

    python -m scripts.view_users
"""

import sys
import os

# Make sure the package is importable when run from a checkout
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from revistete.core.database import SessionLocal, init_db
from revistete.models.user import User


def format_user(index: int, user: User) -> str:
    status = "active" if user.is_active else "deactivated"
    created = user.created_at.strftime("%Y-%m-%d") if user.created_at else "-"
    city = (user.location or {}).get("city") or "-"
    return (
        f"{index}. {user.name} <{user.email}>\n"
        f"   ID:      {user.id}\n"
        f"   Phone:   {user.phone}\n"
        f"   City:    {city}\n"
        f"   Status:  {status}\n"
        f"   Joined:  {created}"
    )


def collect_user_lines(db) -> list[str]:
    users = db.query(User).order_by(User.created_at.desc()).all()
    return [format_user(i, u) for i, u in enumerate(users, start=1)]


def view_users():
    init_db()
    db = SessionLocal()
    try:
        lines = collect_user_lines(db)
    finally:
        db.close()

    print("\n── Registered users ─────────────────────")
    if not lines:
        print("No users found.")
    for line in lines:
        print(line)
    print(f"\nTotal: {len(lines)}\n")


if __name__ == "__main__":
    view_users()
