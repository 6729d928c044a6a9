"""Delete expired bearer tokens.

Expired tokens never authenticate, so this only reclaims space. Run it from
cron or by hand: ``python scripts/purge_expired_tokens.py``.
"""

import sys
from pathlib import Path

ROOT_DIR = Path(__file__).resolve().parent.parent
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from app import create_app  # noqa: E402
from services import get_auth_service  # noqa: E402


def main() -> int:
    app = create_app()
    with app.app_context():
        removed = get_auth_service().token_store.purge_expired()
        print(f"Removed {removed} expired token(s)")
    return removed


if __name__ == "__main__":
    main()
