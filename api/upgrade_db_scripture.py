import sys

from dotenv import load_dotenv

load_dotenv()

from core.config import SCRIPTURE_DB  # noqa: E402
from utils.db import ensure_schema, get_db  # noqa: E402

# --- HELPERS ----------------------------------------------------------------

def table_exists(cursor, table_name: str) -> bool:
    cursor.execute(
        "SELECT name FROM sqlite_master WHERE type='table' AND name=?;",
        (table_name,)
    )
    return cursor.fetchone() is not None


def row_count(cursor, table_name: str) -> int:
    cursor.execute(f"SELECT COUNT(*) FROM {table_name};")
    return cursor.fetchone()[0]

# --- MAIN UPGRADE LOGIC -----------------------------------------------------

def main(db_path: str = None) -> int:
    db_path = db_path or SCRIPTURE_DB
    print(f"[*] Connecting to DB at: {db_path}")
    conn = get_db(db_path)
    cursor = conn.cursor()

    try:
        missing = [t for t in ("scripture_cache", "bible_verses") if not table_exists(cursor, t)]
        for table in missing:
            print(f"[+] Creating table: {table}")

        ensure_schema(conn)

        for table in ("scripture_cache", "bible_verses"):
            print(f"[✓] {table}: {row_count(cursor, table)} rows")

        print("[✓] Scripture schema is up to date.")
        return 0
    except Exception as e:
        conn.rollback()
        print(f"[X] Error during upgrade: {e}")
        return 1
    finally:
        conn.close()


if __name__ == "__main__":
    sys.exit(main(sys.argv[1] if len(sys.argv) > 1 else None))
