"""
db/init_db.py
-------------
Schema for the PostgreSQL document store. `main.py` applies it on every
start; it can also be run on its own against a fresh database:
    python -m db.init_db
"""

import psycopg2

from db.connection import init_pool, pooled_connection, rollback_quietly
from utils.errors import StoreError
from utils.logger import get_logger

logger = get_logger(__name__)

SCHEMA_SQL = """
-- One row per document; users, posts, follows, likes and saves share the table.
-- COLLATE "C" makes ORDER BY key byte-wise, i.e. creation order.
CREATE TABLE IF NOT EXISTS documents (
    collection      VARCHAR(50) NOT NULL,
    key             VARCHAR(40) COLLATE "C" NOT NULL,
    data            JSONB NOT NULL,
    updated_at      TIMESTAMPTZ DEFAULT NOW(),
    PRIMARY KEY (collection, key)
);

-- Serves the `data @> {...}` equality queries.
CREATE INDEX IF NOT EXISTS idx_documents_data
    ON documents USING GIN (data jsonb_path_ops);
"""


def create_tables() -> None:
    """
    Apply SCHEMA_SQL. Idempotent.

    Raises:
        StoreError: If the statements fail.
    """
    with pooled_connection() as conn:
        try:
            with conn.cursor() as cur:
                cur.execute(SCHEMA_SQL)
            conn.commit()
        except psycopg2.Error as e:
            rollback_quietly(conn)
            logger.error(f"Schema setup failed: {e}")
            raise StoreError(f"Schema setup failed: {e}") from e
    logger.info("Document schema is in place.")


if __name__ == "__main__":
    init_pool()
    create_tables()
    print("✅ Document schema created.")
