"""Read-only membership lookups against the saved items table."""

from typing import Iterable, Set

from psycopg import Connection, sql

from .connection import store_errors


class SavedItemsIndex:
    """Set of URLs the user has saved elsewhere."""

    def __init__(self, table: str = "saved_items", url_column: str = "url") -> None:
        self.table = table
        self.url_column = url_column

    def find_saved_urls(self, conn: Connection, urls: Iterable[str]) -> Set[str]:
        """Return the subset of ``urls`` present in the index."""
        candidates = sorted(set(urls))
        if not candidates:
            return set()

        query = sql.SQL("SELECT {col} AS url FROM {table} WHERE {col} = ANY(%s)").format(
            col=sql.Identifier(self.url_column),
            table=sql.Identifier(self.table),
        )
        with store_errors(conn, "look up saved items"):
            with conn.cursor() as cur:
                cur.execute(query, (candidates,))
                return {row["url"] for row in cur.fetchall()}
