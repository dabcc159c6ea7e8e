"""Relevance search over gyms and machines."""

from typing import Optional

from fitcore.core.pagination import Page, ScoreDescCursor, score_desc_page
from fitcore.infrastructure.database.repositories.base import BaseRepository
from fitcore.infrastructure.database.repositories.keyset import fetch_size
from fitcore.models import SearchHit, SearchKind

# Minimum trigram similarity for a fuzzy (non-prefix) match
SIMILARITY_THRESHOLD = 0.3


class SearchRepository(BaseRepository[SearchHit]):
    """Ranks gyms or machines by relevance (score DESC, id ASC).

    Scoring runs in the ``search_catalog`` SQL function on ``pg_trgm``
    similarity of the query against the entity name.
    """

    def table_name(self) -> str:
        """Return the function name; searches span two tables."""
        return "search_catalog"

    def search(
        self,
        query: str,
        kind: SearchKind,
        limit: int,
        cursor: Optional[ScoreDescCursor] = None,
        prefix: bool = False,
    ) -> Page[SearchHit]:
        """Search one entity kind.

        Args:
            query: Free text query
            kind: Entity kind to search
            limit: Page size
            cursor: Position after which to resume, if any
            prefix: Match name or word prefixes only

        Returns:
            Page of hits ordered by score DESC, id ASC
        """
        size = fetch_size(limit)

        params = {
            "p_query": query,
            "p_kind": kind.value,
            "p_prefix": prefix,
            "p_threshold": SIMILARITY_THRESHOLD,
            "p_after_score": cursor.score if cursor else None,
            "p_after_id": cursor.id if cursor else None,
            "p_limit": size,
        }
        rows = self._execute("search", self.db.rpc(self.table_name(), params))

        return score_desc_page(
            [SearchHit(id=row["id"], kind=kind, name=row["name"], score=row["score"]) for row in rows],
            limit,
            lambda hit: ScoreDescCursor(score=hit.score, id=hit.id),
        )
