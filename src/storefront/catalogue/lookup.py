"""Product lookup — read-only queries backing the shopper tools.

All queries are scoped to one workspace and only ever return active products
with stock left. Ranking is done here because the memory and SQL providers
expose plain attribute filters only.
"""

import math

from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from storefront.catalogue.product import Product, ProductStatus
from storefront.domain import logger
from storefront.errors import InvalidRequestError, NotFoundError
from storefront.settings import load_settings

DEFAULT_RESULT_LIMIT = 5
HYBRID_SIMILARITY_WEIGHT = 0.7

# Keyword relevance tiers
_EXACT_TITLE = 4
_TITLE_PREFIX = 3
_TITLE_CONTAINS = 2
_OTHER_FIELD = 1


def _sellable_products(workspace_id, category=None, max_price=None) -> list[Product]:
    filters = {"workspace_id": str(workspace_id), "status": ProductStatus.ACTIVE.value}
    if category:
        filters["category"] = category

    products = current_domain.repository_for(Product)._dao.query.filter(**filters).all().items
    # A ceiling of 0 means no ceiling.
    return [p for p in products if (p.stock or 0) > 0 and (not max_price or p.price <= max_price)]


def get_sellable_product(workspace_id, product_id) -> Product:
    """Load an active product of the workspace, or raise NotFoundError.

    Stock is deliberately not checked here; callers compare it against the
    quantity they need.
    """
    try:
        product = current_domain.repository_for(Product).get(str(product_id))
    except ObjectNotFoundError:
        raise NotFoundError("Product not found") from None

    if str(product.workspace_id) != str(workspace_id) or product.status != ProductStatus.ACTIVE.value:
        raise NotFoundError("Product not found")
    return product


def browse_catalog(workspace_id, limit: int | None = None) -> list[dict]:
    """Newest sellable products first."""
    products = sorted(
        _sellable_products(workspace_id),
        key=lambda p: p.created_at.timestamp() if p.created_at else 0.0,
        reverse=True,
    )
    return [p.to_summary() for p in products[: limit or DEFAULT_RESULT_LIMIT]]


def keyword_score(product: Product, query: str) -> int:
    """Relevance of ``product`` for a free-text query; 0 means no match."""
    needle = query.strip().lower()
    if not needle:
        return 0

    title = (product.title or "").lower()
    if title == needle:
        return _EXACT_TITLE
    if title.startswith(needle):
        return _TITLE_PREFIX
    if needle in title:
        return _TITLE_CONTAINS

    haystack = " ".join(
        [
            title,
            (product.sku or "").lower(),
            (product.description or "").lower(),
            (product.category or "").lower(),
            " ".join(product.tag_list()).lower(),
        ]
    )
    if all(token in haystack for token in needle.split()):
        return _OTHER_FIELD
    return 0


def search_products(
    workspace_id,
    query: str,
    category: str | None = None,
    max_price: float | None = None,
    limit: int = DEFAULT_RESULT_LIMIT,
) -> list[dict]:
    if not query or not query.strip():
        raise InvalidRequestError("Missing required parameters")

    scored = [(keyword_score(p, query), p) for p in _sellable_products(workspace_id, category, max_price)]
    ranked = sorted((item for item in scored if item[0] > 0), key=lambda item: (-item[0], item[1].title or ""))

    logger.debug("products_searched", workspace_id=str(workspace_id), query=query, matches=len(ranked))
    return [p.to_summary() for _, p in ranked[:limit]]


def cosine_similarity(left: list[float], right: list[float]) -> float:
    if len(left) != len(right):
        return 0.0
    dot = sum(a * b for a, b in zip(left, right, strict=True))
    norm = math.sqrt(sum(a * a for a in left)) * math.sqrt(sum(b * b for b in right))
    if norm == 0:
        return 0.0
    return dot / norm


def vector_search_products(
    workspace_id,
    embedding: list[float],
    match_threshold: float = 0.7,
    match_count: int = 10,
    category: str | None = None,
    max_price: float | None = None,
    search_type: str = "vector",
    search_query: str | None = None,
) -> list[dict]:
    """Rank sellable products by embedding similarity.

    ``search_type="hybrid"`` with a ``search_query`` blends the keyword score
    into the ranking and also admits keyword matches below the threshold.
    """
    dimensions = load_settings().embedding_dimensions
    if len(embedding) != dimensions:
        raise InvalidRequestError(f"Invalid embedding dimension: expected {dimensions}, got {len(embedding)}")
    if search_type not in ("vector", "hybrid"):
        raise InvalidRequestError(f"Unknown search type: {search_type}")

    hybrid = search_type == "hybrid" and bool(search_query)
    results = []
    for product in _sellable_products(workspace_id, category, max_price):
        vector = product.embedding_vector()
        similarity = cosine_similarity(embedding, vector) if vector else 0.0
        keyword = keyword_score(product, search_query) if hybrid else 0

        if hybrid:
            if similarity < match_threshold and keyword == 0:
                continue
            score = HYBRID_SIMILARITY_WEIGHT * similarity + (1 - HYBRID_SIMILARITY_WEIGHT) * keyword / _EXACT_TITLE
        else:
            if similarity < match_threshold:
                continue
            score = similarity

        results.append((score, similarity, product))

    results.sort(key=lambda item: item[0], reverse=True)
    logger.debug(
        "products_vector_searched",
        workspace_id=str(workspace_id),
        search_type=search_type,
        matches=len(results),
    )
    return [{**p.to_summary(), "similarity": round(similarity, 4)} for _, similarity, p in results[:match_count]]
