"""Commerce bounded context: products, carts, and order placement.

Keeps cart contents, product stock, and order records consistent with each
other: stock-aware cart mutation, guest cart merging, and two-phase order
creation with compensation.
"""

import structlog
from protean.domain import Domain

commerce = Domain(name="commerce")

logger = structlog.get_logger(__name__)
