"""Commerce bounded context — Cart Pricing, Checkout and Order Lifecycle.

Prices a session cart, assembles checkouts (cart or "buy now"), places
orders and moves them through their status lifecycle, one at a time or in
bulk.
"""

from protean.domain import Domain

commerce = Domain(name="commerce")
