"""
API router aggregator — wires all endpoint modules together.
"""

from fastapi import APIRouter

from storefront.api.v1.endpoints import auth, cart, health, orders, products, profile

api_router = APIRouter()

# Signup / login
api_router.include_router(auth.router)

# Own profile, admin user listing
api_router.include_router(profile.router)

# Catalog
api_router.include_router(products.router)

# Cart pricing and checkout
api_router.include_router(cart.router)
api_router.include_router(orders.router)

api_router.include_router(health.router)
