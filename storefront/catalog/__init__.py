"""
Catalog package of the storefront.

It wraps the backend book catalog: a small HTTP client returning
validated ``Book`` models, per-view queries that keep only the newest
result, and the routes serving the home, shop and book detail views.
"""
