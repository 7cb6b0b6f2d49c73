"""Salman Books storefront service."""
