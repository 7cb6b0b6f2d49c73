"""Checkout: order building, single-flight submission and checkout views."""
