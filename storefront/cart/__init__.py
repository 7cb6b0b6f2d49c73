"""Shopping cart: pure operations, persisted store and cart views."""
