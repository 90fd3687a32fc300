"""Inventory management backend: sessions, user administration, product catalog."""
