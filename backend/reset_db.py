#!/usr/bin/env python
"""Drop and recreate every table"""
from stockroom.database import engine, Base
from stockroom.models import Product, User  # noqa: F401

if __name__ == "__main__":
    print("Dropping existing tables...")
    Base.metadata.drop_all(bind=engine)

    print("Creating tables...")
    Base.metadata.create_all(bind=engine)

    print("Database reset complete")
