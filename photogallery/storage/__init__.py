"""Local persistence: blobs on disk plus a SQLite metadata table.

Modules:
    base    — ImageStore protocol
    models  — SQLAlchemy ``SavedImage`` model
    store   — SqlImageStore implementation
"""
