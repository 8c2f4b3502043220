"""Remote listing and download clients.

Modules:
    base        — ListFetcher and ImageDownloader protocols
    http        — shared httpx plumbing (URL validation, status checks)
    listing     — PicsumListFetcher for the paginated listing endpoint
    downloader  — HttpImageDownloader for raw image bytes
"""
