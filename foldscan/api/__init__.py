"""
Foldscan API - FastAPI application for product page scans.

Provides the POST /scan endpoint plus screenshot hosting and health checks.
"""
