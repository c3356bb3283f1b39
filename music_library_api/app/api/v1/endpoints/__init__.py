"""
Endpoint modules for API v1, one ``APIRouter`` per entity kind.  They
are aggregated in ``router.py`` at the package level.
"""
