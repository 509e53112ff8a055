"""Health endpoints."""

from __future__ import annotations

from fastapi import APIRouter, status

router = APIRouter(tags=["health"])


@router.get("/health", status_code=status.HTTP_200_OK)
def health_root() -> dict:
    """Simple health check endpoint that doesn't require any dependencies."""
    return {"status": "ok"}


@router.get("/health/database", status_code=status.HTTP_200_OK)
def check_database() -> dict:
    """Check database connection and match table status."""
    from ...db.supabase import get_supabase_client
    from ...persistence.matches import MATCH_TABLES

    supabase = get_supabase_client()
    if not supabase:
        return {
            "configured": False,
            "message": "Supabase not configured. Set FM_SUPABASE_URL and FM_SUPABASE_KEY environment variables.",
        }

    tables: dict[str, bool] = {}
    errors: list[str] = []
    for table in MATCH_TABLES.values():
        try:
            supabase.table(table).select("driver_id").limit(1).execute()
            tables[table] = True
        except Exception as exc:
            tables[table] = False
            errors.append(f"{table}: {exc}")

    if errors and not any(tables.values()):
        return {
            "configured": True,
            "connected": False,
            "error": "; ".join(errors),
            "message": f"Database connection error: {errors[0]}",
        }

    return {
        "configured": True,
        "connected": True,
        "match_tables": tables,
        "message": "Database connected." if all(tables.values()) else "Database connected but match tables may not exist.",
    }
