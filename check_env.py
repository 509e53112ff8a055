#!/usr/bin/env python3
"""Check the .env file for the matching service, creating a template if missing."""

from pathlib import Path
import os
import sys

TEMPLATE = """# Supabase (required): https://supabase.com/dashboard -> Project -> Settings -> API
FM_SUPABASE_URL=https://your-project-id.supabase.co
FM_SUPABASE_KEY=your-service-role-key-here

# API
FM_API_PREFIX=/api
# FM_FRONTEND_ALLOWED_ORIGINS=http://localhost:5173,http://127.0.0.1:5173

# Matching (defaults shown)
# FM_DEFAULT_RADIUS_KM=50
# FM_SCORE_NORMALIZATION_M=50000
# FM_MIN_MATCH_SCORE=0.1
# FM_CANDIDATE_PAGE_SIZE=200
# FM_URBAN_SERVICE_TYPES=FRETE_MOTO,GUINCHO,MUDANCA,PICAPE,FRETE_URBANO,MOTO,GUINCHO_URBANO
"""


def _mask(value: str, keep: int = 12) -> str:
    if len(value) <= keep * 2:
        return value[:4] + "..."
    return value[:keep] + "..." + value[-6:]


def main() -> int:
    project_root = Path(__file__).parent
    env_file = project_root / ".env"

    print("=" * 60)
    print("Freight matching environment check")
    print("=" * 60)

    if not env_file.exists():
        env_file.write_text(TEMPLATE, encoding="utf-8")
        print(f"Created template .env at {env_file}")
        print("Edit it and add your Supabase credentials, then run this again.")
        return 1

    print(f"Found .env at {env_file}")
    for line in env_file.read_text(encoding="utf-8").splitlines():
        if line.startswith("FM_SUPABASE_KEY=") and "=" in line:
            name, value = line.split("=", 1)
            print(f"  {name}={_mask(value.strip())}")
        elif line.strip() and not line.startswith("#"):
            print(f"  {line}")
    print()

    for name in ("FM_SUPABASE_URL", "FM_SUPABASE_KEY"):
        if os.getenv(name):
            print(f"{name} is set in the process environment (overrides .env)")

    sys.path.insert(0, str(project_root / "src"))
    try:
        from freight_matching.config import settings
    except Exception as e:
        print(f"Error loading config: {e}")
        print("Make sure you're running this from the project root directory")
        return 1

    print(f"Default radius:        {settings.default_radius_km} km")
    print(f"Score normalization:   {settings.score_normalization_m} m")
    print(f"Candidate page size:   {settings.candidate_page_size}")
    print(f"Urban service types:   {', '.join(settings.urban_service_types)}")
    print()

    if settings.supabase_url and settings.supabase_key:
        print("SUCCESS: Supabase is configured")
        return 0

    print("ERROR: Supabase is NOT configured")
    print("1. Variables must start with the FM_ prefix")
    print("2. No spaces around the = sign")
    print("3. Restart the backend after editing .env")
    return 1


if __name__ == "__main__":
    sys.exit(main())
