#!/usr/bin/env python3
"""
Trailer Finder Startup Script
"""

import asyncio
import shutil
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))


def generate_env_file():
    """Generate .env file from .env.example if it doesn't exist"""
    env_path = Path(__file__).parent.parent / ".env"
    env_example = Path(__file__).parent.parent / ".env.example"

    if not env_path.exists():
        if env_example.exists():
            shutil.copyfile(env_example, env_path)
            print("Generated .env file from .env.example - set TMDB_API_TOKEN in it")
        else:
            print("Warning: .env.example not found, using default configuration")


async def run_main_server():
    """Run main API server"""
    import uvicorn
    from trailerfinder.config import settings

    print(f"Main API server starting on http://{settings.HOST}:{settings.PORT}")

    config = uvicorn.Config(
        "trailerfinder.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=False,
        log_level="info",
        access_log=True,
    )
    server = uvicorn.Server(config)
    await server.serve()


async def main():
    """Check configuration, prepare the database and serve"""
    generate_env_file()

    from trailerfinder.config import settings
    from trailerfinder.database import init_db
    from trailerfinder.exceptions import ConfigurationError

    # Fail fast instead of sending unauthenticated requests
    try:
        settings.require_api_token()
    except ConfigurationError as e:
        print(f"Error: {e}")
        sys.exit(1)

    print("Initializing database...")
    await init_db()
    print("Database initialized successfully.")

    print(f"""
    Trailer Finder

      API Server:        http://{settings.HOST}:{settings.PORT}
       - API Documentation: http://{settings.HOST}:{settings.PORT}/docs
       - Search debounce:   {settings.SEARCH_DEBOUNCE_SECONDS}s
       - Race policy:       {settings.SEARCH_RACE_POLICY.value}

    Press CTRL+C to stop the server
    """)

    await run_main_server()


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        pass
