#!/usr/bin/env python3
"""
YourStylist API startup script
"""

import sys
from pathlib import Path

import uvicorn
from decouple import config


def main():
    """Start the YourStylist API"""

    current_dir = Path(__file__).parent

    # Check for .env file
    env_file = current_dir / ".env"
    if not env_file.exists():
        print("Warning: .env file not found!")
        print("Add your keys to a .env file next to run.py:")
        print("  OPENAI_API_KEY=your_api_key_here")
        print("  OPENWEATHERMAP_API_KEY=your_api_key_here")
        print("  JWT_SECRET_KEY=a_long_random_secret")
        print()

    host = str(config("HOST", default="0.0.0.0"))
    port = config("PORT", default=8000, cast=int)
    reload = config("RELOAD", default=False, cast=bool)

    print("Starting YourStylist API...")
    print(f"API documentation at: http://localhost:{port}/docs")
    print()

    try:
        uvicorn.run(
            "yourstylist.main:app",
            host=host,
            port=port,
            reload=reload,
            log_level=str(config("LOG_LEVEL", default="info")).lower(),
            reload_dirs=["yourstylist"] if reload else None,
        )
    except KeyboardInterrupt:
        print("\nYourStylist API stopped.")
    except Exception as e:
        print(f"Error starting application: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
