#!/usr/bin/env python3
"""
Run script for the Movies API.
This script launches the FastAPI server built by the application factory.
"""
import os
import sys
import traceback
import uvicorn
from dotenv import load_dotenv

# Pick up JWT_SECRET, DATABASE_URL and friends from a local .env file
load_dotenv()

if __name__ == "__main__":
    port = int(os.getenv("PORT", 8000))
    try:
        # Print information about the server
        print("Starting Movies API server...")
        print(f"Access the API at http://localhost:{port}")
        print(f"API documentation at http://localhost:{port}/docs")

        # Run the server
        uvicorn.run(
            "movies_api.main:create_app",
            factory=True,
            host="0.0.0.0",
            port=port,
            reload=os.getenv("RELOAD", "false").lower() == "true",
            log_level=os.getenv("LOG_LEVEL", "info").lower()
        )
    except Exception as e:
        print(f"Error starting server: {e}")
        traceback.print_exc()
        sys.exit(1)
