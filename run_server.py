"""
Run the crypto alert backend server.
"""
import os

from dotenv import load_dotenv

# Load environment before settings are read
load_dotenv(os.path.join(os.path.dirname(os.path.abspath(__file__)), ".env"))

import uvicorn

from cryptoalert.core.config import settings

if __name__ == "__main__":
    print("Starting Crypto Alert Backend Server...")
    print(f"API Docs: http://localhost:{settings.port}/docs")
    print("-" * 50)

    uvicorn.run(
        "cryptoalert.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
    )
