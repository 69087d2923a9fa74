import logging
from typing import Optional

from dotenv import load_dotenv
from fastapi import Depends, FastAPI, Request, HTTPException, status
from fastapi.exception_handlers import http_exception_handler
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import RedirectResponse
from sqlalchemy.orm import Session

from .auth import get_optional_user
from .config import CORS_ORIGINS, LOG_LEVEL
from .models import create_tables, get_db
from .navigation import is_protected_path, resolve_redirect, sign_in_redirect_url
from .profiles import has_profile
from .routers import auth, profile, stylist

# Load environment variables from .env file
load_dotenv()

logging.basicConfig(
    level=LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s"
)

# API pages a browser may land on directly
BROWSER_GUARDED_PREFIXES = ("/profile", "/stylist")

# Create FastAPI app instance
app = FastAPI(
    title="YourStylist",
    description="AI styling suggestions: hairstyles, wardrobe, outfit ratings, colors and virtual try-on",
    version="1.0.0",
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=list(CORS_ORIGINS),
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS", "PATCH"],
    allow_headers=[
        "Authorization",
        "Content-Type",
        "Accept",
        "Origin",
        "User-Agent",
        "Cache-Control",
        "X-Requested-With",
    ],
    expose_headers=["*"],
)

# Initialize database tables
create_tables()


@app.exception_handler(HTTPException)
async def custom_http_exception_handler(request: Request, exc: HTTPException):
    """Send browsers that hit a protected page without credentials to sign in"""

    if exc.status_code in (status.HTTP_401_UNAUTHORIZED, status.HTTP_403_FORBIDDEN):
        path = request.url.path
        if is_protected_path(path) or path.startswith(BROWSER_GUARDED_PREFIXES):
            # Only web page requests, not API calls
            accept_header = request.headers.get("accept", "")
            if "text/html" in accept_header:
                return RedirectResponse(url=sign_in_redirect_url(path), status_code=302)

    # For API requests or other errors, return default JSON response
    return await http_exception_handler(request, exc)


# Include routers
app.include_router(auth.router)
app.include_router(profile.router)
app.include_router(stylist.router)


@app.get("/navigation/resolve")
async def resolve_navigation(
    path: str,
    current_user=Depends(get_optional_user),
    db: Session = Depends(get_db),
):
    """Where the client should go before rendering the given page"""
    authenticated = current_user is not None
    profile_exists = authenticated and has_profile(db, current_user)
    redirect: Optional[str] = resolve_redirect(path, authenticated, profile_exists)
    return {
        "path": path,
        "authenticated": authenticated,
        "has_profile": profile_exists,
        "redirect": redirect,
    }


@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {"status": "healthy", "message": "YourStylist API is running"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000, log_level="debug")
