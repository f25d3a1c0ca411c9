from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from proheadshot.config import ALLOWED_ORIGINS, logger

from .routers import router

# Initialize FastAPI application
app = FastAPI(
    title="ProHeadshot API",
    description="AI-powered professional headshot generation service",
    version="1.0.0",
)

app.include_router(router)


# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["X-RateLimit-Limit", "X-RateLimit-Remaining"],
)


logger.info("ProHeadshot API initialized successfully")
