"""
Main entrypoint for the FastAPI server
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.routing import APIRoute
from core.lifespan import lifespan
from core.config import get_settings

from api.files.routes import router as files_router


# Customize route id's
# Helpful for creating sensible names in the client
def custom_generate_unique_id(route: APIRoute):
    """ Generate unique route IDs based on route name """
    return f"{route.name}"  # these must be unique


# Create schema & router
app = FastAPI(
    title="File Index API",
    lifespan=lifespan,
    generate_unique_id_function=custom_generate_unique_id
)

# CORS settings to allow client-server communication
# Set with env variable
origins = [get_settings().client_origin] if get_settings().client_origin else []

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# REST routers
# Add each api/feature folder here
API_PREFIX = "/api/v1"

app.include_router(files_router, prefix=API_PREFIX)


# Health check endpoint for monitoring
@app.get("/api/health", tags=["health"])
def health_check():
    return {"status": "ok", "message": "File Index API is running"}


if __name__ == "__main__":
    # For debugging purposes
    import uvicorn

    uvicorn.run("main:app", host="0.0.0.0", port=8000, reload=True)
