import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from config import CORS_ORIGINS, LOG_LEVEL
from routers import admin, auth, bookings, cities, home, language, tours, trains, transfers
from services.query_service import RemoteError

logging.basicConfig(
    level=LOG_LEVEL,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Silk Road Tours",
    description="Tours, cities, transfers and train tickets across Uzbekistan, backed by Firebase",
    version="1.0.0"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"]
)


@app.exception_handler(RemoteError)
async def remote_error_handler(request: Request, exc: RemoteError):
    # the backend's own message goes back to the caller unchanged
    logger.error("%s %s: %s on %s failed: %s",
                 request.method, request.url.path, exc.operation, exc.collection, exc.message)
    return JSONResponse(status_code=502, content={"detail": exc.message})


app.include_router(home.router)
app.include_router(tours.router)
app.include_router(cities.router)
app.include_router(bookings.router)
app.include_router(trains.router)
app.include_router(transfers.router)
app.include_router(language.router)
app.include_router(auth.router)
app.include_router(admin.router)


@app.get("/")
def root():
    return {
        "status":  "ok",
        "message": "Silk Road Tours API is running",
        "docs":    "/docs"
    }


@app.get("/health")
def health():
    return {"status": "healthy", "version": app.version}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("main:app", host="0.0.0.0", port=8000, log_level=LOG_LEVEL.lower())
