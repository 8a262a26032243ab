from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from motorpicks.api.routes import admin, health, picks, results, wallet
from motorpicks.core.config import settings
from motorpicks.core.errors import MotorPicksError
from motorpicks.core.logging import configure_logging

configure_logging(settings.log_level)

app = FastAPI(title="MotorManía Picks API", version="0.1.0")

# Routers
app.include_router(health.router, tags=["system"])
app.include_router(admin.router, prefix="/admin", tags=["admin"])
app.include_router(picks.router, prefix="/picks", tags=["picks"])
app.include_router(results.router, prefix="/results", tags=["results"])
app.include_router(wallet.router, tags=["wallet"])

@app.exception_handler(MotorPicksError)
def domain_error(request: Request, exc: MotorPicksError):
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})

@app.get("/", include_in_schema=False)
def root():
    return {"message": "MotorManía Picks API - see /docs"}
