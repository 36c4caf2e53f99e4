# finanzas/app.py
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from finanzas.core.config import CORS_ORIGINS
from finanzas.core.dbutils import ensure_tablas, get_conn
from finanzas.core.errores import ErrorFinanzas
from finanzas.db import init_db
from finanzas.routers import ahorro, chatbot, cuentas_fijas, gastos, health, ingresos, panel, usuarios

logger = logging.getLogger("uvicorn.error")

@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    conn = get_conn()
    try:
        ensure_tablas(conn)
    finally:
        conn.close()
    yield

app = FastAPI(title="Finanzas API", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)

@app.exception_handler(ErrorFinanzas)
async def error_finanzas(request: Request, exc: ErrorFinanzas):
    if exc.status_code >= 500:
        logger.error("%s %s -> %s", request.method, request.url.path, exc.mensaje)
    return JSONResponse(status_code=exc.status_code, content={"ok": False, "detail": exc.mensaje})

# monta routers
app.include_router(health.router)
app.include_router(usuarios.router)
app.include_router(gastos.router)
app.include_router(chatbot.router)
app.include_router(cuentas_fijas.router)
app.include_router(ingresos.router)
app.include_router(ahorro.router)
app.include_router(panel.router)

@app.get("/")
def root():
    return {"name": "Finanzas API", "ok": True}
