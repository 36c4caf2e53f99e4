# core/config.py
from __future__ import annotations
import os
from typing import List, Tuple

# ------------------------------- PostgreSQL ------------------------------
DEFAULT_DBNAME = os.getenv("PGDATABASE", "finanzas")
DEFAULT_USER   = os.getenv("PGUSER", "postgres")
DEFAULT_PASS   = os.getenv("PGPASSWORD", "postgres")
DEFAULT_HOST   = os.getenv("PGHOST", "localhost")
DEFAULT_PORT   = int(os.getenv("PGPORT", "5432"))

# SQLAlchemy (usuarios) usa la misma base salvo que se indique otra
DATABASE_URL = os.getenv(
    "DATABASE_URL",
    f"postgresql+psycopg2://{DEFAULT_USER}:{DEFAULT_PASS}@{DEFAULT_HOST}:{DEFAULT_PORT}/{DEFAULT_DBNAME}",
)

# ---------------------------------- JWT ----------------------------------
JWT_SECRET = os.getenv("JWT_SECRET", "cambia-este-secreto")
JWT_ALGORITHM = "HS256"
JWT_EXPIRA_HORAS = int(os.getenv("JWT_EXPIRA_HORAS", "24"))

# ---------------------------------- CORS ---------------------------------
def _lista(v: str) -> List[str]:
    return [x.strip() for x in v.split(",") if x.strip()]

CORS_ORIGINS = _lista(os.getenv("CORS_ORIGINS", "http://localhost:5173,http://127.0.0.1:5173"))

# --------------------------- Agrupación por día --------------------------
def _dias(v: str) -> Tuple[int, ...]:
    return tuple(int(x) for x in _lista(v))

DIAS_PRINCIPALES = _dias(os.getenv("DIAS_PRINCIPALES", "5,10,15,20,25,30"))
