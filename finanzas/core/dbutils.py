# core/dbutils.py
from __future__ import annotations
import logging
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Dict, List

import psycopg2

from finanzas.core.config import (
    DEFAULT_DBNAME, DEFAULT_USER, DEFAULT_PASS, DEFAULT_HOST, DEFAULT_PORT,
)

logger = logging.getLogger("uvicorn.error")

# ------------------------------- Conexión --------------------------------
def get_conn():
    try:
        conn = psycopg2.connect(
            dbname=DEFAULT_DBNAME, user=DEFAULT_USER, password=DEFAULT_PASS,
            host=DEFAULT_HOST, port=DEFAULT_PORT, options="-c client_encoding=UTF8",
        )
        conn.autocommit = True
        return conn
    except Exception:
        logger.exception("Fallo de conexión a PostgreSQL")
        raise

# --------------------------- Utilidades varias ---------------------------
def _fix_json(rows: List[Dict[str, Any]]):
    def f(v):
        if isinstance(v, Decimal): return float(v)
        if isinstance(v, (date, datetime)): return v.isoformat()
        return v
    return [{k: f(v) for k, v in r.items()} for r in rows]

# ---------------------------- ensure_* helpers ---------------------------
def ensure_gastos_table(conn):
    with conn.cursor() as cur:
        cur.execute("""
            CREATE TABLE IF NOT EXISTS gastos (
                id SERIAL PRIMARY KEY,
                usuario_id INTEGER NOT NULL,
                descripcion TEXT NOT NULL,
                categoria VARCHAR(120) NOT NULL,
                valor NUMERIC(14,2) NOT NULL CHECK (valor >= 0),
                fecha TIMESTAMP WITHOUT TIME ZONE NOT NULL DEFAULT NOW()
            );
        """)
        cur.execute("""
            CREATE INDEX IF NOT EXISTS ix_gastos_usuario_fecha
            ON gastos (usuario_id, fecha);
        """)

def ensure_cuentas_fijas_table(conn):
    with conn.cursor() as cur:
        cur.execute("""
            CREATE TABLE IF NOT EXISTS cuentas_fijas (
                id SERIAL PRIMARY KEY,
                usuario_id INTEGER NOT NULL,
                descripcion TEXT NOT NULL,
                valor_total NUMERIC(14,2) NOT NULL CHECK (valor_total >= 0),
                dia_vencimiento SMALLINT NOT NULL CHECK (dia_vencimiento BETWEEN 1 AND 31),
                categoria VARCHAR(80) NOT NULL DEFAULT 'tarjeta',
                estado VARCHAR(10) NOT NULL DEFAULT 'activo',
                created_at TIMESTAMP WITHOUT TIME ZONE NOT NULL DEFAULT NOW()
            );
        """)

def ensure_ingresos_table(conn):
    with conn.cursor() as cur:
        cur.execute("""
            CREATE TABLE IF NOT EXISTS ingresos (
                id SERIAL PRIMARY KEY,
                usuario_id INTEGER NOT NULL,
                descripcion TEXT NOT NULL,
                valor NUMERIC(14,2) NOT NULL CHECK (valor >= 0),
                dia_recibo SMALLINT NOT NULL CHECK (dia_recibo BETWEEN 1 AND 31),
                tipo VARCHAR(20) NOT NULL,
                recurrencia VARCHAR(20) NOT NULL DEFAULT 'mensual',
                created_at TIMESTAMP WITHOUT TIME ZONE NOT NULL DEFAULT NOW()
            );
        """)

def ensure_ahorros_table(conn):
    """Un (1) ahorro por usuario."""
    with conn.cursor() as cur:
        cur.execute("""
            CREATE TABLE IF NOT EXISTS ahorros (
                id SERIAL PRIMARY KEY,
                usuario_id INTEGER NOT NULL,
                valor_actual NUMERIC(14,2) NOT NULL DEFAULT 0 CHECK (valor_actual >= 0),
                valor_meta NUMERIC(14,2) NOT NULL DEFAULT 0 CHECK (valor_meta >= 0),
                fecha_actualizacion DATE,
                UNIQUE (usuario_id)
            );
        """)

def ensure_tablas(conn):
    ensure_gastos_table(conn)
    ensure_cuentas_fijas_table(conn)
    ensure_ingresos_table(conn)
    ensure_ahorros_table(conn)
