# finanzas/auth.py
import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

import bcrypt
from fastapi import Header
from jose import JWTError, jwt

from finanzas.core.config import JWT_ALGORITHM, JWT_EXPIRA_HORAS, JWT_SECRET
from finanzas.core.errores import ErrorAutenticacion

logger = logging.getLogger("uvicorn.error")

# ------------------------------ Contraseñas ------------------------------
def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")

def verificar_password(password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # hash con formato inválido en la base
        return False

# ---------------------------------- JWT ----------------------------------
def crear_token(usuario_id: int, nombre: str, ahora: Optional[datetime] = None) -> str:
    ahora = ahora or datetime.now(timezone.utc)
    payload = {
        "id": usuario_id,
        "nombre": nombre,
        "exp": ahora + timedelta(hours=JWT_EXPIRA_HORAS),
    }
    return jwt.encode(payload, JWT_SECRET, algorithm=JWT_ALGORITHM)

def decodificar_token(token: str) -> dict:
    try:
        payload = jwt.decode(token, JWT_SECRET, algorithms=[JWT_ALGORITHM])
    except JWTError as e:
        logger.warning("Token rechazado: %s", e)
        raise ErrorAutenticacion("Token inválido o expirado.")
    if payload.get("id") is None:
        raise ErrorAutenticacion("Token inválido o expirado.")
    return payload

def get_current_user(authorization: Optional[str] = Header(None)) -> int:
    """Dependencia FastAPI: id del usuario del header `Authorization: Bearer <token>`."""
    if not authorization:
        raise ErrorAutenticacion("Token no enviado.")
    partes = authorization.split()
    if len(partes) != 2 or partes[0].lower() != "bearer":
        raise ErrorAutenticacion("Formato de token inválido. Usa: Bearer <token>.")
    token = partes[1]
    return int(decodificar_token(token)["id"])
