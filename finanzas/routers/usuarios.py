# routers/usuarios.py
import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from finanzas import crud
from finanzas.auth import crear_token, hash_password, verificar_password
from finanzas.core.errores import ErrorAutenticacion, ErrorValidacion
from finanzas.db import get_db
from finanzas.schemas import LoginInput, Token, UsuarioCreate, UsuarioOut

logger = logging.getLogger("uvicorn.error")

router = APIRouter(prefix="/usuarios", tags=["Usuarios"])

@router.post("/registro", status_code=201)
def registrar_usuario(body: UsuarioCreate, db: Session = Depends(get_db)):
    if not body.nombre.strip() or not body.password:
        raise ErrorValidacion("Completa todos los campos.")
    usuario = crud.crear_usuario(db, body.nombre.strip(), body.email, hash_password(body.password))
    logger.info("Usuario registrado id=%s", usuario.id)
    return {"ok": True, "data": UsuarioOut.model_validate(usuario).model_dump()}

@router.post("/login", response_model=Token)
def login(body: LoginInput, db: Session = Depends(get_db)):
    usuario = crud.obtener_por_email(db, body.email)
    if not usuario or not verificar_password(body.password, usuario.password_hash):
        raise ErrorAutenticacion("Credenciales inválidas.")
    return Token(access_token=crear_token(usuario.id, usuario.nombre))

@router.get("")
def listar_usuarios(db: Session = Depends(get_db)):
    rows = crud.listar_usuarios(db)
    return {"ok": True, "data": [UsuarioOut.model_validate(u).model_dump() for u in rows]}
