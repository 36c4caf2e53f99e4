# finanzas/crud.py
from typing import List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from finanzas.core.errores import Conflicto
from finanzas.models import Usuario

def crear_usuario(db: Session, nombre: str, email: str, password_hash: str) -> Usuario:
    usuario = Usuario(nombre=nombre, email=email, password_hash=password_hash)
    db.add(usuario)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise Conflicto("Ya existe un usuario con ese email.")
    db.refresh(usuario)
    return usuario

def obtener_por_email(db: Session, email: str) -> Optional[Usuario]:
    return db.query(Usuario).filter(Usuario.email == email).first()

def listar_usuarios(db: Session) -> List[Usuario]:
    return db.query(Usuario).order_by(Usuario.id).all()
