from typing import Any, Optional

from pydantic import BaseModel, EmailStr

# -------- Auth / Usuario --------
class UsuarioCreate(BaseModel):
    nombre: str
    email: EmailStr
    password: str

class UsuarioOut(BaseModel):
    id: int
    nombre: str
    email: EmailStr
    model_config = {"from_attributes": True}  # Pydantic v2

class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"

class LoginInput(BaseModel):
    email: EmailStr
    password: str

# -------- Gastos --------
# Los montos llegan tal cual (número o texto con ',' o '.'); la validación
# la hace core/ para responder 400 con un mensaje propio.
class GastoIn(BaseModel):
    descripcion: Optional[str] = None
    categoria: Optional[str] = None
    valor: Optional[Any] = None

# -------- Chatbot --------
class MensajeIn(BaseModel):
    mensaje: Optional[str] = None

# -------- Cuentas fijas --------
class CuentaFijaIn(BaseModel):
    id: Optional[int] = None
    descripcion: Optional[str] = None
    valor_total: Optional[Any] = None
    dia_vencimiento: Optional[Any] = None
    categoria: Optional[str] = None
    estado: Optional[str] = None

# -------- Ingresos --------
class IngresoIn(BaseModel):
    id: Optional[int] = None
    descripcion: Optional[str] = None
    valor: Optional[Any] = None
    dia_recibo: Optional[Any] = None
    tipo: Optional[str] = None
    recurrencia: Optional[str] = None

# -------- Ahorro --------
class AhorroIn(BaseModel):
    valor_actual: Optional[Any] = None
    valor_meta: Optional[Any] = None

class ValorIn(BaseModel):
    valor: Optional[Any] = None
