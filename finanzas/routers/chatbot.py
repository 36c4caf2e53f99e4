# routers/chatbot.py
from fastapi import APIRouter, Depends

from finanzas.auth import get_current_user
from finanzas.core.chatbot import Chatbot
from finanzas.deps import get_reloj, get_store
from finanzas.schemas import MensajeIn

router = APIRouter(tags=["Chatbot"])

@router.post("/chatbot")
def interpretar_mensaje(
    body: MensajeIn,
    usuario_id: int = Depends(get_current_user),
    store=Depends(get_store),
    reloj=Depends(get_reloj),
):
    # "no reconocido" también responde 200: el chat lo muestra como ayuda
    r = Chatbot(store, reloj).interpretar(body.mensaje, usuario_id)
    return {"ok": True, "mensaje": r.mensaje, "intencion": type(r.intencion).__name__}
