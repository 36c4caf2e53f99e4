# core/chatbot.py
"""
Intérprete de mensajes del chat.

Cada intención es una entrada (patrón, extractor, handler) de REGLAS; se
prueban en orden y gana la primera que coincide. No hay puntaje ni
coincidencia difusa: si nada coincide se responde con el texto de ayuda.
"""
from __future__ import annotations
import logging
import re
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Callable, Optional, Tuple, Union

from finanzas.core.errores import ErrorValidacion, exigir_usuario, frontera
from finanzas.core.resumen import CERO, a_decimal, parse_numero, ventana_dia, ventana_mes

logger = logging.getLogger("uvicorn.error")

DESCRIPCION_CHAT = "Agregado vía chat"
TEXTO_AYUDA = (
    'Formato de mensaje inválido. Ejemplo: "gasté 50 con comida" '
    'o "¿cuánto gasté hoy?"'
)

# ------------------------------- Intenciones -------------------------------
@dataclass(frozen=True)
class RegistrarGasto:
    valor: Decimal
    categoria: str

@dataclass(frozen=True)
class ConsultaHoy:
    pass

@dataclass(frozen=True)
class ConsultaMes:
    pass

@dataclass(frozen=True)
class NoReconocida:
    ayuda: str = TEXTO_AYUDA

Intencion = Union[RegistrarGasto, ConsultaHoy, ConsultaMes, NoReconocida]

@dataclass(frozen=True)
class Respuesta:
    mensaje: str
    intencion: Intencion

# -------------------------------- Patrones --------------------------------
RE_REGISTRAR = re.compile(
    r"(?:gast[eé]|spent)\s+(\d+(?:[.,]\d{1,2})?)\s+(?:con|en|with|on)\s+(.+)",
    re.IGNORECASE,
)
RE_HOY = re.compile(
    r"cu[aá]nto\s+gast[eé]\s+hoy|gastos\s+del\s+d[ií]a|mi\s+gasto\s+(?:de\s+)?hoy"
    r"|how\s+much\s+did\s+i\s+spend\s+today",
    re.IGNORECASE,
)
RE_MES = re.compile(
    r"cu[aá]nto\s+gast[eé]\s+(?:este\s+)?mes|gastos\s+del\s+mes|gasto\s+mensual"
    r"|how\s+much\s+did\s+i\s+spend\s+this\s+month",
    re.IGNORECASE,
)

def _extraer_gasto(m: re.Match) -> RegistrarGasto:
    return RegistrarGasto(
        valor=parse_numero(m.group(1)).quantize(Decimal("0.01")),
        categoria=m.group(2).strip().lower(),
    )

REGLAS: Tuple[Tuple[re.Pattern, Callable[[re.Match], Intencion], str], ...] = (
    (RE_REGISTRAR, _extraer_gasto, "_registrar"),
    (RE_HOY, lambda m: ConsultaHoy(), "_consultar_hoy"),
    (RE_MES, lambda m: ConsultaMes(), "_consultar_mes"),
)


def _despachar(mensaje: str) -> Tuple[Intencion, str]:
    for patron, extractor, handler in REGLAS:
        m = patron.search(mensaje)
        if m:
            return extractor(m), handler
    return NoReconocida(), "_ayuda"


def clasificar(mensaje: str) -> Intencion:
    return _despachar(mensaje)[0]


def _fmt(valor: Decimal) -> str:
    return f"{valor:.2f}"


# -------------------------------- Chatbot --------------------------------
class Chatbot:
    def __init__(self, store, reloj: Callable[[], datetime] = datetime.now):
        self.store = store
        self.reloj = reloj

    @frontera("Error al interpretar el mensaje.")
    def interpretar(self, mensaje: Optional[str], usuario_id) -> Respuesta:
        if not mensaje or not str(mensaje).strip():
            raise ErrorValidacion("Mensaje no enviado.")
        exigir_usuario(usuario_id)
        intencion, handler = _despachar(str(mensaje))
        texto = getattr(self, handler)(intencion, usuario_id)
        return Respuesta(mensaje=texto, intencion=intencion)

    def _registrar(self, it: RegistrarGasto, usuario_id) -> str:
        a_decimal(it.valor)  # fuera de rango -> 400
        self.store.insertar("gastos", {
            "usuario_id": usuario_id,
            "descripcion": DESCRIPCION_CHAT,
            "categoria": it.categoria,
            "valor": it.valor,
            "fecha": self.reloj(),
        })
        logger.info("Gasto vía chat registrado (usuario=%s, categoria=%s)", usuario_id, it.categoria)
        return f"✅ Gasto de ${_fmt(it.valor)} en *{it.categoria}* registrado con éxito."

    def _consultar_hoy(self, it: ConsultaHoy, usuario_id) -> str:
        inicio, fin = ventana_dia(self.reloj())
        total = self.store.suma_gastos(usuario_id, inicio, fin) or CERO
        return f"🗓️ Hoy gastaste ${_fmt(total)}."

    def _consultar_mes(self, it: ConsultaMes, usuario_id) -> str:
        inicio, fin = ventana_mes(self.reloj(), fin_microsegundos=999999)
        total = self.store.suma_gastos(usuario_id, inicio, fin) or CERO
        return f"📅 Total de gastos del mes: ${_fmt(total)}."

    def _ayuda(self, it: NoReconocida, usuario_id) -> str:
        return it.ayuda
