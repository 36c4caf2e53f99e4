# core/resumen.py
"""
Sumas y agrupaciones de gastos, cuentas fijas e ingresos.

Las ventanas de fecha (hoy, mes actual) se calculan con el reloj recibido
por constructor, en hora local del servidor.
"""
from __future__ import annotations
from calendar import monthrange
from dataclasses import dataclass, field
from datetime import date, datetime, time
from decimal import Decimal, InvalidOperation
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence, Tuple, Union

from finanzas.core.config import DIAS_PRINCIPALES
from finanzas.core.errores import ErrorValidacion, NoEncontrado, exigir_usuario, frontera

CERO = Decimal("0")
# tope de NUMERIC(14,2)
MONTO_MAXIMO = Decimal("999999999999.99")
DIA_OTRAS_FECHAS = 0


# ------------------------------ Helpers numéricos ------------------------------
def parse_numero(valor: Any) -> Decimal:
    """Conversión permisiva: acepta ',' o '.' como separador; lo ilegible vale 0."""
    if valor is None or isinstance(valor, bool):
        return CERO
    if isinstance(valor, Decimal):
        return valor if valor.is_finite() else CERO
    if isinstance(valor, int):
        return Decimal(valor)
    try:
        d = Decimal(str(valor).strip().replace(",", "."))
    except (InvalidOperation, ValueError):
        return CERO
    return d if d.is_finite() else CERO


def a_decimal(valor: Any, nombre: str = "valor") -> Decimal:
    """Conversión estricta: lo que no sea un número finito es error de validación."""
    if valor is None:
        raise ErrorValidacion(f"{nombre.capitalize()} no informado.")
    if isinstance(valor, bool):
        raise ErrorValidacion(f"{nombre.capitalize()} inválido.")
    try:
        d = Decimal(str(valor).strip().replace(",", "."))
    except (InvalidOperation, ValueError):
        raise ErrorValidacion(f"{nombre.capitalize()} inválido.")
    if not d.is_finite():
        raise ErrorValidacion(f"{nombre.capitalize()} inválido.")
    if abs(d) > MONTO_MAXIMO:
        raise ErrorValidacion(f"{nombre.capitalize()} fuera de rango.")
    return d


def a_entero(valor: Any) -> Optional[int]:
    try:
        return int(str(valor).strip())
    except (TypeError, ValueError):
        return None


# --------------------------------- Ventanas ---------------------------------
def ventana_dia(ahora: datetime) -> Tuple[datetime, datetime]:
    inicio = ahora.replace(hour=0, minute=0, second=0, microsecond=0)
    fin = ahora.replace(hour=23, minute=59, second=59, microsecond=999000)
    return inicio, fin


def ventana_mes(ahora: datetime, fin_microsegundos: int = 0) -> Tuple[datetime, datetime]:
    ultimo = monthrange(ahora.year, ahora.month)[1]
    inicio = datetime(ahora.year, ahora.month, 1)
    fin = datetime(ahora.year, ahora.month, ultimo, 23, 59, 59, fin_microsegundos)
    return inicio, fin


def _local(dt: datetime) -> datetime:
    """Las fechas con zona se pasan a hora local sin zona, como las guardadas."""
    if dt.tzinfo is None:
        return dt
    return dt.astimezone().replace(tzinfo=None)


def _parse_limite(valor: Union[str, date, datetime, None], nombre: str, es_fin: bool) -> datetime:
    if valor is None or (isinstance(valor, str) and not valor.strip()):
        raise ErrorValidacion("Informa las fechas de inicio y fin en formato YYYY-MM-DD.")
    if isinstance(valor, datetime):
        return _local(valor)
    if isinstance(valor, date):
        solo_fecha = valor
    else:
        texto = valor.strip()
        try:
            if len(texto) > 10:
                return _local(datetime.fromisoformat(texto))
            solo_fecha = date.fromisoformat(texto)
        except ValueError:
            raise ErrorValidacion(f"Fecha de {nombre} inválida: '{texto}'. Usa el formato YYYY-MM-DD.")
    return datetime.combine(solo_fecha, time.max if es_fin else time.min)


def rango_periodo(inicio, fin) -> Tuple[datetime, datetime]:
    """Rango inclusivo; una fecha sin hora como fin cubre el día completo."""
    ini = _parse_limite(inicio, "inicio", es_fin=False)
    fn = _parse_limite(fin, "fin", es_fin=True)
    if ini > fn:
        raise ErrorValidacion("La fecha de inicio no puede ser posterior a la de fin.")
    return ini, fn


# -------------------------------- Agrupación --------------------------------
@dataclass
class Grupo:
    dia: int
    items: List[Dict[str, Any]] = field(default_factory=list)
    total: Decimal = CERO

    @property
    def otras_fechas(self) -> bool:
        return self.dia == DIA_OTRAS_FECHAS

    def to_dict(self) -> Dict[str, Any]:
        return {"dia": self.dia, "items": self.items, "total": float(self.total)}


def agrupar_por_dia(
    items: Iterable[Dict[str, Any]],
    campo_dia: str,
    campo_valor: str,
    dias_principales: Sequence[int] = DIAS_PRINCIPALES,
) -> List[Grupo]:
    """
    Reparte los items por día del mes. Un grupo por cada día principal con
    miembros (en el orden de dias_principales) y al final un grupo con
    dia=0 para el resto, sólo si no está vacío.
    """
    principales = [int(d) for d in dias_principales]
    grupos: Dict[int, Grupo] = {d: Grupo(d) for d in principales}
    otras = Grupo(DIA_OTRAS_FECHAS)

    for item in items:
        dia = a_entero(item.get(campo_dia))
        grupos.get(dia, otras).items.append(item)

    for g in list(grupos.values()) + [otras]:
        g.total = total_items(g.items, campo_valor)

    resultado = [grupos[d] for d in principales if grupos[d].items]
    if otras.items:
        resultado.append(otras)
    return resultado


def total_items(items: Iterable[Dict[str, Any]], campo_valor: str) -> Decimal:
    return sum((parse_numero(i.get(campo_valor)) for i in items), CERO)


def saldo_neto(total_ingresos, total_cuentas) -> Decimal:
    # sin piso en cero: el saldo puede quedar negativo
    return parse_numero(total_ingresos) - parse_numero(total_cuentas)


# ------------------------------ Resumen de gastos ------------------------------
class ResumenGastos:
    def __init__(self, store, reloj: Callable[[], datetime] = datetime.now):
        self.store = store
        self.reloj = reloj

    @frontera("Error al calcular el total del mes.")
    def total_mes_actual(self, usuario_id) -> Decimal:
        exigir_usuario(usuario_id)
        inicio, fin = ventana_mes(self.reloj())
        return self.store.suma_gastos(usuario_id, inicio, fin) or CERO

    @frontera("Error al calcular el total de gastos en el período.")
    def total_periodo(self, usuario_id, inicio, fin) -> Dict[str, Any]:
        exigir_usuario(usuario_id)
        ini, fn = rango_periodo(inicio, fin)
        total = self.store.suma_gastos(usuario_id, ini, fn)
        if total is None:
            return {"total": CERO, "encontrado": False}
        return {"total": total, "encontrado": True}

    @frontera("Error al calcular el total de la categoría.")
    def total_categoria(self, usuario_id, categoria: Optional[str]) -> Decimal:
        exigir_usuario(usuario_id)
        if not categoria:
            raise ErrorValidacion("Informa la categoría.")
        return self.store.suma_gastos(usuario_id, categoria=categoria) or CERO

    @frontera("Error al buscar gastos por categoría.")
    def filtrar_categoria(self, usuario_id, categoria: Optional[str]) -> List[Dict[str, Any]]:
        exigir_usuario(usuario_id)
        if not categoria:
            raise ErrorValidacion("Informa la categoría a filtrar.")
        rows = self.store.gastos_de_categoria(usuario_id, categoria)
        if not rows:
            raise NoEncontrado(f'No se encontraron gastos en la categoría "{categoria}".')
        return rows

    @frontera("Error al buscar gastos por período.")
    def filtrar_periodo(self, usuario_id, inicio, fin) -> List[Dict[str, Any]]:
        exigir_usuario(usuario_id)
        ini, fn = rango_periodo(inicio, fin)
        rows = self.store.gastos_entre(usuario_id, ini, fn)
        if not rows:
            raise NoEncontrado("No se encontraron gastos en ese período.")
        return rows

    @frontera("Error al generar el resumen por categoría.")
    def resumen_por_categoria(self, usuario_id) -> List[Dict[str, Any]]:
        exigir_usuario(usuario_id)
        inicio, fin = ventana_mes(self.reloj(), fin_microsegundos=999999)
        return self.store.suma_por_categoria(usuario_id, inicio, fin)
