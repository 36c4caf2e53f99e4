# core/recurrentes.py
"""
Cuentas fijas e ingresos comparten forma: una plantilla mensual con un
día del mes y un monto. `Entidad` describe cada tabla y el servicio
genérico hace el CRUD, los totales y la agrupación por día.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Any, Callable, Dict, List, Sequence, Tuple

from finanzas.core.config import DIAS_PRINCIPALES
from finanzas.core.errores import ErrorValidacion, NoEncontrado, exigir_usuario, frontera
from finanzas.core.resumen import CERO, Grupo, a_decimal, a_entero, agrupar_por_dia


@dataclass(frozen=True)
class Entidad:
    tabla: str
    campo_valor: str
    campo_dia: str
    nombre_dia: str             # "vencimiento", "recibo"
    no_encontrado: str
    obligatorios: Tuple[str, ...]
    defaults: Dict[str, Any] = field(default_factory=dict)
    opciones: Dict[str, Tuple[str, ...]] = field(default_factory=dict)
    filtro_total: Dict[str, Any] = field(default_factory=dict)

    def validar(self, body: Dict[str, Any]) -> Dict[str, Any]:
        """Devuelve las columnas a escribir (reemplazo completo) o lanza ErrorValidacion."""
        faltan = [c for c in self.obligatorios if body.get(c) in (None, "")]
        if faltan:
            raise ErrorValidacion(f"Campos obligatorios: {', '.join(self.obligatorios)}.")

        data: Dict[str, Any] = {"descripcion": str(body["descripcion"]).strip()}
        valor = a_decimal(body[self.campo_valor])
        if valor < 0:
            raise ErrorValidacion("El valor no puede ser negativo.")
        data[self.campo_valor] = valor

        dia = a_entero(body[self.campo_dia])
        if dia is None or not (1 <= dia <= 31):
            raise ErrorValidacion(f"Día de {self.nombre_dia} debe estar entre 1 y 31.")
        data[self.campo_dia] = dia

        for campo, default in self.defaults.items():
            v = body.get(campo)
            data[campo] = default if v in (None, "") else str(v).strip()
        for campo in self.obligatorios:
            if campo not in data:
                data[campo] = str(body[campo]).strip()
        for campo, permitidos in self.opciones.items():
            if data.get(campo) not in permitidos:
                raise ErrorValidacion(f"Valor de {campo} inválido. Opciones: {', '.join(permitidos)}.")
        return data


CUENTAS_FIJAS = Entidad(
    tabla="cuentas_fijas",
    campo_valor="valor_total",
    campo_dia="dia_vencimiento",
    nombre_dia="vencimiento",
    no_encontrado="Cuenta fija no encontrada.",
    obligatorios=("descripcion", "valor_total", "dia_vencimiento"),
    defaults={"categoria": "tarjeta", "estado": "activo"},
    opciones={"estado": ("activo", "inactivo")},
    filtro_total={"estado": "activo"},
)

INGRESOS = Entidad(
    tabla="ingresos",
    campo_valor="valor",
    campo_dia="dia_recibo",
    nombre_dia="recibo",
    no_encontrado="Ingreso no encontrado.",
    obligatorios=("descripcion", "valor", "dia_recibo", "tipo"),
    defaults={"recurrencia": "mensual"},
    opciones={"tipo": ("salario", "beneficio", "otro")},
)


def dias_hasta(dia: int, hoy: int) -> int:
    """Orden de 'próximos': los días >= hoy primero, luego el resto del ciclo."""
    return dia if dia >= hoy else dia + 31


class ServicioRecurrente:
    def __init__(self, store, entidad: Entidad, reloj: Callable[[], datetime] = datetime.now):
        self.store = store
        self.entidad = entidad
        self.reloj = reloj

    @frontera("Error al registrar.")
    def crear(self, usuario_id, body: Dict[str, Any]) -> Dict[str, Any]:
        exigir_usuario(usuario_id)
        data = self.entidad.validar(body)
        data["usuario_id"] = usuario_id
        return self.store.insertar(self.entidad.tabla, data)

    @frontera("Error al listar.")
    def listar(self, usuario_id) -> List[Dict[str, Any]]:
        exigir_usuario(usuario_id)
        return self.store.listar(self.entidad.tabla, usuario_id, orden=self.entidad.campo_dia)

    @frontera("Error al actualizar.")
    def actualizar(self, usuario_id, id: int, body: Dict[str, Any]) -> None:
        exigir_usuario(usuario_id)
        data = self.entidad.validar(body)
        if self.store.actualizar(self.entidad.tabla, id, usuario_id, data) == 0:
            raise NoEncontrado(self.entidad.no_encontrado)

    @frontera("Error al eliminar.")
    def eliminar(self, usuario_id, id: int) -> None:
        exigir_usuario(usuario_id)
        if self.store.eliminar(self.entidad.tabla, id, usuario_id) == 0:
            raise NoEncontrado(self.entidad.no_encontrado)

    @frontera("Error al calcular el total mensual.")
    def total_mensual(self, usuario_id) -> Decimal:
        exigir_usuario(usuario_id)
        total = self.store.suma(self.entidad.tabla, self.entidad.campo_valor, usuario_id,
                                self.entidad.filtro_total or None)
        return total or CERO

    @frontera("Error al agrupar por día.")
    def agrupados(self, usuario_id, dias_principales: Sequence[int] = DIAS_PRINCIPALES) -> List[Grupo]:
        exigir_usuario(usuario_id)
        items = self.store.listar(self.entidad.tabla, usuario_id, orden=self.entidad.campo_dia)
        return agrupar_por_dia(items, self.entidad.campo_dia, self.entidad.campo_valor, dias_principales)

    @frontera("Error al buscar los próximos.")
    def proximos(self, usuario_id) -> List[Dict[str, Any]]:
        exigir_usuario(usuario_id)
        hoy = self.reloj().day
        items = self.store.listar(self.entidad.tabla, usuario_id, orden=self.entidad.campo_dia)
        campo = self.entidad.campo_dia
        return sorted(items, key=lambda r: dias_hasta(a_entero(r.get(campo)) or 0, hoy))
