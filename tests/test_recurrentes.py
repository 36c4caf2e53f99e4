from datetime import datetime
from decimal import Decimal

import pytest

from finanzas.core.errores import ErrorValidacion, NoEncontrado
from finanzas.core.recurrentes import CUENTAS_FIJAS, INGRESOS, ServicioRecurrente

from conftest import USUARIO


def test_validar_cuenta_fija_con_defaults():
    data = CUENTAS_FIJAS.validar({"descripcion": " Luz ", "valor_total": "89,90", "dia_vencimiento": "31"})
    assert data == {"descripcion": "Luz", "valor_total": Decimal("89.90"), "dia_vencimiento": 31,
                    "categoria": "tarjeta", "estado": "activo"}


@pytest.mark.parametrize("body", [
    {"valor_total": 1, "dia_vencimiento": 5},
    {"descripcion": "x", "valor_total": 1, "dia_vencimiento": 0},
    {"descripcion": "x", "valor_total": 1, "dia_vencimiento": 32},
    {"descripcion": "x", "valor_total": -1, "dia_vencimiento": 5},
    {"descripcion": "x", "valor_total": "abc", "dia_vencimiento": 5},
    {"descripcion": "x", "valor_total": 1, "dia_vencimiento": 5, "estado": "pausado"},
])
def test_validar_cuenta_fija_invalida(body):
    with pytest.raises(ErrorValidacion):
        CUENTAS_FIJAS.validar(body)


def test_validar_ingreso():
    data = INGRESOS.validar({"descripcion": "sueldo", "valor": 3000, "dia_recibo": 5, "tipo": "salario"})
    assert data["recurrencia"] == "mensual"
    with pytest.raises(ErrorValidacion):
        INGRESOS.validar({"descripcion": "sueldo", "valor": 3000, "dia_recibo": 5, "tipo": "bitcoin"})


def test_crud_y_total_mensual_solo_activas(store, reloj):
    s = ServicioRecurrente(store, CUENTAS_FIJAS, reloj)
    assert s.total_mensual(USUARIO) == 0
    a = s.crear(USUARIO, {"descripcion": "luz", "valor_total": 100, "dia_vencimiento": 10})
    s.crear(USUARIO, {"descripcion": "gym", "valor_total": 50, "dia_vencimiento": 3, "estado": "inactivo"})
    assert s.total_mensual(USUARIO) == Decimal("100")
    assert [r["dia_vencimiento"] for r in s.listar(USUARIO)] == [3, 10]

    s.actualizar(USUARIO, a["id"], {"descripcion": "luz", "valor_total": 120, "dia_vencimiento": 10})
    assert s.total_mensual(USUARIO) == Decimal("120")
    s.eliminar(USUARIO, a["id"])
    with pytest.raises(NoEncontrado):
        s.eliminar(USUARIO, a["id"])
    with pytest.raises(NoEncontrado):
        s.actualizar(2, 2, {"descripcion": "gym", "valor_total": 1, "dia_vencimiento": 3})


def test_proximos_ingresos(store):
    s = ServicioRecurrente(store, INGRESOS, lambda: datetime(2024, 3, 15))
    for dia in (5, 15, 30, 20):
        s.crear(USUARIO, {"descripcion": f"d{dia}", "valor": 1, "dia_recibo": dia, "tipo": "otro"})
    assert [r["dia_recibo"] for r in s.proximos(USUARIO)] == [15, 20, 30, 5]


def test_agrupados(store, reloj):
    s = ServicioRecurrente(store, INGRESOS, reloj)
    s.crear(USUARIO, {"descripcion": "a", "valor": "1000", "dia_recibo": 5, "tipo": "salario"})
    s.crear(USUARIO, {"descripcion": "b", "valor": "200", "dia_recibo": 17, "tipo": "otro"})
    grupos = s.agrupados(USUARIO)
    assert [(g.dia, g.total) for g in grupos] == [(5, Decimal("1000")), (0, Decimal("200"))]
