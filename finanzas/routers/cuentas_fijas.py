# routers/cuentas_fijas.py
from finanzas.core.recurrentes import CUENTAS_FIJAS
from finanzas.routers.recurrentes import crear_router
from finanzas.schemas import CuentaFijaIn

router = crear_router(CUENTAS_FIJAS, CuentaFijaIn, prefix="/cuentas-fijas", tag="Cuentas fijas")
