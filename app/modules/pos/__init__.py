"""
Módulo POS (Point of Sale) - Zenith ERP

ENTIDADES PRINCIPALES:
- CashRegister: Cajas físicas de la tienda
- CashSession: Turno de caja con apertura, cierre y arqueo (OPEN -> CLOSED)
- CashMovement: Movimientos de efectivo del turno
- Sale / SaleItem: Ventas del punto de venta

REGLAS DE NEGOCIO:
- Una caja tiene como máximo una sesión abierta
- No se venden productos sin stock suficiente
- El descuento nunca deja la venta por debajo del costo
- Las ventas a crédito generan una factura por cobrar con el mismo número
- La porción en efectivo de cada venta se registra en la sesión abierta
"""
