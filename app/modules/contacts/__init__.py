"""
Módulo de Contactos - Zenith ERP

Clientes (cuentas por cobrar, ventas a crédito) y proveedores (compras,
cuentas por pagar). Ambos se identifican por RIF único y usan soft delete
para no romper las ventas y compras históricas.
"""
