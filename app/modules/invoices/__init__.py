"""
Módulo de Facturación (Invoices) - Zenith ERP

- invoice_counters: contador atómico de números de factura (FAC-00000001)
- invoices: facturas a crédito (cuentas por cobrar), creadas desde ventas
  a crédito o manualmente
- payments: abonos de clientes contra facturas a crédito

Estados de factura: PENDING -> PARTIAL -> PAID; OVERDUE al vencer;
CANCELLED al anular.
"""
