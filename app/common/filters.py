"""
Filtros de consulta reutilizables
"""
from datetime import date, datetime, time, timedelta
from typing import Optional


def day_start(day: date) -> datetime:
    return datetime.combine(day, time.min)


def apply_date_range(query, column, start_date: Optional[date] = None, end_date: Optional[date] = None):
    """
    Filtra `column` entre start_date (00:00) y end_date inclusive
    (hasta antes de las 00:00 del día siguiente).
    """
    if start_date:
        query = query.filter(column >= day_start(start_date))
    if end_date:
        query = query.filter(column < day_start(end_date + timedelta(days=1)))
    return query
