from bookquery.reporting.reporter import Reporter

__all__ = ["Reporter"]
