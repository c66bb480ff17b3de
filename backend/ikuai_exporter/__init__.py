"""Prometheus exporter for iKuai routers."""

__version__ = "1.0.0"
