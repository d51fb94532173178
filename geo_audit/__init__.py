"""GEO Audit - dual-render generative engine optimization audits."""

__version__ = "1.0.0"
