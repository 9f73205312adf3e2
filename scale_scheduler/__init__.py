"""Scale scheduler package for worship service rosters.

Modules:
- config: load and validate configuration (YAML or JSON)
- domain: plain entities, SQLAlchemy models and repositories
- alerts: roster alert analysis run while a scale is being edited
- services: month generation from templates and participation summaries
- io: CSV import/export helpers
- cli: command-line interface entrypoints
"""

__all__ = [
    "config",
    "domain",
    "alerts",
    "services",
    "io",
    "cli",
]
