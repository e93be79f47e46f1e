"""
HTTP surface - Flask app exposing the query/command API and health probes
"""

from public_works_ledger.api.server import create_app, run_server

__all__ = ["create_app", "run_server"]
