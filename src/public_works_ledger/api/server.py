"""
HTTP API server for the Public Works Ledger.

Every route answers with the {success, data, error} envelope of the command
API; failures also carry error_code. Rule violations map to 4xx statuses,
anything outside the error hierarchy is left to Flask (500).

Also provides liveness and readiness probes for Kubernetes.
"""

from typing import Any

from flask import Flask, jsonify, request

from public_works_ledger.command_api import VALIDATION_ERROR, CommandResult, run_command
from public_works_ledger.decisions.models import PolicyStatus
from public_works_ledger.engine import GovernanceEngine
from public_works_ledger.kernel.logging import get_logger
from public_works_ledger.payments.models import PaymentStatus

logger = get_logger(__name__)

# error_code -> HTTP status; anything unlisted is a 422
STATUS_BY_CODE = {
    "NOT_FOUND": 404,
    "UNAUTHORIZED": 403,
    "VALIDATION_ERROR": 400,
    "IMMUTABLE_FIELD": 400,
    "INVALID_DATE_RANGE": 400,
    "ALREADY_DECIDED": 409,
    "ALREADY_PROCESSED": 409,
    "DUPLICATE_ID": 409,
    "VERSION_CONFLICT": 409,
    "COMMAND_ID_CONFLICT": 409,
    "FISCAL_PERIOD_OPEN": 409,
}


def _respond(result: CommandResult, success_status: int = 200) -> tuple[Any, int]:
    if result.success:
        return jsonify(result.to_api()), success_status
    return jsonify(result.to_api()), STATUS_BY_CODE.get(result.error_code, 422)


def _body() -> dict[str, Any]:
    """Request JSON body; an absent or non-object body reads as {}"""
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def _query(*names: str) -> dict[str, str]:
    return {name: request.args[name] for name in names if request.args.get(name)}


def _parse_bool(value: str | None) -> bool | None:
    if value is None or value == "":
        return None
    return value.lower() in ("1", "true", "yes")


def create_app(engine: GovernanceEngine | None = None) -> Flask:
    """
    Build the Flask app around an engine

    Args:
        engine: Engine to serve (an empty one with default policy if None)
    """
    engine = engine or GovernanceEngine()
    app = Flask(__name__)
    app.config["engine"] = engine

    # ------------------------------------------------------------------
    # Health
    # ------------------------------------------------------------------

    @app.route("/health/live", methods=["GET"])
    def liveness() -> tuple[Any, int]:
        """Liveness probe - the process is up"""
        return jsonify({"status": "alive", "service": "public-works-ledger"}), 200

    @app.route("/health/ready", methods=["GET"])
    def readiness() -> tuple[Any, int]:
        """
        Readiness probe - the ledger has an open fiscal period

        Returns 503 until the national stream has at least one event.
        """
        totals_version = engine.national_totals.version
        if totals_version == 0:
            logger.error("Readiness check failed: no fiscal period opened")
            return jsonify({"status": "not_ready", "reason": "fiscal_period_not_open"}), 503

        return (
            jsonify(
                {
                    "status": "ready",
                    "fiscal_year": engine.national_totals.fiscal_year,
                    "event_count": engine.event_store.count_events(),
                    "stream_count": engine.event_store.count_streams(),
                }
            ),
            200,
        )

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @app.route("/api/stats/national", methods=["GET"])
    def national_stats() -> tuple[Any, int]:
        return _respond(run_command(engine.get_national_stats))

    @app.route("/api/projects", methods=["GET"])
    def list_projects() -> tuple[Any, int]:
        filters = _query("status", "province", "size", "priority")
        return _respond(run_command(lambda: engine.get_projects(filters)))

    @app.route("/api/projects/<project_id>", methods=["GET"])
    def get_project(project_id: str) -> tuple[Any, int]:
        project = engine.get_project(project_id)
        if project is None:
            return _respond(CommandResult.fail(f"Project {project_id} not found", "NOT_FOUND"))
        return _respond(CommandResult.ok(project))

    @app.route("/api/projects/<project_id>/payments", methods=["GET"])
    def project_payments(project_id: str) -> tuple[Any, int]:
        payments = [p for p in engine.get_payment_requests() if p.project_id == project_id]
        return _respond(CommandResult.ok(payments))

    @app.route("/api/allocations", methods=["GET"])
    def list_allocations() -> tuple[Any, int]:
        filters = _query("recipientType", "fiscalYear")
        return _respond(run_command(lambda: engine.get_allocations(filters)))

    @app.route("/api/policies", methods=["GET"])
    def list_policies() -> tuple[Any, int]:
        status = request.args.get("status") or None
        if status is not None and status not in PolicyStatus.__members__:
            return _respond(
                CommandResult.fail(f"status: unknown policy status {status}", VALIDATION_ERROR)
            )
        return _respond(CommandResult.ok(engine.get_policies(status)))

    @app.route("/api/payments", methods=["GET"])
    def list_payments() -> tuple[Any, int]:
        status = request.args.get("status") or None
        if status is not None and status not in PaymentStatus.__members__:
            return _respond(
                CommandResult.fail(f"status: unknown payment status {status}", VALIDATION_ERROR)
            )
        return _respond(CommandResult.ok(engine.get_payment_requests(status)))

    @app.route("/api/contractors", methods=["GET"])
    def list_contractors() -> tuple[Any, int]:
        filters = {
            "verified": _parse_bool(request.args.get("verified")),
            "specialization": request.args.get("specialization") or None,
        }
        return _respond(run_command(lambda: engine.get_contractors(filters)))

    @app.route("/api/quality-reports", methods=["GET"])
    def list_quality_reports() -> tuple[Any, int]:
        project_id = request.args.get("projectId") or None
        return _respond(CommandResult.ok(engine.get_quality_reports(project_id)))

    @app.route("/api/provinces", methods=["GET"])
    def list_provinces() -> tuple[Any, int]:
        return _respond(CommandResult.ok(engine.get_province_stats()))

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    @app.route("/api/projects", methods=["POST"])
    def create_project() -> tuple[Any, int]:
        return _respond(engine.api.create_project(_body()), success_status=201)

    @app.route("/api/projects/<project_id>", methods=["PATCH"])
    def update_project(project_id: str) -> tuple[Any, int]:
        return _respond(engine.api.update_project(project_id, _body()))

    @app.route("/api/allocations", methods=["POST"])
    def allocate_budget() -> tuple[Any, int]:
        return _respond(engine.api.allocate_budget(_body()), success_status=201)

    @app.route("/api/policies", methods=["POST"])
    def propose_policy() -> tuple[Any, int]:
        return _respond(engine.api.propose_policy(_body()), success_status=201)

    @app.route("/api/policies/<policy_id>/decision", methods=["POST"])
    def decide_policy(policy_id: str) -> tuple[Any, int]:
        body = _body()
        return _respond(
            engine.api.decide_policy(policy_id, body.get("status"), body.get("decidedBy"))
        )

    @app.route("/api/payments", methods=["POST"])
    def submit_payment_request() -> tuple[Any, int]:
        return _respond(engine.api.submit_payment_request(_body()), success_status=201)

    @app.route("/api/payments/<payment_id>/decision", methods=["POST"])
    def process_payment(payment_id: str) -> tuple[Any, int]:
        body = _body()
        return _respond(
            engine.api.process_payment(payment_id, body.get("status"), body.get("approvedBy"))
        )

    @app.route("/api/validate", methods=["POST"])
    def validate_project_size() -> tuple[Any, int]:
        body = _body()
        budget = body.get("budget")
        # Whole rupees only: 999999.9, "2000000000" and true are refused
        if not isinstance(budget, int) or isinstance(budget, bool):
            return _respond(CommandResult.fail("budget: must be an integer", VALIDATION_ERROR))
        return _respond(
            engine.api.validate_project_size(body.get("level"), body.get("size"), budget)
        )

    return app


def run_server(
    engine: GovernanceEngine | None = None,
    host: str = "0.0.0.0",
    port: int = 8080,
    debug: bool = False,
) -> None:
    """
    Run the API server.

    Args:
        engine: Engine to serve
        host: Interface to bind
        port: Port to listen on (default: 8080)
        debug: Enable Flask debug mode (default: False)
    """
    logger.info("Starting API server", host=host, port=port)
    create_app(engine).run(host=host, port=port, debug=debug)
