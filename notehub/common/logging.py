# notehub/common/logging.py
import logging, sys, time, uuid
from pythonjsonlogger import jsonlogger
from flask import g, has_app_context, request


def current_request_id() -> str:
    if not has_app_context():
        return "-"
    return getattr(g, "request_id", "-")


class RequestIdFilter(logging.Filter):
    """Ajoute le request id courant à chaque record (logs des services compris)."""

    def filter(self, record):
        if not hasattr(record, "request_id"):
            record.request_id = current_request_id()
        return True


def setup_json_logging(app):
    # Root logger en INFO (DEBUG en dev via app.debug)
    level = logging.DEBUG if app.debug else logging.INFO
    root = logging.getLogger()
    root.handlers = []  # nettoie
    root.setLevel(level)

    handler = logging.StreamHandler(sys.stdout)
    handler.addFilter(RequestIdFilter())
    fmt = jsonlogger.JsonFormatter(
        "%(asctime)s %(levelname)s %(name)s %(message)s %(request_id)s"
    )
    handler.setFormatter(fmt)
    root.addHandler(handler)


def register_request_logging(app):
    @app.before_request
    def _assign_request_id_and_start_timer():
        # request id: X-Request-Id entrant ou généré
        g.request_id = request.headers.get("X-Request-Id") or str(uuid.uuid4())
        g._start_time = time.perf_counter()

    @app.after_request
    def _log_request(resp):
        started = getattr(g, "_start_time", None)
        latency = int((time.perf_counter() - started) * 1000) if started is not None else -1

        # expose le request id au client
        resp.headers.setdefault("X-Request-Id", current_request_id())

        logging.getLogger("notehub.request").info(
            "http_request",
            extra={
                "method": request.method,
                "path": request.path,
                "status": resp.status_code,
                "latency_ms": latency,
            },
        )
        return resp
