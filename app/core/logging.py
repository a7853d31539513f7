import logging
import json
from datetime import datetime, timezone
from fastapi import Request


def get_client_ip(request: Request) -> str:
    return (
        request.headers.get("x-forwarded-for", "").split(",")[0].strip()
        or request.headers.get("x-real-ip", "")
        or getattr(request.client, "host", "unknown")
        if request.client
        else "unknown"
    )


def get_user_agent(request: Request) -> str:
    return request.headers.get("user-agent", "unknown")


def setup_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


audit_logger = logging.getLogger("audit")
validation_logger = logging.getLogger("validation")


class AuditLogger:
    @staticmethod
    def _base_data(request: Request, event_type: str) -> dict[str, object]:
        return {
            "event_type": event_type,
            "method": request.method,
            "path": request.url.path,
            "ip_address": get_client_ip(request),
            "user_agent": get_user_agent(request),
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }

    @staticmethod
    def log_book_change(
        request: Request,
        action: str,
        isbn: str,
        details: dict[str, object] | None = None,
    ):
        log_data = AuditLogger._base_data(request, "book_change")
        log_data["action"] = action
        log_data["isbn"] = isbn
        if details:
            log_data.update(details)

        message = f"Book {action}: {json.dumps(log_data)}"
        audit_logger.info(message)

    @staticmethod
    def log_conflict(request: Request, isbn: str):
        log_data = AuditLogger._base_data(request, "book_conflict")
        log_data["isbn"] = isbn

        message = f"Duplicate isbn rejected: {json.dumps(log_data)}"
        audit_logger.warning(message)

    @staticmethod
    def log_rejected_payload(request: Request, violations: list[str]):
        log_data = AuditLogger._base_data(request, "payload_rejected")
        log_data["violation_count"] = len(violations)
        log_data["violations"] = violations

        message = f"Payload rejected: {json.dumps(log_data)}"
        validation_logger.info(message)
