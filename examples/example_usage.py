"""Example: drive the workflow through the service layer (no Flask).

Controllers stay thin; approving a report is one coordinator call.
"""

import importlib
import sys

from dotenv import load_dotenv

from config import get_settings_module

from src.report_workflow.report_workflow.common.logging_config import configure_logging
from src.report_workflow.report_workflow.container import build_container
from src.report_workflow.report_workflow.core.enums import Role, WorkflowAction
from src.report_workflow.report_workflow.users.model import Actor


def main(report_id: str, approver_id: str):
    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    configure_logging("INFO")
    container = build_container(db_config=settings.DB_CONFIG, push_endpoint_url=settings.PUSH_ENDPOINT_URL)
    try:
        report = container.report_query_service.get_report(report_id)
        result = container.workflow.execute(
            report,
            WorkflowAction.APPROVE,
            Actor(user_id=approver_id, role=Role.PRESIDENT),
            comment="Looks good",
        )
        print(result.summary())
        for row in container.report_query_service.history_for(report_id):
            print(row.from_status.value, "->", row.to_status.value, row.comment or "")
    finally:
        container.shutdown()


if __name__ == "__main__":
    main(sys.argv[1], sys.argv[2])
