"""
MCP server exposing the ledger as tools.

Tools: addTransaction, listTransactions, getTransactionSummary,
deleteTransaction, visualizeTransactions, exportTransactions.
Resource: transaction://raw-data.
"""

import json
import logging
from typing import Annotated, Literal, Optional

from fastmcp import FastMCP
from fastmcp.exceptions import ToolError
from fastmcp.utilities.types import Image
from mcp.types import EmbeddedResource, TextContent, TextResourceContents
from pydantic import Field, PositiveFloat, PositiveInt

from tally.config import ERROR_MESSAGES, SERVER_INSTRUCTIONS, SERVER_NAME
from tally.db import LedgerRepository, TransactionFilter
from tally.errors import NotFoundError, StoreError, TallyError, ValidationError
from tally.models import TransactionDraft
from tally.services import (
    ChartService,
    DeletionWorkflow,
    ExportFormat,
    ExportService,
    aggregate,
)
from tally.services.charts import parse_chart_type
from tally.services.export import parse_export_format

logger = logging.getLogger(__name__)

LIST_RESOURCE_URI = "ui://txn-list/main"
CHART_RESOURCE_URI = "ui://txn-chart/main"
RAW_DATA_URI = "transaction://raw-data"

# Tool metadata key UI hosts read to pick the template for a tool result
OUTPUT_TEMPLATE_KEY = "openai/outputTemplate"

Kind = Literal["income", "expense"]
IsoDate = Annotated[Optional[str], Field(description="Date in ISO format")]


def _error_result(error: TallyError, tool: str) -> str:
    """
    Turn a ledger error into a tool result.

    Validation and lookup failures become readable text; store failures are
    raised as opaque tool errors.
    """
    if isinstance(error, ValidationError):
        logger.warning(f"Validation error in {tool}: {error}")
        return f"❌ Error: {error}"
    if isinstance(error, NotFoundError):
        logger.info(f"Not found in {tool}: {error}")
        return f"❌ {error}"
    if isinstance(error, StoreError):
        logger.error(f"Store error in {tool}: {error}", exc_info=True)
        raise ToolError(ERROR_MESSAGES["database_error"]) from error
    logger.error(f"Unexpected ledger error in {tool}: {error}", exc_info=True)
    raise ToolError(ERROR_MESSAGES["internal_error"]) from error


def _html_resource(uri: str, html: str) -> EmbeddedResource:
    return EmbeddedResource(
        type="resource",
        resource=TextResourceContents(uri=uri, mimeType="text/html", text=html),
    )


def create_server(
    repository: LedgerRepository,
    chart_service: Optional[ChartService] = None,
    export_service: Optional[ExportService] = None,
) -> FastMCP:
    """
    Build the MCP server bound to a ledger.

    Args:
        repository: Ledger every tool operates on
        chart_service: Optional chart renderer (created if not given)
        export_service: Optional exporter (created if not given)

    Returns:
        Configured FastMCP instance ready to run
    """
    mcp = FastMCP(SERVER_NAME, instructions=SERVER_INSTRUCTIONS)

    workflow = DeletionWorkflow(repository)
    charts = chart_service or ChartService()
    exporter = export_service or ExportService(repository)

    @mcp.tool(
        name="addTransaction",
        description="Add a new transaction (income or expense)",
    )
    def add_transaction(
        type: Annotated[Kind, Field(description="Type of transaction")],
        amount: Annotated[
            PositiveFloat, Field(description="Transaction amount (must be positive)")
        ],
        category: Annotated[str, Field(description="Transaction category")],
        date: Annotated[str, Field(description="Transaction date in ISO format")],
        description: Annotated[
            Optional[str], Field(description="Optional transaction description")
        ] = None,
    ) -> str:
        try:
            draft = TransactionDraft.create(
                kind=type,
                amount=amount,
                category=category,
                occurred_at=date,
                description=description,
            )
            entry = repository.insert(draft)
            return f"Transaction added with ID: {entry.id}"
        except TallyError as e:
            return _error_result(e, "addTransaction")

    @mcp.tool(
        name="listTransactions",
        description="List and filter transactions from the database",
        meta={OUTPUT_TEMPLATE_KEY: LIST_RESOURCE_URI},
    )
    def list_transactions(
        type: Annotated[Optional[Kind], Field(description="Filter by type")] = None,
        category: Annotated[Optional[str], Field(description="Filter by category")] = None,
        startDate: IsoDate = None,
        endDate: IsoDate = None,
        limit: Annotated[
            Optional[PositiveInt], Field(description="Maximum number of rows")
        ] = None,
    ):
        try:
            entry_filter = TransactionFilter.create(
                kind=type, category=category, date_from=startDate, date_to=endDate
            )
            entries = repository.list_entries(entry_filter, limit=limit)
            html = charts.render_table_html(entries)
            return [_html_resource(LIST_RESOURCE_URI, html)]
        except TallyError as e:
            return _error_result(e, "listTransactions")

    @mcp.tool(
        name="getTransactionSummary",
        description="Get summary of total income, expenses, and balance",
    )
    def get_transaction_summary() -> str:
        try:
            summary = repository.get_summary()
            return json.dumps(summary.to_dict(), indent=2)
        except TallyError as e:
            return _error_result(e, "getTransactionSummary")

    @mcp.tool(
        name="deleteTransaction",
        description=(
            "Delete transaction(s) by ID, category, date range, or type. "
            "Supports single or bulk deletion; bulk deletions return a preview "
            "until confirmBulk is true."
        ),
    )
    def delete_transaction(
        id: Annotated[
            Optional[PositiveInt], Field(description="Delete specific transaction by ID")
        ] = None,
        ids: Annotated[
            Optional[list[PositiveInt]],
            Field(description="Delete multiple transactions by IDs"),
        ] = None,
        category: Annotated[
            Optional[str], Field(description="Delete all transactions in a category")
        ] = None,
        type: Annotated[
            Optional[Kind],
            Field(description="Delete all transactions of a specific type"),
        ] = None,
        startDate: Annotated[
            Optional[str],
            Field(description="Delete transactions from this date onwards (ISO format)"),
        ] = None,
        endDate: Annotated[
            Optional[str],
            Field(description="Delete transactions up to this date (ISO format)"),
        ] = None,
        olderThan: Annotated[
            Optional[str],
            Field(description="Delete transactions older than this date (ISO format)"),
        ] = None,
        confirmBulk: Annotated[
            bool,
            Field(description="Required confirmation for bulk deletions (must be true)"),
        ] = False,
    ) -> str:
        try:
            entry_filter = TransactionFilter.create(
                kind=type,
                category=category,
                date_from=startDate,
                date_to=endDate,
                older_than=olderThan,
                ids=ids,
                id=id,
            )
            result = workflow.run(entry_filter, confirm_bulk=confirmBulk)
            return result.to_message()
        except TallyError as e:
            return _error_result(e, "deleteTransaction")

    @mcp.tool(
        name="visualizeTransactions",
        description=(
            "Visualize transactions as charts (bar chart, pie chart, or line chart)"
        ),
        meta={OUTPUT_TEMPLATE_KEY: CHART_RESOURCE_URI},
    )
    def visualize_transactions(
        chartType: Annotated[
            Literal["bar", "pie", "line"],
            Field(description="Type of chart to generate (default: bar)"),
        ] = "bar",
        groupBy: Annotated[
            Literal["day", "week", "month", "category"],
            Field(description="How to group the data (default: month)"),
        ] = "month",
    ):
        try:
            chart_type = parse_chart_type(chartType)
            entries = repository.list_entries(ascending=True)
            series = aggregate(entries, groupBy)

            image = charts.render_chart(series, chart_type)
            html = charts.render_chart_html(series, chart_type, image=image)
            data = {"chartType": chart_type.value, **series.to_dict()}

            return [
                _html_resource(CHART_RESOURCE_URI, html),
                Image(data=image.getvalue(), format="png").to_image_content(),
                TextContent(type="text", text=json.dumps(data, indent=2)),
            ]
        except TallyError as e:
            return _error_result(e, "visualizeTransactions")

    @mcp.tool(
        name="exportTransactions",
        description=(
            "Export transactions as CSV text or as an XLSX workbook written on "
            "the server"
        ),
    )
    def export_transactions(
        format: Annotated[
            Literal["csv", "xlsx"], Field(description="Export format (default: csv)")
        ] = "csv",
        startDate: IsoDate = None,
        endDate: IsoDate = None,
    ) -> str:
        try:
            export_format = parse_export_format(format)
            if export_format == ExportFormat.XLSX:
                path = exporter.write_xlsx(startDate, endDate)
                return f"✅ Exported transactions to {path}"
            buffer = exporter.export_to_csv(startDate, endDate)
            return buffer.getvalue().decode("utf-8-sig")
        except TallyError as e:
            return _error_result(e, "exportTransactions")

    @mcp.resource(
        RAW_DATA_URI,
        name="Raw Database Data",
        description=(
            "Raw JSON data of all transactions from the database "
            "(for testing/debugging)"
        ),
        mime_type="application/json",
    )
    def raw_data() -> str:
        return json.dumps(exporter.raw_export(), indent=2, ensure_ascii=False)

    logger.info(f"MCP server '{SERVER_NAME}' created for {repository.db_path}")
    return mcp
