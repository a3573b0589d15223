"""End-to-end tests of the MCP tools over an in-memory client."""

import json

import pytest
from fastmcp import Client
from fastmcp.exceptions import ToolError

from tally.config import ERROR_MESSAGES
from tally.errors import NotFoundError, StoreError, ValidationError
from tally.server import (
    CHART_RESOURCE_URI,
    LIST_RESOURCE_URI,
    OUTPUT_TEMPLATE_KEY,
    RAW_DATA_URI,
    _error_result,
    create_server,
)
from tally.services import ExportService


@pytest.fixture
def server(seeded_repository, tmp_path):
    exporter = ExportService(seeded_repository, export_dir=tmp_path / "exports")
    return create_server(seeded_repository, export_service=exporter)


async def call(server, tool: str, arguments: dict = None):
    async with Client(server) as client:
        return await client.call_tool(tool, arguments or {})


async def call_text(server, tool: str, arguments: dict = None) -> str:
    result = await call(server, tool, arguments)
    return result.content[0].text


class TestToolListing:
    @pytest.mark.asyncio
    async def test_tools_registered(self, server):
        async with Client(server) as client:
            tools = await client.list_tools()

        assert {tool.name for tool in tools} == {
            "addTransaction",
            "listTransactions",
            "getTransactionSummary",
            "deleteTransaction",
            "visualizeTransactions",
            "exportTransactions",
        }

    @pytest.mark.asyncio
    async def test_ui_tools_name_their_output_template(self, server):
        async with Client(server) as client:
            tools = {tool.name: tool for tool in await client.list_tools()}

        list_meta = tools["listTransactions"].meta
        chart_meta = tools["visualizeTransactions"].meta
        assert list_meta[OUTPUT_TEMPLATE_KEY] == LIST_RESOURCE_URI
        assert chart_meta[OUTPUT_TEMPLATE_KEY] == CHART_RESOURCE_URI


class TestAddTransaction:
    @pytest.mark.asyncio
    async def test_add(self, server, seeded_repository):
        text = await call_text(
            server,
            "addTransaction",
            {"type": "expense", "amount": 12.5, "category": "coffee", "date": "2024-01-12"},
        )

        assert text.startswith("Transaction added with ID: ")
        entry_id = int(text.rsplit(" ", 1)[1])
        assert seeded_repository.get_by_id(entry_id).category == "coffee"

    @pytest.mark.asyncio
    async def test_invalid_date_is_reported(self, server, seeded_repository):
        text = await call_text(
            server,
            "addTransaction",
            {"type": "income", "amount": 10, "category": "gift", "date": "someday"},
        )

        assert text.startswith("❌ Error: Invalid date")
        assert seeded_repository.count_entries() == 2

    @pytest.mark.asyncio
    async def test_non_positive_amount_is_rejected(self, server, seeded_repository):
        with pytest.raises(ToolError):
            await call(
                server,
                "addTransaction",
                {"type": "income", "amount": -5, "category": "gift", "date": "2024-01-01"},
            )
        assert seeded_repository.count_entries() == 2


class TestListAndSummary:
    @pytest.mark.asyncio
    async def test_list_returns_html_table(self, server):
        result = await call(server, "listTransactions", {"category": "food"})

        resource = result.content[0]
        assert resource.type == "resource"
        assert resource.resource.mimeType == "text/html"
        assert "Total: 1 transaction<" in resource.resource.text
        assert "food" in resource.resource.text

    @pytest.mark.asyncio
    async def test_summary(self, server):
        text = await call_text(server, "getTransactionSummary")

        assert json.loads(text) == {
            "totalIncome": 100.0,
            "totalExpense": 40.0,
            "balance": 60.0,
        }


class TestDeleteTransaction:
    @pytest.mark.asyncio
    async def test_requires_criteria(self, server):
        text = await call_text(server, "deleteTransaction")
        assert "at least one deletion criterion" in text

    @pytest.mark.asyncio
    async def test_bulk_preview_then_confirm(self, server, seeded_repository):
        preview = await call_text(server, "deleteTransaction", {"category": "food"})

        assert "Matching transactions: **1**" in preview
        assert seeded_repository.count_entries() == 2

        committed = await call_text(
            server, "deleteTransaction", {"category": "food", "confirmBulk": True}
        )

        assert committed.startswith("✅ Successfully deleted 1 transaction(s)")
        summary = json.loads(await call_text(server, "getTransactionSummary"))
        assert summary == {"totalIncome": 100.0, "totalExpense": 0.0, "balance": 100.0}

    @pytest.mark.asyncio
    async def test_missing_id(self, server):
        text = await call_text(server, "deleteTransaction", {"id": 999})
        assert text == "❌ Transaction with ID 999 not found."


class TestVisualizeTransactions:
    @pytest.mark.asyncio
    async def test_returns_html_image_and_data(self, server):
        result = await call(
            server, "visualizeTransactions", {"chartType": "line", "groupBy": "day"}
        )

        html, image, data = result.content
        assert html.type == "resource"
        assert "Transaction Visualization" in html.resource.text
        assert image.type == "image"
        assert image.mimeType == "image/png"

        payload = json.loads(data.text)
        assert payload["chartType"] == "line"
        assert payload["labels"] == ["2024-01-05", "2024-01-10"]
        assert payload["incomeData"] == [100.0, 0.0]
        assert payload["expenseData"] == [0.0, 40.0]

    @pytest.mark.asyncio
    async def test_rejects_unknown_grouping(self, server):
        with pytest.raises(ToolError):
            await call(server, "visualizeTransactions", {"groupBy": "year"})


class TestExportAndRawData:
    @pytest.mark.asyncio
    async def test_csv_export(self, server):
        text = await call_text(server, "exportTransactions", {"format": "csv"})

        lines = text.strip().splitlines()
        assert lines[0] == "ID,Date,Time,Type,Amount,Category,Description"
        assert len(lines) == 3

    @pytest.mark.asyncio
    async def test_xlsx_export_writes_file(self, server, tmp_path):
        text = await call_text(server, "exportTransactions", {"format": "xlsx"})

        assert text.startswith("✅ Exported transactions to ")
        assert list((tmp_path / "exports").glob("*.xlsx"))

    @pytest.mark.asyncio
    async def test_raw_data_resource(self, server):
        async with Client(server) as client:
            contents = await client.read_resource(RAW_DATA_URI)

        data = json.loads(contents[0].text)
        assert data["metadata"]["total_transactions"] == 2
        assert len(data["transactions"]) == 2


class TestErrorResult:
    def test_validation_and_lookup_become_text(self):
        assert _error_result(ValidationError("bad"), "tool") == "❌ Error: bad"
        assert _error_result(NotFoundError(3), "tool") == (
            "❌ Transaction with ID 3 not found."
        )

    def test_store_errors_are_opaque(self):
        with pytest.raises(ToolError, match=ERROR_MESSAGES["database_error"]):
            _error_result(StoreError("disk I/O error"), "tool")
