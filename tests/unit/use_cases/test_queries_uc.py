"""Tests for order views, reports and customer registration."""

from datetime import UTC, date, datetime
from unittest.mock import MagicMock, patch

import pytest

from src.application.dto.requests import DailySummaryRequest, RegisterCustomerRequest
from src.application.state import PosState
from src.application.use_cases import list_orders as list_orders_module
from src.application.use_cases import reports as reports_module
from src.application.use_cases.list_orders import ListOrdersUseCase, OrderView
from src.application.use_cases.register_customer import RegisterCustomerUseCase
from src.application.use_cases.reports import DailySummaryUseCase, StockReportUseCase
from src.core.entities.sale import FulfillmentStatus, PaymentMethod, PaymentStatus
from tests.factories import make_product, make_sale


def completed(sale_id, transaction_id, hour):
    return make_sale(
        sale_id,
        transaction_id,
        date=datetime(2024, 3, 1, hour, 0, tzinfo=UTC),
        payment_status=PaymentStatus.PAID,
        payment_method=PaymentMethod.CASH,
        payment_date=datetime(2024, 3, 1, hour, 30, tzinfo=UTC),
        fulfillment_status=FulfillmentStatus.COMPLETED,
    )


@pytest.fixture
def board_state():
    return PosState(
        sales=[
            make_sale("s1", "AAAA1111", date=datetime(2024, 3, 1, 8, 0, tzinfo=UTC)),
            make_sale(
                "s2",
                "BBBB2222",
                date=datetime(2024, 3, 1, 9, 0, tzinfo=UTC),
                payment_status=PaymentStatus.PAID,
                fulfillment_status=FulfillmentStatus.READY,
            ),
            completed("s3", "CCCC3333", 10),
            completed("s4", "DDDD4444", 11),
            completed("s5", "EEEE5555", 12),
        ]
    )


class TestListOrdersUseCase:
    async def test_all(self, board_state):
        orders = await ListOrdersUseCase(state=board_state).execute()
        assert [o.key for o in orders] == [
            "EEEE5555",
            "DDDD4444",
            "CCCC3333",
            "BBBB2222",
            "AAAA1111",
        ]

    @pytest.mark.parametrize(
        ("view", "keys"),
        [
            (OrderView.PENDING, ["AAAA1111"]),
            (OrderView.PICKUP, ["BBBB2222"]),
            (OrderView.READY, ["BBBB2222"]),
            (OrderView.PROCESSING, []),
        ],
    )
    async def test_views(self, board_state, view, keys):
        orders = await ListOrdersUseCase(state=board_state).execute(view=view)
        assert [o.key for o in orders] == keys

    async def test_completed_log_is_capped(self, board_state):
        settings = MagicMock()
        settings.inventory.completed_log_limit = 2
        with patch.object(list_orders_module, "get_settings", return_value=settings):
            orders = await ListOrdersUseCase(state=board_state).execute(OrderView.COMPLETED)
        assert [o.key for o in orders] == ["EEEE5555", "DDDD4444"]

    async def test_code_search(self, board_state):
        orders = await ListOrdersUseCase(state=board_state).execute(code="bbbb")
        assert [o.key for o in orders] == ["BBBB2222"]

    async def test_to_response(self, board_state):
        use_case = ListOrdersUseCase(state=board_state)
        orders = await use_case.execute(OrderView.PENDING)
        response = use_case.to_response(OrderView.PENDING, orders)
        assert response.view == "pending"
        assert response.total == 1


class TestReports:
    async def test_daily_summary(self, board_state):
        use_case = DailySummaryUseCase(state=board_state)
        summary = await use_case.execute(DailySummaryRequest(day=date(2024, 3, 1)))
        assert summary.total_revenue == 300.0
        assert summary.transaction_count == 3

        response = use_case.to_response(summary)
        assert response.by_method == {"CASH": 300.0}
        assert response.by_salesman[0].salesman == "Unassigned"

    async def test_stock_report_default_threshold(self):
        state = PosState(products=[make_product("a", stock=0), make_product("b", stock=4)])
        settings = MagicMock()
        settings.inventory.low_stock_threshold = 5
        with patch.object(reports_module, "get_settings", return_value=settings):
            report = await StockReportUseCase(state=state).execute()
        assert report.threshold == 5
        assert [p.id for p in report.low_stock] == ["b"]
        assert [p.id for p in report.out_of_stock] == ["a"]


class TestRegisterCustomerUseCase:
    async def test_register(self, state, sync, mock_persistence):
        use_case = RegisterCustomerUseCase(state=state, sync=sync)

        customer = await use_case.execute(
            RegisterCustomerRequest(name="  Yaw Boateng ", phone=" 0201112222 ")
        )

        assert customer.name == "Yaw Boateng"
        assert customer.phone == "0201112222"
        assert customer.total_spent == 0.0
        assert customer.preferences == []
        assert state.customers[customer.id] is customer
        mock_persistence.save_customer.assert_awaited_once()
