from __future__ import annotations

import logging

from rest_framework import status
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.views import APIView

from apps.accounts.infrastructure.authentication import OptionalJWTAuthentication
from apps.accounts.interfaces.api.request_context import auth_context, client_ip, user_agent
from apps.orders.application.use_cases.bulk_update_order_status import (
    BulkUpdateOrderStatusCommand,
    BulkUpdateOrderStatusUseCase,
    parse_order_ids,
)
from apps.orders.application.use_cases.create_order import (
    CreateOrderCommand,
    CreateOrderUseCase,
    parse_line_items,
)
from apps.orders.application.use_cases.delete_order import DeleteOrderCommand, DeleteOrderUseCase
from apps.orders.application.use_cases.process_refund import (
    DEFAULT_REFUND_METHOD,
    ProcessRefundCommand,
    ProcessRefundUseCase,
)
from apps.orders.application.use_cases.update_order import UpdateOrderCommand, UpdateOrderUseCase
from apps.orders.application.use_cases.update_order_status import (
    UpdateOrderStatusCommand,
    UpdateOrderStatusUseCase,
)
from apps.orders.application.use_cases.update_payment_status import (
    UpdatePaymentStatusCommand,
    UpdatePaymentStatusUseCase,
)
from apps.orders.application.use_cases.update_tracking import UpdateTrackingCommand, UpdateTrackingUseCase
from apps.orders.domain.errors import (
    OrderDomainError,
    OrderNotFoundError,
    OrderNumberExhaustedError,
    OrderProductNotFoundError,
    OrderValidationError,
)
from apps.orders.domain.pricing import format_amount
from apps.orders.domain.types import AddressSnapshot, CustomerSnapshot
from apps.orders.interfaces.api.serializers import (
    BulkStatusUpdateSerializer,
    CreateOrderSerializer,
    OrderListSerializer,
    OrderSerializer,
    OrderTrackingSerializer,
    OrderUpdateSerializer,
    PaymentUpdateSerializer,
    RecentOrderSerializer,
    RefundSerializer,
    StatusUpdateSerializer,
    TrackingUpdateSerializer,
)
from apps.orders.services.order_query_service import (
    customer_orders,
    export_rows,
    filter_orders,
    lookup_by_number,
    lookup_customer_order,
    lookup_order,
    order_analytics,
    order_stats,
    recent_orders,
    status_breakdown,
    summarize,
)
from bondex.api_responses import api_error, api_success
from bondex.pagination import page_request, paginate

logger = logging.getLogger("bondex.orders")


def _domain_error(exc: OrderDomainError):
    if isinstance(exc, (OrderNotFoundError, OrderProductNotFoundError)):
        return api_error(message=str(exc), http_status=status.HTTP_404_NOT_FOUND)
    if isinstance(exc, OrderNumberExhaustedError):
        logger.error("order.number_exhausted", extra={"error": str(exc)})
        return api_error(message=str(exc), http_status=status.HTTP_503_SERVICE_UNAVAILABLE)
    field = exc.field if isinstance(exc, OrderValidationError) else None
    return api_error(message=str(exc), field=field)


def _order_payload(order_id) -> dict:
    return OrderSerializer(lookup_order(order_id)).data


class OrderListAPI(APIView):
    def get(self, request):
        try:
            queryset = filter_orders(request.query_params)
        except OrderDomainError as exc:
            return _domain_error(exc)
        items, pagination = paginate(
            queryset,
            page_request(request.query_params, default_limit=20),
            total_key="totalOrders",
        )
        return api_success(
            data=OrderListSerializer(items, many=True).data,
            count=len(items),
            pagination=pagination,
            summary=summarize(queryset),
            statusBreakdown=status_breakdown(queryset),
        )


class OrderCollectionAPI(OrderListAPI):
    """Storefront checkout (``POST``) shares its URL with the admin listing (``GET``)."""

    source = "web"

    def get_authenticators(self):
        if self.request.method == "POST":
            return [OptionalJWTAuthentication()]
        return super().get_authenticators()

    def get_permissions(self):
        if self.request.method == "POST":
            return [AllowAny()]
        return super().get_permissions()

    def post(self, request):
        serializer = CreateOrderSerializer(data=request.data)
        if not serializer.is_valid():
            return api_error(message="Order validation failed", errors=serializer.errors)
        data = serializer.validated_data
        customer = data.get("customerInfo") or {}
        address = data.get("shippingAddress") or {}

        try:
            cmd = CreateOrderCommand(
                customer=CustomerSnapshot(
                    name=customer.get("name", ""),
                    email=customer.get("email", ""),
                    phone=customer.get("phone", ""),
                ),
                shipping_address=AddressSnapshot(
                    address=address.get("address", ""),
                    city=address.get("city", ""),
                    county=address.get("county", ""),
                    full_name=address.get("fullName", ""),
                    phone=address.get("phone", ""),
                    email=address.get("email", ""),
                    postal_code=address.get("postalCode", ""),
                    country=address.get("country") or "Kenya",
                ),
                items=parse_line_items(data.get("items")),
                billing_address=data.get("billingAddress"),
                payment_method=data.get("paymentMethod", ""),
                shipping_method=data.get("shippingMethod", "standard"),
                customer_note=data.get("customerNote", ""),
                source=self.source,
                user_agent=user_agent(request),
                ip_address=client_ip(request),
            )
            result = CreateOrderUseCase.execute(cmd, auth_context(request))
        except OrderDomainError as exc:
            return _domain_error(exc)

        return api_success(
            message="Order created successfully",
            data=_order_payload(result.order.pk),
            http_status=status.HTTP_201_CREATED,
        )


class OrderStatsAPI(APIView):
    def get(self, request):
        try:
            stats = order_stats(request.query_params)
        except OrderDomainError as exc:
            return _domain_error(exc)
        return api_success(data=stats)


class RecentOrdersAPI(APIView):
    def get(self, request):
        limit = page_request(request.query_params, default_limit=10, max_limit=50).limit
        return api_success(data=RecentOrderSerializer(recent_orders(limit), many=True).data)


class OrderExportAPI(APIView):
    def get(self, request):
        try:
            rows = export_rows(request.query_params)
        except OrderDomainError as exc:
            return _domain_error(exc)
        return api_success(data=rows, message=f"{len(rows)} orders exported successfully")


class OrderDetailAPI(APIView):
    def get(self, request, order_id):
        try:
            order = lookup_order(order_id)
        except OrderDomainError as exc:
            return _domain_error(exc)
        data = OrderSerializer(order).data
        data["analytics"] = order_analytics(order)
        return api_success(data=data)

    def put(self, request, order_id):
        serializer = OrderUpdateSerializer(data=request.data, partial=True)
        if not serializer.is_valid():
            return api_error(message="Order validation failed", errors=serializer.errors)
        try:
            order = UpdateOrderUseCase.execute(
                UpdateOrderCommand(order_id=order_id, changes=dict(serializer.validated_data)),
                auth_context(request),
            )
        except OrderDomainError as exc:
            return _domain_error(exc)
        return api_success(message="Order updated successfully", data=_order_payload(order.pk))

    def delete(self, request, order_id):
        try:
            result = DeleteOrderUseCase.execute(DeleteOrderCommand(order_id=order_id), auth_context(request))
        except OrderDomainError as exc:
            return _domain_error(exc)
        return api_success(
            message="Order deleted successfully",
            data={"deletedOrderId": result.order_id, "orderNumber": result.order_number},
        )


class OrderStatusAPI(APIView):
    def patch(self, request, order_id):
        serializer = StatusUpdateSerializer(data=request.data)
        if not serializer.is_valid():
            return api_error(message="Invalid status update", errors=serializer.errors)
        data = serializer.validated_data
        try:
            result = UpdateOrderStatusUseCase.execute(
                UpdateOrderStatusCommand(
                    order_id=order_id,
                    status=data["status"],
                    note=data["note"],
                    tracking_number=data["trackingNumber"],
                    estimated_delivery=data["estimatedDelivery"],
                ),
                auth_context(request),
            )
        except OrderDomainError as exc:
            return _domain_error(exc)
        return api_success(
            message=f"Order status updated to {result.transition.target.value}",
            data=_order_payload(result.order.pk),
        )

    put = patch


class OrderTrackingAPI(APIView):
    def patch(self, request, order_id):
        serializer = TrackingUpdateSerializer(data=request.data)
        if not serializer.is_valid():
            return api_error(message="Invalid tracking update", errors=serializer.errors)
        data = serializer.validated_data
        try:
            order = UpdateTrackingUseCase.execute(
                UpdateTrackingCommand(
                    order_id=order_id,
                    tracking_number=data["trackingNumber"],
                    carrier=data["carrier"],
                    tracking_url=data["trackingUrl"],
                    estimated_delivery=data["estimatedDelivery"],
                    note=data["note"],
                ),
                auth_context(request),
            )
        except OrderDomainError as exc:
            return _domain_error(exc)
        return api_success(message="Tracking information updated successfully", data=_order_payload(order.pk))

    put = patch


class OrderPaymentAPI(APIView):
    def patch(self, request, order_id):
        serializer = PaymentUpdateSerializer(data=request.data)
        if not serializer.is_valid():
            return api_error(message="Invalid payment update", errors=serializer.errors)
        data = serializer.validated_data
        try:
            order = UpdatePaymentStatusUseCase.execute(
                UpdatePaymentStatusCommand(
                    order_id=order_id,
                    payment_status=data["paymentStatus"],
                    payment_method=data["paymentMethod"],
                    transaction_id=data["transactionId"],
                    note=data["note"],
                ),
                auth_context(request),
            )
        except OrderDomainError as exc:
            return _domain_error(exc)
        return api_success(message="Payment status updated successfully", data=_order_payload(order.pk))

    put = patch


class OrderRefundAPI(APIView):
    def post(self, request, order_id):
        serializer = RefundSerializer(data=request.data)
        if not serializer.is_valid():
            return api_error(message="Valid refund amount is required", errors=serializer.errors)
        data = serializer.validated_data
        try:
            result = ProcessRefundUseCase.execute(
                ProcessRefundCommand(
                    order_id=order_id,
                    amount=data["amount"],
                    reason=data["reason"],
                    method=data["refundMethod"] or DEFAULT_REFUND_METHOD,
                ),
                auth_context(request),
            )
        except OrderDomainError as exc:
            return _domain_error(exc)
        order = result.order
        return api_success(
            message=f"Refund of KES {format_amount(result.amount)} processed successfully",
            data={
                "orderId": order.pk,
                "orderNumber": order.order_number,
                "refundAmount": result.amount,
                "totalRefunded": order.refund_amount,
                "paymentStatus": order.payment_status,
                "status": order.status,
                "reason": data["reason"].strip(),
            },
        )


class OrderBulkStatusAPI(APIView):
    def patch(self, request):
        serializer = BulkStatusUpdateSerializer(data=request.data)
        if not serializer.is_valid():
            return api_error(message="Invalid bulk status update", errors=serializer.errors)
        data = serializer.validated_data
        try:
            result = BulkUpdateOrderStatusUseCase.execute(
                BulkUpdateOrderStatusCommand(
                    order_ids=parse_order_ids(data.get("orderIds")),
                    status=data["status"],
                    note=data["note"],
                ),
                auth_context(request),
            )
        except OrderDomainError as exc:
            return _domain_error(exc)
        return api_success(
            message=f"Successfully updated {len(result.updated)} orders",
            data={
                "status": result.status,
                "matched": result.matched,
                "modified": len(result.updated),
                "updated": result.updated,
                "failed": [
                    {"orderId": failure["orderId"], "error": failure["error"]} for failure in result.failed
                ],
            },
        )


class OrderTrackingLookupAPI(APIView):
    """Public tracking by order number."""

    authentication_classes = []
    permission_classes = [AllowAny]

    def get(self, request, order_number):
        try:
            order = lookup_by_number(order_number)
        except OrderDomainError as exc:
            return _domain_error(exc)
        return api_success(data=OrderTrackingSerializer(order).data)


class MyOrdersAPI(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        try:
            queryset = customer_orders(request.user.pk, request.query_params)
        except OrderDomainError as exc:
            return _domain_error(exc)
        items, pagination = paginate(
            queryset,
            page_request(request.query_params, default_limit=10),
            total_key="totalOrders",
        )
        return api_success(
            data=OrderListSerializer(items, many=True).data,
            count=len(items),
            pagination=pagination,
        )


class MyOrderDetailAPI(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request, order_id):
        try:
            order = lookup_customer_order(order_id, request.user.pk)
        except OrderDomainError as exc:
            return _domain_error(exc)
        return api_success(data=OrderSerializer(order).data)
