from __future__ import annotations

from collections import Counter
from datetime import date, timedelta
from decimal import Decimal
from unittest import mock

from django.test import TestCase, override_settings
from django.utils import timezone
from rest_framework.test import APIClient

from apps.accounts.domain.types import AuthContext
from apps.accounts.models import AccountProfile
from apps.accounts.testing import bearer_for, create_user_with_profile
from apps.catalog.models import Product
from apps.catalog.services.inventory_service import InventoryService
from apps.catalog.testing import make_category, make_product
from apps.orders.domain.errors import (
    IllegalTransitionError,
    InsufficientStockError,
    OrderNumberExhaustedError,
)
from apps.orders.domain.order_number import (
    ORDER_NUMBER_PATTERN,
    daily_prefix,
    format_order_number,
    next_sequence,
)
from apps.orders.domain.payment_state_machine import check_payment_transition
from apps.orders.domain.pricing import PricingRules, compute_totals, format_amount, shipping_cost, tax_for
from apps.orders.domain.state_machine import allowed_targets, check_transition
from apps.orders.models import Order
from apps.orders.services.stock_service import OrderStockService
from apps.orders.testing import checkout_payload, place_order


class PricingTests(TestCase):
    rules = PricingRules()

    def test_nairobi_order_totals(self):
        totals = compute_totals([(Decimal("1000"), 2)], city="Nairobi", rules=self.rules)
        self.assertEqual(totals.subtotal, Decimal("2000"))
        self.assertEqual(totals.shipping_cost, Decimal("300"))
        self.assertEqual(totals.tax, Decimal("320"))
        self.assertEqual(totals.total_amount, Decimal("2620"))

    def test_remote_city_surcharge_is_case_insensitive(self):
        totals = compute_totals([(Decimal("1000"), 2)], city="GARISSA", rules=self.rules)
        self.assertEqual(totals.shipping_cost, Decimal("500"))
        self.assertEqual(totals.total_amount, Decimal("2820"))

    def test_free_shipping_from_threshold(self):
        self.assertEqual(shipping_cost(Decimal("6000"), "Wajir", self.rules), Decimal("0"))
        self.assertEqual(shipping_cost(Decimal("5000"), "Nairobi", self.rules), Decimal("0"))
        self.assertEqual(shipping_cost(Decimal("4999.99"), "Nairobi", self.rules), Decimal("300"))

    def test_tax_rounds_half_up(self):
        self.assertEqual(tax_for(Decimal("103.125"), self.rules), Decimal("17"))
        self.assertEqual(tax_for(Decimal("1003.13"), self.rules), Decimal("161"))

    def test_format_amount(self):
        self.assertEqual(format_amount(Decimal("2620.00")), "2620")
        self.assertEqual(format_amount(Decimal("99.5")), "99.50")


class OrderNumberTests(TestCase):
    def test_format_and_pattern(self):
        number = format_order_number(date(2024, 3, 9), 7)
        self.assertEqual(number, "ORD2403090007")
        self.assertRegex(number, ORDER_NUMBER_PATTERN)

    def test_sequence_increments_from_last(self):
        self.assertEqual(next_sequence(None), 1)
        self.assertEqual(next_sequence("ORD2403090041"), 42)

    def test_sequence_exhaustion(self):
        with self.assertRaises(OrderNumberExhaustedError):
            format_order_number(date(2024, 3, 9), 10000)


class StateMachineTests(TestCase):
    def test_forward_skips_allowed(self):
        self.assertFalse(check_transition("pending", "shipped").is_noop)
        self.assertTrue(check_transition("confirmed", "confirmed").is_noop)

    def test_backward_allowed(self):
        transition = check_transition("shipped", "confirmed")
        self.assertEqual(transition.target, "confirmed")

    def test_refunded_can_still_move(self):
        self.assertEqual(check_transition("refunded", "cancelled").target, "cancelled")
        self.assertEqual(allowed_targets("refunded"), allowed_targets("pending"))

    def test_terminal_states_reject_everything(self):
        for status in ("delivered", "cancelled"):
            self.assertEqual(allowed_targets(status), frozenset())
            with self.assertRaises(IllegalTransitionError):
                check_transition(status, status)
            with self.assertRaises(IllegalTransitionError):
                check_transition(status, "pending")

    def test_refunded_payment_is_final(self):
        with self.assertRaises(IllegalTransitionError):
            check_payment_transition("refunded", "paid")
        check_payment_transition("partially_refunded", "refunded")


class CreateOrderTests(TestCase):
    def setUp(self):
        self.category = make_category()
        self.helmet = make_product("Safety Helmet", category=self.category, price="1000.00", stock=10)
        self.boots = make_product("Safety Boots", category=self.category, price="2500.00", stock=1)

    def test_order_number_sequence_per_day(self):
        first = place_order((self.helmet, 1))
        second = place_order((self.helmet, 1))
        prefix = daily_prefix(timezone.localdate())
        self.assertRegex(first.order_number, ORDER_NUMBER_PATTERN)
        self.assertEqual(first.order_number, f"{prefix}0001")
        self.assertEqual(second.order_number, f"{prefix}0002")

    def test_creation_reserves_stock_and_snapshots_lines(self):
        order = place_order((self.helmet, 2), (self.helmet, 1))
        self.helmet.refresh_from_db()
        self.assertEqual(self.helmet.stock, 7)
        self.assertTrue(order.stock_reserved)
        item = order.items.get()
        self.assertEqual(item.quantity, 3)
        self.assertEqual(item.product_name, "Safety Helmet")
        self.assertEqual(item.total_price, Decimal("3000.00"))
        self.assertEqual(order.timeline.get().note, "Order created")
        self.assertEqual(order.payment_method, "cash_on_delivery")
        self.assertGreater(order.estimated_delivery, timezone.now() + timedelta(days=6))

    def test_insufficient_stock_changes_nothing(self):
        with self.assertRaises(InsufficientStockError) as ctx:
            place_order((self.helmet, 2), (self.boots, 3))
        self.assertEqual(str(ctx.exception), "Insufficient stock for Safety Boots. Available: 1, Requested: 3")
        self.helmet.refresh_from_db()
        self.assertEqual(self.helmet.stock, 10)
        self.assertFalse(Order.objects.exists())

    def test_failed_decrement_rolls_back_whole_order(self):
        real_reserve = InventoryService.reserve
        boots_id = self.boots.pk

        def reserve(*, product_id, quantity):
            if product_id == boots_id:
                return False
            return real_reserve(product_id=product_id, quantity=quantity)

        with mock.patch(
            "apps.orders.services.stock_service.InventoryService.reserve", side_effect=reserve
        ):
            with self.assertRaises(InsufficientStockError):
                place_order((self.helmet, 2), (self.boots, 1))

        self.helmet.refresh_from_db()
        self.assertEqual(self.helmet.stock, 10)
        self.assertEqual(self.helmet.sales_count, 0)
        self.assertFalse(Order.objects.exists())

    def test_vanished_product_reports_loaded_stock(self):
        gone = Product(pk=987654, name="Ear Muffs", stock=4)
        with mock.patch(
            "apps.orders.services.stock_service.InventoryService.reserve", return_value=False
        ):
            with self.assertRaises(InsufficientStockError) as ctx:
                OrderStockService.reserve(Counter({gone.pk: 6}), products={gone.pk: gone})
        self.assertEqual(ctx.exception.available, 4)
        self.assertEqual(str(ctx.exception), "Insufficient stock for Ear Muffs. Available: 4, Requested: 6")

    def test_registered_customer_totals_updated(self):
        user = create_user_with_profile(email="buyer@bondex.test", role=AccountProfile.ROLE_CUSTOMER)
        actor = AuthContext(user_id=user.id, email=user.email, role=AccountProfile.ROLE_CUSTOMER)
        order = place_order((self.helmet, 2), actor=actor)
        self.assertEqual(order.customer_id, user.id)
        profile = AccountProfile.objects.get(user=user)
        self.assertEqual(profile.total_orders, 1)
        self.assertEqual(profile.total_spent, Decimal("2620.00"))


class CheckoutApiTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.helmet = make_product("Safety Helmet", price="1000.00", stock=10)

    def test_guest_checkout(self):
        response = self.client.post("/api/orders/", checkout_payload((self.helmet, 2)), format="json")
        self.assertEqual(response.status_code, 201)
        body = response.json()
        self.assertTrue(body["success"])
        self.assertEqual(body["data"]["pricing"]["totalAmount"], 2620)
        self.assertEqual(body["data"]["customerInfo"]["email"], "jane@example.com")
        self.assertIsNone(body["data"]["customer"])
        self.assertEqual(Order.objects.get().source, "web")

    def test_remote_city_checkout(self):
        response = self.client.post(
            "/api/orders/", checkout_payload((self.helmet, 2), city="Garissa"), format="json"
        )
        self.assertEqual(response.json()["data"]["pricing"]["totalAmount"], 2820)

    def test_large_order_ships_free(self):
        response = self.client.post("/api/orders/", checkout_payload((self.helmet, 6)), format="json")
        pricing = response.json()["data"]["pricing"]
        self.assertEqual(pricing["shippingCost"], 0)
        self.assertEqual(pricing["totalAmount"], 6960)

    def test_missing_customer_info(self):
        payload = checkout_payload((self.helmet, 1))
        payload["customerInfo"] = {"name": "Jane"}
        response = self.client.post("/api/orders/", payload, format="json")
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["message"], "Customer information (name, email, phone) is required")

    def test_items_required(self):
        response = self.client.post("/api/orders/", checkout_payload(), format="json")
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["message"], "Order items are required")

    def test_invalid_item_quantity(self):
        payload = checkout_payload((self.helmet, 0))
        response = self.client.post("/api/orders/", payload, format="json")
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["message"], "Each item must have a valid product ID and quantity")

    def test_incomplete_address(self):
        payload = checkout_payload((self.helmet, 1))
        payload["shippingAddress"] = {"address": "1 Moi Avenue", "city": "Nairobi"}
        response = self.client.post("/api/orders/", payload, format="json")
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["message"], "Complete shipping address is required")

    def test_unknown_product_is_404(self):
        payload = checkout_payload((self.helmet, 1))
        payload["items"] = [{"product": 999999, "quantity": 1}]
        response = self.client.post("/api/orders/", payload, format="json")
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json()["message"], "Product not found: 999999")

    def test_inactive_product_rejected(self):
        Product.objects.filter(pk=self.helmet.pk).update(status=Product.STATUS_INACTIVE)
        response = self.client.post("/api/orders/", checkout_payload((self.helmet, 1)), format="json")
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["message"], "Product is not available: Safety Helmet")

    def test_listing_requires_admin(self):
        response = self.client.get("/api/orders/")
        self.assertEqual(response.status_code, 401)


class AdminOrderApiTests(TestCase):
    def setUp(self):
        self.admin = create_user_with_profile()
        self.client = APIClient()
        self.client.credentials(HTTP_AUTHORIZATION=bearer_for(self.admin))
        self.helmet = make_product("Safety Helmet", price="1000.00", stock=10)
        self.order = place_order((self.helmet, 2))

    def _status(self, status, **extra):
        return self.client.patch(
            f"/api/orders/{self.order.pk}/status/", {"status": status, **extra}, format="json"
        )

    def _stock(self) -> int:
        return Product.objects.get(pk=self.helmet.pk).stock

    def test_status_flow_appends_timeline(self):
        response = self._status("confirmed")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["message"], "Order status updated to confirmed")
        self._status("processing")
        self.assertEqual(self._stock(), 8)
        self.order.refresh_from_db()
        self.assertIsNotNone(self.order.confirmed_at)
        self.assertIsNotNone(self.order.processing_at)
        notes = list(self.order.timeline.values_list("note", flat=True))
        self.assertEqual(notes[-1], "Status changed from confirmed to processing")
        self.assertEqual(self.order.timeline.last().updated_by_id, self.admin.id)

    def test_unknown_status_rejected(self):
        response = self._status("lost")
        self.assertEqual(response.status_code, 400)
        self.assertTrue(response.json()["message"].startswith("Invalid status. Valid statuses:"))

    def test_unknown_order_is_404(self):
        response = self.client.patch("/api/orders/999999/status/", {"status": "confirmed"}, format="json")
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json()["message"], "Order not found")

    def test_backward_move_appends_timeline(self):
        self._status("shipped")
        response = self._status("confirmed")
        self.assertEqual(response.status_code, 200)
        self.order.refresh_from_db()
        self.assertEqual(self.order.status, "confirmed")
        entry = self.order.timeline.last()
        self.assertEqual(entry.status, "confirmed")
        self.assertEqual(entry.note, "Status changed from shipped to confirmed")
        self.assertEqual(self._stock(), 8)
        self.assertTrue(self.order.stock_reserved)

    def test_refunded_order_can_be_cancelled_without_second_restore(self):
        self._status("refunded")
        self.assertEqual(self._stock(), 10)
        response = self._status("cancelled", note="Closed after refund")
        self.assertEqual(response.status_code, 200)
        self.order.refresh_from_db()
        self.assertEqual(self.order.status, "cancelled")
        self.assertFalse(self.order.stock_reserved)
        self.assertEqual(self._stock(), 10)

    def test_cancel_from_processing_restores_exact_quantities(self):
        self._status("processing")
        self.assertEqual(self._stock(), 8)
        response = self._status("cancelled")
        self.assertEqual(response.status_code, 200)
        self.order.refresh_from_db()
        self.assertEqual(self._stock(), 10)
        self.assertFalse(self.order.stock_reserved)
        self.assertEqual(self.order.cancel_reason, "Cancelled by admin")

    def test_cancel_from_shipped_restores_exact_quantities(self):
        self._status("shipped", trackingNumber="TRK-9")
        response = self._status("cancelled")
        self.assertEqual(response.status_code, 200)
        self.order.refresh_from_db()
        self.assertEqual(self._stock(), 10)
        self.assertFalse(self.order.stock_reserved)

    def test_full_refund_of_shipped_order_cancels_and_restores(self):
        self._status("shipped")
        response = self.client.post(
            f"/api/orders/{self.order.pk}/refund/", {"amount": 2620, "reason": "Lost in transit"}, format="json"
        )
        self.assertEqual(response.status_code, 200)
        self.order.refresh_from_db()
        self.assertEqual(self.order.status, "cancelled")
        self.assertEqual(self.order.payment_status, "refunded")
        self.assertFalse(self.order.stock_reserved)
        self.assertEqual(self._stock(), 10)

    def test_delivery_settles_partially_refunded_payment(self):
        self.client.post(
            f"/api/orders/{self.order.pk}/refund/", {"amount": 100, "reason": "Scratched visor"}, format="json"
        )
        self._status("delivered")
        self.order.refresh_from_db()
        self.assertEqual(self.order.payment_status, "paid")
        self.assertEqual(self.order.refund_amount, Decimal("100.00"))
        self.assertEqual(self.order.payment_history.last().note, "Payment settled on delivery")

    def test_delivery_leaves_fully_refunded_payment(self):
        self.client.patch(f"/api/orders/{self.order.pk}/payment/", {"paymentStatus": "refunded"}, format="json")
        response = self._status("delivered")
        self.assertEqual(response.status_code, 200)
        self.order.refresh_from_db()
        self.assertEqual(self.order.status, "delivered")
        self.assertEqual(self.order.payment_status, "refunded")
        self.assertEqual(self.order.payment_history.count(), 1)

    def test_delivered_is_terminal_and_settles_payment(self):
        self._status("delivered")
        self.order.refresh_from_db()
        self.assertEqual(self.order.payment_status, "paid")
        self.assertIsNotNone(self.order.paid_at)
        self.assertFalse(self.order.stock_reserved)
        self.assertEqual(self.order.payment_history.get().status, "paid")

        for target in ("cancelled", "delivered"):
            response = self._status(target)
            self.assertEqual(response.status_code, 400)
            self.assertEqual(response.json()["message"], "Cannot change status of delivered order")
        self.order.refresh_from_db()
        self.assertEqual(self.order.status, "delivered")
        self.assertEqual(self._stock(), 8)

    def test_cancel_restores_stock_once(self):
        response = self._status("cancelled", note="Customer changed mind")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(self._stock(), 10)
        self.order.refresh_from_db()
        self.assertEqual(self.order.cancel_reason, "Customer changed mind")
        self.assertFalse(self.order.stock_reserved)

        self.assertEqual(self._status("refunded").status_code, 400)
        response = self.client.delete(f"/api/orders/{self.order.pk}/")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(self._stock(), 10)
        self.assertFalse(Order.objects.filter(pk=self.order.pk).exists())

    def test_refunded_status_restores_stock(self):
        self._status("refunded")
        self.assertEqual(self._stock(), 10)

    def test_shipped_with_tracking(self):
        self._status("shipped", trackingNumber="TRK-1")
        self.order.refresh_from_db()
        self.assertEqual(self.order.tracking_number, "TRK-1")
        self.assertIsNotNone(self.order.shipped_at)

    def test_payment_update_and_refunded_is_final(self):
        url = f"/api/orders/{self.order.pk}/payment/"
        response = self.client.patch(
            url, {"paymentStatus": "paid", "paymentMethod": "mpesa", "transactionId": "QX12"}, format="json"
        )
        self.assertEqual(response.status_code, 200)
        self.order.refresh_from_db()
        self.assertEqual(self.order.payment_method, "mpesa")
        self.assertEqual(self.order.transaction_id, "QX12")

        self.client.patch(url, {"paymentStatus": "refunded"}, format="json")
        self.order.refresh_from_db()
        self.assertEqual(self.order.refund_amount, self.order.total_amount)

        response = self.client.patch(url, {"paymentStatus": "paid"}, format="json")
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["message"], "Payment has been fully refunded and cannot change status")
        self.assertEqual(self.order.payment_history.count(), 2)

    def test_invalid_payment_status(self):
        response = self.client.patch(
            f"/api/orders/{self.order.pk}/payment/", {"paymentStatus": "bogus"}, format="json"
        )
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["field"], "paymentStatus")

    def test_refund_over_maximum_rejected(self):
        response = self.client.post(
            f"/api/orders/{self.order.pk}/refund/", {"amount": 3000, "reason": "Damaged"}, format="json"
        )
        self.assertEqual(response.status_code, 400)
        self.assertEqual(
            response.json()["message"], "Cannot refund KES 3000. Maximum refundable amount: KES 2620"
        )
        self.order.refresh_from_db()
        self.assertEqual(self.order.refund_amount, Decimal("0"))
        self.assertFalse(self.order.refunds.exists())

    def test_refund_validation(self):
        url = f"/api/orders/{self.order.pk}/refund/"
        response = self.client.post(url, {"amount": -5, "reason": "x"}, format="json")
        self.assertEqual(response.json()["message"], "Valid refund amount is required")
        response = self.client.post(url, {"amount": 100}, format="json")
        self.assertEqual(response.json()["message"], "Refund reason is required")

    def test_partial_then_full_refund_cancels_order(self):
        url = f"/api/orders/{self.order.pk}/refund/"
        response = self.client.post(url, {"amount": 1000, "reason": "Partial damage"}, format="json")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["data"]["paymentStatus"], "partially_refunded")
        self.assertEqual(self._stock(), 8)

        response = self.client.post(url, {"amount": 1620, "reason": "Returned"}, format="json")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["message"], "Refund of KES 1620 processed successfully")
        self.order.refresh_from_db()
        self.assertEqual(self.order.payment_status, "refunded")
        self.assertEqual(self.order.status, "cancelled")
        self.assertEqual(self.order.refund_amount, Decimal("2620.00"))
        self.assertEqual(self.order.refunds.count(), 2)
        self.assertEqual(
            self.order.timeline.last().note, "Order cancelled due to full refund: Returned"
        )
        self.assertEqual(self._stock(), 10)

        response = self.client.post(url, {"amount": 1, "reason": "Again"}, format="json")
        self.assertEqual(response.json()["message"], "Order has already been fully refunded")

    def test_full_refund_of_delivered_order_keeps_stock_consumed(self):
        self._status("delivered")
        response = self.client.post(
            f"/api/orders/{self.order.pk}/refund/", {"amount": 2620, "reason": "Recall"}, format="json"
        )
        self.assertEqual(response.status_code, 200)
        self.order.refresh_from_db()
        self.assertEqual(self.order.status, "cancelled")
        self.assertEqual(self._stock(), 8)

    def test_tracking_moves_order_to_shipped(self):
        response = self.client.patch(
            f"/api/orders/{self.order.pk}/tracking/",
            {"trackingNumber": "G4S-778", "carrier": "G4S"},
            format="json",
        )
        self.assertEqual(response.status_code, 200)
        self.order.refresh_from_db()
        self.assertEqual(self.order.status, "shipped")
        entry = self.order.tracking_history.get()
        self.assertEqual(entry.note, "Tracking information updated")
        self.assertEqual(entry.carrier, "G4S")

    def test_tracking_requires_number(self):
        response = self.client.patch(f"/api/orders/{self.order.pk}/tracking/", {}, format="json")
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["message"], "Tracking number is required")

    def test_tracking_on_cancelled_order_rejected(self):
        self._status("cancelled")
        response = self.client.patch(
            f"/api/orders/{self.order.pk}/tracking/", {"trackingNumber": "X1"}, format="json"
        )
        self.assertEqual(response.status_code, 400)
        self.order.refresh_from_db()
        self.assertEqual(self.order.tracking_number, "")
        self.assertFalse(self.order.tracking_history.exists())

    def test_recent_pending_order_cannot_be_deleted(self):
        response = self.client.delete(f"/api/orders/{self.order.pk}/")
        self.assertEqual(response.status_code, 400)
        self.assertEqual(
            response.json()["message"], "Can only delete cancelled orders or pending orders older than 7 days"
        )

    def test_stale_pending_order_deleted_with_stock_restored(self):
        Order.objects.filter(pk=self.order.pk).update(created_at=timezone.now() - timedelta(days=8))
        response = self.client.delete(f"/api/admin/orders/{self.order.pk}/")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["data"]["orderNumber"], self.order.order_number)
        self.assertEqual(self._stock(), 10)

    def test_update_order_discount_recomputes_total(self):
        response = self.client.put(
            f"/api/orders/{self.order.pk}/",
            {"discount": "120.00", "internalNote": "Loyal customer", "orderNumber": "ORD0000000000"},
            format="json",
        )
        self.assertEqual(response.status_code, 200)
        self.order.refresh_from_db()
        self.assertEqual(self.order.total_amount, Decimal("2500.00"))
        self.assertEqual(self.order.internal_note, "Loyal customer")
        self.assertNotEqual(self.order.order_number, "ORD0000000000")

    def test_discount_cannot_exceed_total(self):
        response = self.client.put(f"/api/orders/{self.order.pk}/", {"discount": "9999"}, format="json")
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["field"], "discount")

    def test_detail_includes_analytics(self):
        response = self.client.get(f"/api/admin/orders/{self.order.pk}/")
        self.assertEqual(response.status_code, 200)
        analytics = response.json()["data"]["analytics"]
        self.assertEqual(analytics["itemsCount"], 1)
        self.assertEqual(analytics["totalQuantity"], 2)
        self.assertEqual(analytics["averageItemPrice"], 1000)


@override_settings(ORDER_REMOTE_CITIES=["lodwar"])
class OrderQueryApiTests(TestCase):
    def setUp(self):
        self.admin = create_user_with_profile()
        self.client = APIClient()
        self.client.credentials(HTTP_AUTHORIZATION=bearer_for(self.admin))
        self.helmet = make_product("Safety Helmet", price="1000.00", stock=50)
        self.first = place_order((self.helmet, 2))
        self.second = place_order((self.helmet, 1), city="Lodwar")
        Order.objects.filter(pk=self.second.pk).update(status="confirmed", customer_name="Otieno Kamau")

    def test_list_with_summary_and_breakdown(self):
        response = self.client.get("/api/admin/orders/")
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body["count"], 2)
        self.assertEqual(body["pagination"]["totalOrders"], 2)
        self.assertEqual(body["summary"]["totalOrders"], 2)
        self.assertEqual(body["summary"]["totalRevenue"], 2620 + 1660)
        self.assertEqual(body["statusBreakdown"], {"pending": 1, "confirmed": 1})

    def test_filters(self):
        body = self.client.get("/api/orders/", {"search": "otieno"}).json()
        self.assertEqual([row["id"] for row in body["data"]], [self.second.pk])
        body = self.client.get("/api/orders/", {"status": "all", "minAmount": "2000"}).json()
        self.assertEqual([row["id"] for row in body["data"]], [self.first.pk])
        today = timezone.localdate().isoformat()
        body = self.client.get("/api/orders/", {"startDate": today, "endDate": today}).json()
        self.assertEqual(body["pagination"]["totalOrders"], 2)

    def test_sorting(self):
        body = self.client.get("/api/orders/", {"sortBy": "totalAmount", "sortOrder": "asc"}).json()
        self.assertEqual([row["id"] for row in body["data"]], [self.second.pk, self.first.pk])

    def test_invalid_date_rejected(self):
        response = self.client.get("/api/orders/", {"startDate": "yesterday"})
        self.assertEqual(response.status_code, 400)

    def test_export_rows(self):
        body = self.client.get("/api/orders/export/", {"status": "pending"}).json()
        self.assertEqual(body["message"], "1 orders exported successfully")
        row = body["data"][0]
        self.assertEqual(row["Order Number"], self.first.order_number)
        self.assertEqual(row["Tracking Number"], "N/A")
        self.assertEqual(row["Shipping Address"], "1 Moi Avenue, Nairobi, Nairobi")

    def test_stats(self):
        body = self.client.get("/api/orders/stats/").json()
        self.assertEqual(body["data"]["overview"]["totalOrders"], 2)
        self.assertEqual(body["data"]["overview"]["pendingOrders"], 1)
        top = body["data"]["topProducts"][0]
        self.assertEqual(top["productName"], "Safety Helmet")
        self.assertEqual(top["totalQuantity"], 3)

    def test_recent(self):
        body = self.client.get("/api/orders/recent/", {"limit": 1}).json()
        self.assertEqual(len(body["data"]), 1)
        self.assertEqual(body["data"][0]["orderNumber"], self.second.order_number)


class BulkStatusApiTests(TestCase):
    def setUp(self):
        self.admin = create_user_with_profile()
        self.client = APIClient()
        self.client.credentials(HTTP_AUTHORIZATION=bearer_for(self.admin))
        self.helmet = make_product("Safety Helmet", price="1000.00", stock=20)
        self.first = place_order((self.helmet, 1))
        self.second = place_order((self.helmet, 2))
        self.delivered = place_order((self.helmet, 3))
        Order.objects.filter(pk=self.delivered.pk).update(status="delivered")

    def _bulk(self, payload):
        return self.client.patch("/api/admin/orders/bulk/status/", payload, format="json")

    def test_each_order_goes_through_the_state_machine(self):
        response = self._bulk(
            {"orderIds": [self.first.pk, self.second.pk, self.delivered.pk, 999999], "status": "cancelled"}
        )
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body["message"], "Successfully updated 2 orders")
        self.assertEqual(body["data"]["matched"], 3)
        self.assertEqual(body["data"]["modified"], 2)
        self.assertEqual(body["data"]["updated"], [self.first.pk, self.second.pk])
        self.assertEqual(
            body["data"]["failed"],
            [
                {"orderId": self.delivered.pk, "error": "Cannot change status of delivered order"},
                {"orderId": 999999, "error": "Order not found"},
            ],
        )

        self.first.refresh_from_db()
        self.assertEqual(self.first.status, "cancelled")
        self.assertFalse(self.first.stock_reserved)
        self.assertEqual(self.first.timeline.last().note, "Bulk status update to cancelled")
        self.assertEqual(self.first.timeline.last().updated_by_id, self.admin.id)
        self.helmet.refresh_from_db()
        self.assertEqual(self.helmet.stock, 17)
        self.delivered.refresh_from_db()
        self.assertEqual(self.delivered.status, "delivered")

    def test_custom_note(self):
        self._bulk({"orderIds": [self.first.pk], "status": "confirmed", "note": "Morning batch"})
        self.first.refresh_from_db()
        self.assertEqual(self.first.status, "confirmed")
        self.assertIsNotNone(self.first.confirmed_at)
        self.assertEqual(self.first.timeline.last().note, "Morning batch")

    def test_validation(self):
        response = self._bulk({"orderIds": [], "status": "confirmed"})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["message"], "Order IDs array is required")
        response = self._bulk({"orderIds": [self.first.pk]})
        self.assertEqual(response.json()["message"], "Status is required")
        response = self._bulk({"orderIds": [self.first.pk], "status": "lost"})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["field"], "status")
        self.first.refresh_from_db()
        self.assertEqual(self.first.status, "pending")

    def test_public_mirror_requires_admin(self):
        anonymous = APIClient()
        response = anonymous.patch(
            "/api/orders/bulk/status/", {"orderIds": [self.first.pk], "status": "confirmed"}, format="json"
        )
        self.assertEqual(response.status_code, 401)


class PublicTrackingApiTests(TestCase):
    def setUp(self):
        self.helmet = make_product("Safety Helmet", price="1000.00", stock=10)
        self.order = place_order((self.helmet, 2))
        Order.objects.filter(pk=self.order.pk).update(status="shipped", tracking_number="G4S-42", carrier="G4S")

    def test_lookup_without_auth(self):
        response = APIClient().get(f"/api/orders/tracking/{self.order.order_number.lower()}/")
        self.assertEqual(response.status_code, 200)
        data = response.json()["data"]
        self.assertEqual(data["orderNumber"], self.order.order_number)
        self.assertEqual(data["status"], "shipped")
        self.assertEqual(data["shipping"]["trackingNumber"], "G4S-42")
        self.assertEqual(data["items"], [{"productName": "Safety Helmet", "quantity": 2}])
        self.assertEqual(data["timeline"][0]["note"], "Order created")
        self.assertNotIn("customerInfo", data)
        self.assertNotIn("updatedBy", data["timeline"][0])

    def test_unknown_number_is_404(self):
        response = APIClient().get("/api/orders/tracking/ORD0000000000/")
        self.assertEqual(response.status_code, 404)


class CustomerOrdersApiTests(TestCase):
    def setUp(self):
        self.customer = create_user_with_profile(
            email="wanjiku@example.com", role=AccountProfile.ROLE_CUSTOMER, full_name="Jane Wanjiku"
        )
        self.other = create_user_with_profile(email="otieno@example.com", role=AccountProfile.ROLE_CUSTOMER)
        self.helmet = make_product("Safety Helmet", price="1000.00", stock=20)
        self.mine = place_order((self.helmet, 1), actor=self._actor(self.customer))
        self.theirs = place_order((self.helmet, 1), actor=self._actor(self.other))
        self.guest = place_order((self.helmet, 1))
        self.client = APIClient()
        self.client.credentials(HTTP_AUTHORIZATION=bearer_for(self.customer))

    @staticmethod
    def _actor(user) -> AuthContext:
        return AuthContext(user_id=user.id, email=user.email, role=AccountProfile.ROLE_CUSTOMER)

    def test_lists_only_own_orders(self):
        response = self.client.get("/api/orders/my-orders/")
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual([row["id"] for row in body["data"]], [self.mine.pk])
        self.assertEqual(body["pagination"]["totalOrders"], 1)

    def test_customer_filter_cannot_widen_scope(self):
        body = self.client.get("/api/orders/my-orders/", {"customer": self.other.id}).json()
        self.assertEqual(body["data"], [])

    def test_own_order_detail(self):
        response = self.client.get(f"/api/orders/{self.mine.pk}/customer/")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["data"]["orderNumber"], self.mine.order_number)

    def test_other_customers_order_is_404(self):
        for order in (self.theirs, self.guest):
            response = self.client.get(f"/api/orders/{order.pk}/customer/")
            self.assertEqual(response.status_code, 404)

    def test_requires_login(self):
        self.assertEqual(APIClient().get("/api/orders/my-orders/").status_code, 401)

    def test_customer_cannot_use_admin_listing(self):
        self.assertEqual(self.client.get("/api/orders/").status_code, 403)
