"""Tests for booking price calculation."""

from app.services.pricing_service import EquipmentLine, pricing_service


class TestPricing:
    """Stay price plus equipment lines, all in the smallest currency unit."""

    def test_stay_price(self):
        assert pricing_service.calculate_stay_price(10000, 2, 4) == 80000

    def test_equipment_line_price(self):
        assert EquipmentLine(unit_price=50000, quantity=2, nights=1).price == 100000

    def test_total_with_equipment(self):
        breakdown = pricing_service.calculate_booking_total(
            10000, 2, 4, [EquipmentLine(unit_price=50000, quantity=2, nights=1)]
        )
        assert breakdown == {
            "stay_price": 80000,
            "equipment_price": 100000,
            "total_price": 180000,
        }

    def test_total_without_equipment(self):
        breakdown = pricing_service.calculate_booking_total(12500, 3, 1)
        assert breakdown["equipment_price"] == 0
        assert breakdown["total_price"] == 37500
