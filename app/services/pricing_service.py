"""Booking price calculation.

All amounts are integers in the smallest currency unit.

- Stay: nightly_price x nights x people_count
- Equipment line: unit price x quantity x rental nights
- Total: stay + sum of equipment lines

The total is never taken from the client; it is recomputed inside the same
transaction that admits the booking and stored on the row.
"""

from collections.abc import Iterable
from dataclasses import dataclass


@dataclass(frozen=True)
class EquipmentLine:
    """Priced equipment rental for one attachment."""

    unit_price: int
    quantity: int
    nights: int

    @property
    def price(self) -> int:
        return self.unit_price * self.quantity * self.nights


class PricingService:
    """Service for computing booking totals."""

    def calculate_stay_price(self, nightly_price: int, nights: int, people_count: int) -> int:
        """Price of the campsite portion of a stay.

        Args:
            nightly_price: Campsite price per person per night
            nights: Number of nights in the stay
            people_count: Guests for the whole stay

        Returns:
            int: Stay price
        """
        return nightly_price * nights * people_count

    def calculate_booking_total(
        self,
        nightly_price: int,
        nights: int,
        people_count: int,
        equipment_lines: Iterable[EquipmentLine] = (),
    ) -> dict[str, int]:
        """Calculate the full price breakdown of a booking.

        Returns:
            dict with ``stay_price``, ``equipment_price`` and ``total_price``
        """
        stay_price = self.calculate_stay_price(nightly_price, nights, people_count)
        equipment_price = sum(line.price for line in equipment_lines)
        return {
            "stay_price": stay_price,
            "equipment_price": equipment_price,
            "total_price": stay_price + equipment_price,
        }


pricing_service = PricingService()
