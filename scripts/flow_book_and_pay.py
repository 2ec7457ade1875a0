#!/usr/bin/env python3
"""
Complete booking and payment flow script.

DO NOT ADD BUSINESS LOGIC HERE.
This script only orchestrates API calls.
All rules live in the backend.

Usage:
    python scripts/flow_book_and_pay.py --user-token <JWT> --admin-token <JWT> \
        --campsite-id <UUID> --start 2026-04-01 --end 2026-04-04 --people 2

Flow:
    1. Check campsite availability
    2. Create booking (PENDING)
    3. Attach payment proof
    4. Admin marks booking PAID
    5. Admin checks the guests in
    6. Admin checks the guests out
"""

import argparse
import json
import sys

import httpx

BASE_URL = "http://localhost:8000"


def api_request(token: str, method: str, endpoint: str, data: dict | None = None, params: dict | None = None) -> dict:
    """Make authenticated API request."""
    headers = {"Authorization": f"Bearer {token}"}
    response = httpx.request(
        method,
        f"{BASE_URL}{endpoint}",
        headers=headers,
        json=data,
        params=params,
        timeout=10.0,
        follow_redirects=True,
    )
    return {"status": response.status_code, "data": response.json() if response.text else {}}


def print_step(step: int, title: str):
    """Print step header."""
    print(f"\n{'='*60}")
    print(f"STEP {step}: {title}")
    print("="*60)


def print_result(result: dict, fields: list[str] | None = None):
    """Print result, optionally filtering fields."""
    if result["status"] >= 400:
        print(f"ERROR ({result['status']}): {json.dumps(result['data'], indent=2)}")
        return False

    print(f"Status: {result['status']}")
    if fields:
        filtered = {k: result["data"].get(k) for k in fields if k in result["data"]}
        print(json.dumps(filtered, indent=2))
    else:
        print(json.dumps(result["data"], indent=2))
    return True


def main():
    parser = argparse.ArgumentParser(description="Complete booking and payment flow")
    parser.add_argument("--user-token", required=True, help="Bearer token of the guest")
    parser.add_argument("--admin-token", required=True, help="Bearer token of an admin")
    parser.add_argument("--campsite-id", required=True, help="Campsite UUID")
    parser.add_argument("--start", required=True, help="First night (YYYY-MM-DD)")
    parser.add_argument("--end", required=True, help="Departure day (YYYY-MM-DD)")
    parser.add_argument("--people", type=int, default=2, help="Number of people")
    parser.add_argument("--skip-stay", action="store_true", help="Skip check-in and checkout steps")
    args = parser.parse_args()

    print_step(1, "Check campsite availability")
    availability = api_request(
        args.user_token,
        "GET",
        f"/api/v1/booking/camps/{args.campsite_id}/availability",
        params={"start_date": args.start, "end_date": args.end},
    )
    if not print_result(availability, ["daily_capacity", "available_capacity"]):
        sys.exit(1)

    print_step(2, "Create booking")
    created = api_request(args.user_token, "POST", "/api/v1/booking", {
        "campsite_id": args.campsite_id,
        "start_date": args.start,
        "end_date": args.end,
        "people_count": args.people,
    })
    if not print_result(created, ["id", "status", "nights", "total_price"]):
        sys.exit(1)
    booking_id = created["data"]["id"]

    print_step(3, "Attach payment proof")
    proof = api_request(args.user_token, "POST", f"/api/v1/booking/{booking_id}/payment-proof", {
        "reference": f"uploads/payment-proofs/{booking_id}.jpg",
    })
    if not print_result(proof, ["id", "status", "payment_proof"]):
        sys.exit(1)

    steps = [(4, "PAID")]
    if not args.skip_stay:
        steps += [(5, "CHECK_IN"), (6, "CHECKOUT")]

    for step, new_status in steps:
        print_step(step, f"Admin sets status {new_status}")
        updated = api_request(
            args.admin_token, "PUT", f"/api/v1/admin/bookings/{booking_id}/status", {"status": new_status}
        )
        if not print_result(updated, ["id", "status"]):
            sys.exit(1)

    print(f"\nDone. Booking {booking_id}")


if __name__ == "__main__":
    main()
