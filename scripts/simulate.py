"""
Concurrency Simulation Script

Drives a running FoodieHub server with the sample users: walks the role
matrix, then fires many orders and races checkouts and cancellations
against each of them. Every order must end in exactly one terminal state.
Run from project root: python scripts/simulate.py

Author: FoodieHub Team
Version: 1.0.0
"""

import asyncio
import sys
import random
import time
import argparse
from datetime import datetime
from typing import Any

import httpx

# Windows event loop fix
if sys.platform == "win32":
    asyncio.set_event_loop_policy(asyncio.WindowsSelectorEventLoopPolicy())

# Configuration
API_BASE_URL = "http://localhost:5000"
API_PREFIX = "/api"
TOTAL_ORDERS = 20

SAMPLE_LOGINS = {
    "admin": ("nick.fury@shield.com", "admin123"),
    "manager_india": ("captain.marvel@shield.com", "manager123"),
    "manager_america": ("captain.america@shield.com", "manager123"),
    "member_india": ("thor@shield.com", "member123"),
    "member_america": ("travis@shield.com", "member123"),
}


def api(path: str) -> str:
    return f"{API_BASE_URL}{API_PREFIX}{path}"


async def login(client: httpx.AsyncClient, email: str, password: str) -> dict[str, str]:
    """Log in and return the Authorization header."""
    response = await client.post(api("/auth/login"), json={"email": email, "password": password})
    response.raise_for_status()
    return {"Authorization": f"Bearer {response.json()['token']}"}


async def build_order_payload(client: httpx.AsyncClient, headers: dict[str, str]) -> dict[str, Any]:
    """Random order from a random restaurant in the caller's country."""
    restaurants = (await client.get(api("/restaurants"), headers=headers)).json()
    restaurant = random.choice(restaurants)
    menu = (await client.get(api(f"/restaurants/{restaurant['id']}/menu"), headers=headers)).json()

    items = []
    for menu_item in random.sample(menu, k=random.randint(1, len(menu))):
        items.append({
            "id": menu_item["id"],
            "name": menu_item["name"],
            "price": menu_item["price"],
            "quantity": random.randint(1, 3),
        })
    total = round(sum(item["price"] * item["quantity"] for item in items), 2)

    return {"restaurantId": restaurant["id"], "items": items, "totalAmount": total}


# =============================================================================
# ROLE MATRIX
# =============================================================================

async def check_role_matrix() -> bool:
    """Every role gets the status codes the access rules promise."""
    print("\n" + "=" * 70)
    print("🧪 ROLE MATRIX")
    print("=" * 70)

    failures = 0

    def expect(label: str, response: httpx.Response, status: int):
        nonlocal failures
        ok = response.status_code == status
        failures += 0 if ok else 1
        marker = "✅" if ok else "❌"
        print(f"   {marker} {label}: {response.status_code} (expected {status})")

    async with httpx.AsyncClient(timeout=30.0) as client:
        response = await client.get(f"{API_BASE_URL}/health")
        expect("Health", response, 200)
        if response.status_code != 200:
            return False

        expect("No token", await client.get(api("/restaurants")), 401)
        expect(
            "Bad token",
            await client.get(api("/restaurants"), headers={"Authorization": "Bearer nope"}),
            403,
        )

        headers = {
            name: await login(client, email, password)
            for name, (email, password) in SAMPLE_LOGINS.items()
        }

        payload = await build_order_payload(client, headers["member_india"])
        response = await client.post(api("/orders"), json=payload, headers=headers["member_india"])
        expect("Member places order", response, 201)
        order_id = response.json().get("id")

        expect(
            "Member cancels",
            await client.patch(api(f"/orders/{order_id}/cancel"), headers=headers["member_india"]),
            403,
        )
        expect(
            "Other-country manager cancels",
            await client.patch(api(f"/orders/{order_id}/cancel"), headers=headers["manager_america"]),
            403,
        )
        expect(
            "Same-country manager cancels",
            await client.patch(api(f"/orders/{order_id}/cancel"), headers=headers["manager_india"]),
            200,
        )
        expect(
            "Cancel twice",
            await client.patch(api(f"/orders/{order_id}/cancel"), headers=headers["manager_india"]),
            409,
        )
        expect("Manager lists payments", await client.get(api("/payments"), headers=headers["manager_india"]), 403)
        expect("Admin lists payments", await client.get(api("/payments"), headers=headers["admin"]), 200)

    print(f"\n   {'✅ All checks passed' if not failures else f'❌ {failures} check(s) failed'}")
    return failures == 0


# =============================================================================
# TRANSITION RACE
# =============================================================================

async def race_order(
    client: httpx.AsyncClient,
    order_num: int,
    member: dict[str, str],
    manager: dict[str, str],
    payment_ids: list[str],
) -> dict[str, Any]:
    """Create one order, then fire two checkouts and a cancel at once."""
    start_time = time.time()
    payload = await build_order_payload(client, member)
    response = await client.post(api("/orders"), json=payload, headers=member)
    if response.status_code != 201:
        return {"order_num": order_num, "success": False, "error": response.text[:100]}
    order = response.json()

    attempts = [
        client.post(
            api(f"/orders/{order['id']}/checkout"),
            json={"paymentMethodId": payment_id},
            headers=manager,
        )
        for payment_id in payment_ids
    ]
    attempts.append(client.patch(api(f"/orders/{order['id']}/cancel"), headers=manager))
    responses = await asyncio.gather(*attempts)

    winners = [r for r in responses if r.status_code == 200]
    losers = [r for r in responses if r.status_code == 409]
    elapsed = round(time.time() - start_time, 3)

    return {
        "order_num": order_num,
        "success": len(winners) == 1 and len(losers) == len(responses) - 1,
        "status": winners[0].json()["status"] if winners else None,
        "total": order["totalAmount"],
        "time": elapsed,
        "error": None if len(winners) == 1 else f"{len(winners)} winners",
    }


async def run_simulation(num_orders: int = TOTAL_ORDERS) -> dict[str, Any]:
    print("=" * 70)
    print("🔥 TRANSITION RACE SIMULATION")
    print("=" * 70)
    print(f"📋 Total Orders: {num_orders}")
    print(f"🎯 Target: {API_BASE_URL}")
    print(f"⏰ Started: {datetime.now().strftime('%H:%M:%S')}")
    print("=" * 70)

    start_time = time.time()

    async with httpx.AsyncClient(timeout=30.0) as client:
        member = await login(client, *SAMPLE_LOGINS["member_america"])
        manager = await login(client, *SAMPLE_LOGINS["manager_america"])
        admin = await login(client, *SAMPLE_LOGINS["admin"])

        methods = (await client.get(api("/payments"), headers=admin)).json()
        payment_ids = [method["id"] for method in methods][:2]
        if not payment_ids:
            print("\n❌ No payment methods in America. Run scripts/seed.py first.")
            return {"total": num_orders, "successful": 0, "failed": num_orders}

        tasks = [
            race_order(client, i + 1, member, manager, payment_ids)
            for i in range(num_orders)
        ]
        results = await asyncio.gather(*tasks)

    total_time = round(time.time() - start_time, 2)
    successful = [r for r in results if r["success"]]
    failed = [r for r in results if not r["success"]]
    paid = [r for r in successful if r["status"] == "paid"]

    print("\n" + "=" * 70)
    print("📊 SIMULATION RESULTS")
    print("=" * 70)
    print(f"\n✅ Single winner: {len(successful)}/{num_orders}")
    print(f"❌ Inconsistent: {len(failed)}/{num_orders}")
    print(f"💳 Paid: {len(paid)}  🚫 Cancelled: {len(successful) - len(paid)}")
    print(f"⏱️  Total Time: {total_time}s")

    if paid:
        print(f"   💰 Total Revenue: ${sum(r['total'] for r in paid):.2f}")

    if failed:
        print("\n⚠️  Failed Order Details (showing first 5):")
        for f in failed[:5]:
            print(f"   Order #{f['order_num']}: {f.get('error', 'Unknown error')}")

    print("=" * 70)

    return {
        "total": num_orders,
        "successful": len(successful),
        "failed": len(failed),
        "total_time": total_time,
        "results": results,
    }


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="FoodieHub Concurrency Simulation")
    parser.add_argument("--base-url", default=API_BASE_URL, help="Server base URL")
    parser.add_argument("--orders", type=int, default=TOTAL_ORDERS, help="Number of orders")
    parser.add_argument("--skip-matrix", action="store_true", help="Skip the role matrix checks")
    args = parser.parse_args()

    API_BASE_URL = args.base_url

    if not args.skip_matrix:
        if not asyncio.run(check_role_matrix()):
            print("\n❌ Role matrix failed. Fix issues before running the simulation.")
            sys.exit(1)

    summary = asyncio.run(run_simulation(num_orders=args.orders))
    sys.exit(0 if summary["failed"] == 0 else 1)
