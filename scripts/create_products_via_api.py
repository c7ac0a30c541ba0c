#!/usr/bin/env python3
"""Create cakes in the catalogue via the backend admin API.

Flow:
1) Login as admin and keep the bearer credential
2) Skip cakes whose name already exists in the public catalogue
3) Create the remaining cakes through /api/admin/products
"""

from __future__ import annotations

import argparse
import json
import os
import sys
from pathlib import Path
from typing import Any, Dict, List

import httpx


DEFAULT_BASE_URL = "http://127.0.0.1:8000"

DEFAULT_CAKES: List[Dict[str, Any]] = [
    {
        "name": "Pineapple Delight Cake",
        "description": "Vanilla sponge layered with pineapple chunks and fresh cream",
        "price": 259,
        "image": "https://www.fnp.com/images/pr/l/v20221205201154/pineapple-cake-half-kg_1.jpg",
        "category": "birthday",
    },
    {
        "name": "Strawberry Cream Cake",
        "description": "Strawberry sponge with whipped cream and fresh strawberries",
        "price": 319,
        "image": "https://www.fnp.com/images/pr/l/v20221205201201/strawberry-cake-half-kg_1.jpg",
        "category": "anniversary",
    },
]


class ApiError(RuntimeError):
    pass


def _json_or_text(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return response.text


def _require_success(response: httpx.Response, context: str) -> Dict[str, Any]:
    payload = _json_or_text(response)
    if response.status_code >= 400:
        raise ApiError(f"{context} failed ({response.status_code}): {payload}")
    if not isinstance(payload, dict):
        raise ApiError(f"{context} returned non-JSON payload: {payload}")
    if payload.get("success") is False:
        raise ApiError(f"{context} returned success=false: {payload}")
    return payload


def login_admin(client: httpx.Client, email: str, password: str) -> None:
    login_resp = client.post(
        "/api/auth/login",
        json={"email": email, "password": password},
    )
    payload = _require_success(login_resp, "Admin login")
    data = payload.get("data") or {}
    user = data.get("user") or {}
    if not user.get("is_admin"):
        raise ApiError(f"Authenticated user is not admin (email={user.get('email')!r})")

    client.headers["Authorization"] = f"Bearer {data['token']}"


def existing_cake_names(client: httpx.Client) -> set[str]:
    resp = client.get("/api/cakes")
    payload = _require_success(resp, "Fetch cakes")
    return {str(cake.get("name", "")).strip().lower() for cake in payload.get("data") or []}


def create_cake(client: httpx.Client, cake: Dict[str, Any]) -> Dict[str, Any]:
    resp = client.post("/api/admin/products", json=cake)
    payload = _require_success(resp, f"Create cake '{cake['name']}'")
    data_obj = payload.get("data") or {}
    if not isinstance(data_obj.get("id"), int):
        raise ApiError(f"Unexpected create-product response for '{cake['name']}': {payload}")
    return data_obj


def load_cakes(path: str | None) -> List[Dict[str, Any]]:
    if not path:
        return DEFAULT_CAKES
    cakes_file = Path(path).expanduser().resolve()
    if not cakes_file.exists():
        raise ApiError(f"Cakes file not found: {cakes_file}")
    cakes = json.loads(cakes_file.read_text(encoding="utf-8"))
    if not isinstance(cakes, list):
        raise ApiError("Cakes file must contain a JSON list of cake objects")
    return cakes


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Create cakes via the cake store admin API")
    parser.add_argument("--base-url", default=os.getenv("CAKESTORE_BASE_URL", DEFAULT_BASE_URL))
    parser.add_argument("--admin-email", default=os.getenv("CAKESTORE_ADMIN_EMAIL", "admin@cakestore.com"))
    parser.add_argument("--admin-password", default=os.getenv("CAKESTORE_ADMIN_PASSWORD", "CHANGE_ME"))
    parser.add_argument("--cakes-file", help="JSON file with a list of cakes to create")
    return parser.parse_args()


def main() -> int:
    args = parse_args()

    if args.admin_password == "CHANGE_ME":
        print("ERROR: Set --admin-password or CAKESTORE_ADMIN_PASSWORD", file=sys.stderr)
        return 2

    cakes = load_cakes(args.cakes_file)

    with httpx.Client(base_url=args.base_url.rstrip("/"), timeout=30.0, follow_redirects=True) as client:
        login_admin(client, args.admin_email, args.admin_password)
        existing = existing_cake_names(client)

        print("Created cakes:")
        for cake in cakes:
            if str(cake.get("name", "")).strip().lower() in existing:
                print(f"- skipped (exists): {cake['name']}")
                continue
            created = create_cake(client, cake)
            print(f"- {created['category']}: id={created['id']}, name={created['name']}")

    return 0


if __name__ == "__main__":
    try:
        raise SystemExit(main())
    except ApiError as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        raise SystemExit(1)
