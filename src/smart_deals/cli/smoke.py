"""CLI to exercise a running Smart Deals server route by route.

Usage:
  poetry run smoke health
  poetry run smoke token u@x.com
  poetry run smoke products list --email u@x.com
  poetry run smoke products get 6650f0c2a1b2c3d4e5f60718
  poetry run smoke bids mine u@x.com --token <bearer>
"""
import argparse
import json
import sys

import httpx


def print_json(data: object) -> None:
    print(json.dumps(data, indent=2, default=str))


def _auth(args: argparse.Namespace) -> dict[str, str]:
    return {"Authorization": f"Bearer {args.token}"} if args.token else {}


def cmd_health(client: httpx.Client, _: argparse.Namespace) -> int:
    r = client.get("/")
    r.raise_for_status()
    print(r.text)
    return 0


def cmd_token(client: httpx.Client, args: argparse.Namespace) -> int:
    r = client.post("/get-token", json={"email": args.email})
    r.raise_for_status()
    print_json(r.json())
    return 0


def cmd_register(client: httpx.Client, args: argparse.Namespace) -> int:
    payload = {"email": args.email}
    if args.name:
        payload["name"] = args.name
    r = client.post("/users", json=payload)
    r.raise_for_status()
    print_json(r.json())
    return 0


def cmd_products_list(client: httpx.Client, args: argparse.Namespace) -> int:
    params = {"email": args.email} if args.email else {}
    r = client.get("/products", params=params)
    r.raise_for_status()
    data = r.json()
    print(f"Found {len(data)} products")
    print_json(data[: args.head] if args.head else data)
    return 0


def cmd_products_latest(client: httpx.Client, _: argparse.Namespace) -> int:
    r = client.get("/latest-products")
    r.raise_for_status()
    print_json(r.json())
    return 0


def cmd_products_get(client: httpx.Client, args: argparse.Namespace) -> int:
    r = client.get(f"/products/{args.product_id}")
    r.raise_for_status()
    print_json(r.json())
    return 0


def cmd_products_bids(client: httpx.Client, args: argparse.Namespace) -> int:
    r = client.get(f"/products/bids/{args.product_id}", headers=_auth(args))
    r.raise_for_status()
    data = r.json()
    print(f"Found {len(data)} bids on {args.product_id}")
    print_json(data)
    return 0


def cmd_categories(client: httpx.Client, _: argparse.Namespace) -> int:
    r = client.get("/categories")
    r.raise_for_status()
    print_json(r.json())
    return 0


def cmd_bids_list(client: httpx.Client, args: argparse.Namespace) -> int:
    params = {"email": args.email} if args.email else {}
    r = client.get("/bids", params=params)
    r.raise_for_status()
    data = r.json()
    print(f"Found {len(data)} bids")
    print_json(data[: args.head] if args.head else data)
    return 0


def cmd_bids_mine(client: httpx.Client, args: argparse.Namespace) -> int:
    r = client.get("/my-bids", params={"email": args.email}, headers=_auth(args))
    r.raise_for_status()
    print_json(r.json())
    return 0


def main() -> int:
    parser = argparse.ArgumentParser(
        description="Exercise Smart Deals API routes against a running server.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument(
        "--base-url",
        default="http://localhost:3000",
        help="API base URL (default: http://localhost:3000)",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=30.0,
        help="Request timeout in seconds (default: 30)",
    )
    parser.add_argument("--token", default=None, help="Bearer token for protected routes")
    subparsers = parser.add_subparsers(dest="command", required=True, help="Command")

    subparsers.add_parser("health", help="GET / liveness check")
    subparsers.add_parser("categories", help="GET /categories")

    p = subparsers.add_parser("token", help="POST /get-token")
    p.add_argument("email", help="Email claim to embed")

    p = subparsers.add_parser("register", help="POST /users")
    p.add_argument("email", help="User email")
    p.add_argument("--name", default=None, help="Display name")

    # products
    products = subparsers.add_parser("products", help="Product routes (/products)")
    products_sub = products.add_subparsers(dest="products_cmd", required=True)
    p = products_sub.add_parser("list", help="GET /products")
    p.add_argument("--email", default=None, help="Owner email filter")
    p.add_argument("--head", type=int, default=0, help="Show only first N (0 = all)")
    products_sub.add_parser("latest", help="GET /latest-products")
    p = products_sub.add_parser("get", help="GET /products/{product_id}")
    p.add_argument("product_id", help="ObjectId or legacy string id")
    p = products_sub.add_parser("bids", help="GET /products/bids/{product_id} (needs --token)")
    p.add_argument("product_id", help="Product id")

    # bids
    bids = subparsers.add_parser("bids", help="Bid routes (/bids, /my-bids)")
    bids_sub = bids.add_subparsers(dest="bids_cmd", required=True)
    p = bids_sub.add_parser("list", help="GET /bids")
    p.add_argument("--email", default=None, help="Buyer email filter")
    p.add_argument("--head", type=int, default=0, help="Show only first N (0 = all)")
    p = bids_sub.add_parser("mine", help="GET /my-bids (needs --token)")
    p.add_argument("email", help="Buyer email; must match the token")

    args = parser.parse_args()
    base_url = args.base_url.rstrip("/")

    handlers = {
        "health": cmd_health,
        "categories": cmd_categories,
        "token": cmd_token,
        "register": cmd_register,
        "products": {
            "list": cmd_products_list,
            "latest": cmd_products_latest,
            "get": cmd_products_get,
            "bids": cmd_products_bids,
        },
        "bids": {
            "list": cmd_bids_list,
            "mine": cmd_bids_mine,
        },
    }

    cmd = args.command
    handler = handlers[cmd]
    if isinstance(handler, dict):
        sub = getattr(args, f"{cmd}_cmd", None)
        if sub is None:
            parser.error(f"Missing subcommand for {cmd}")
        handler = handler[sub]

    try:
        with httpx.Client(base_url=base_url, timeout=args.timeout) as client:
            return handler(client, args)
    except httpx.HTTPStatusError as e:
        print(f"HTTP error: {e.response.status_code}", file=sys.stderr)
        if e.response.content:
            try:
                print(e.response.json(), file=sys.stderr)
            except ValueError:
                print(e.response.text, file=sys.stderr)
        return 1
    except httpx.RequestError as e:
        print(f"Request error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
