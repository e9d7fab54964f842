# example_usage.py - Breezy HR API usage examples

import logging
import os
from breezyhr import BreezyApiClient, ApiError, TransportError

def example_sign_in_and_list_positions():
    """Sign in, then walk companies and their published positions"""
    client = BreezyApiClient()

    try:
        client.sign_in(os.getenv("BREEZY_EMAIL", ""), os.getenv("BREEZY_PASSWORD", ""))
        print("✅ Signed in")

        user = client.get("user/details")
        print(f"👤 Signed in as: {user.get('email', 'unknown')}")

        companies = client.get("companies") or []
        for company in companies:
            positions = client.get(f"company/{company['_id']}/positions", {"state": "published"})
            print(f"🏢 {company['name']}: {len(positions or [])} published positions")

    except ApiError as e:
        print(f"❌ API error {e.status_code}: {e}")
    except TransportError as e:
        print(f"❌ Could not reach Breezy ({e.code}): {e.message}")

def example_existing_token():
    """Reuse a token obtained earlier instead of signing in again"""
    client = BreezyApiClient(token=os.getenv("BREEZY_TOKEN"))
    if not client.is_authenticated:
        print("⚠️  BREEZY_TOKEN not set, skipping")
        return

    try:
        result = client.request("GET", "user/details")
        print(f"✅ {result.status_code} from {result.url}")
        print(f"   Raw body: {result.raw[:80]}...")
    except ApiError as e:
        print(f"❌ Token rejected: {e}")
        print(f"   Raw body: {e.response.raw}")

if __name__ == "__main__":
    logging.basicConfig(level=logging.DEBUG)

    print("🚀 breezyhr Usage Examples")
    print("=" * 50)

    print("\n1. Sign-in Example:")
    example_sign_in_and_list_positions()

    print("\n2. Existing Token Example:")
    example_existing_token()
