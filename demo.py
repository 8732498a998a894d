#!/usr/bin/env python
import os

from rich import print

from sdk.catalog import CatalogAPIError, CatalogClient


def main():
    c = CatalogClient(
        base_url=os.environ.get("CATALOG_API_URL", "http://127.0.0.1:3000"),
        api_key=os.environ.get("API_KEY", "your-secret-api-key"),
    )

    # -----------------------------
    # Browse the seeded catalog
    # -----------------------------
    print("\nListing products...")
    print(c.list_products())

    print("\nSearching for 'laptop'...")
    print(c.search_products("laptop"))

    print("\nStats...")
    print(c.stats())

    # -----------------------------
    # Create, fetch, delete
    # -----------------------------
    print("\nCreating a product...")
    pen = c.create_product("Pen", "Blue ink pen", 1.5, "Office", True)
    print(pen)

    print(f"\nFetching {pen['id']}...")
    print(c.get_product(pen["id"]))

    print(f"\nDeleting {pen['id']}...")
    print(c.delete_product(pen["id"]))

    print("\nFetching it again...")
    try:
        c.get_product(pen["id"])
    except CatalogAPIError as e:
        print(f"[red]{e}[/red]")


if __name__ == "__main__":
    main()
