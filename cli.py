# cli.py - interactive console for the catalog API
import os
import sys
from datetime import datetime
from typing import Any, Dict, List, Optional

from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from rich.prompt import Confirm, IntPrompt, Prompt
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich import box

from prompt_toolkit import prompt
from prompt_toolkit.completion import WordCompleter
from prompt_toolkit.styles import Style as PromptStyle

from sdk.catalog import CatalogAPIError, CatalogClient

console = Console()
c = CatalogClient(
    base_url=os.environ.get("CATALOG_API_URL", "http://127.0.0.1:3000"),
    api_key=os.environ.get("API_KEY"),
)

# Global state for status messages and caching
status_message = "Ready"
product_cache: List[Dict[str, Any]] = []

custom_style = PromptStyle.from_dict({
    'completion-menu.completion': 'bg:#008888 #ffffff',
    'completion-menu.completion.current': 'bg:#00aaaa #000000',
    'scrollbar.background': 'bg:#88aaaa',
    'scrollbar.button': 'bg:#222222',
})


# ---------------------------
# Display helpers
# ---------------------------
def show_products(products: List[Dict[str, Any]], out: Optional[Console] = None, title: str = "📦 Products Catalog"):
    out = out or console
    if not products:
        out.print("[italic yellow]No products found[/italic yellow]")
        return

    table = Table(
        title=title,
        box=box.ROUNDED,
        header_style="bold cyan",
        title_style="bold magenta",
        show_lines=True
    )
    table.add_column("ID", style="dim", no_wrap=True)
    table.add_column("Name", style="bold", width=20)
    table.add_column("Description", width=30)
    table.add_column("Price", justify="right", width=10)
    table.add_column("Category", width=15)
    table.add_column("Stock", justify="center", width=8)

    for p in products:
        stock = "[green]yes[/green]" if p.get("inStock") else "[red]no[/red]"
        table.add_row(
            p.get("id", "N/A"),
            p.get("name", "N/A"),
            p.get("description", ""),
            f"${p.get('price', 0):.2f}",
            p.get("category", "N/A"),
            stock,
        )
    out.print(table)


def show_page(result: Dict[str, Any], out: Optional[Console] = None):
    out = out or console
    show_products(result.get("data", []), out=out)
    out.print(
        f"[dim]page {result.get('page', 1)} of {result.get('totalPages', 0)}"
        f" - showing {result.get('count', 0)} of {result.get('total', 0)}[/dim]"
    )


def show_stats(stats: Dict[str, Any], out: Optional[Console] = None):
    out = out or console
    table = Table(box=box.ROUNDED, header_style="bold yellow", show_header=False)
    table.add_column("Metric", style="bold")
    table.add_column("Value", justify="right")
    table.add_row("Total products", str(stats.get("totalProducts", 0)))
    table.add_row("In stock", f"[green]{stats.get('inStock', 0)}[/green]")
    table.add_row("Out of stock", f"[red]{stats.get('outOfStock', 0)}[/red]")
    table.add_row("Average price", f"${stats.get('averagePrice', 0):.2f}")
    table.add_row("Total value", f"${stats.get('totalValue', 0):.2f}")
    for category, n in stats.get("byCategory", {}).items():
        table.add_row(f"  {category}", str(n))
    out.print(Panel(table, title="📊 Catalog Stats", border_style="yellow"))


def show_status(message: str, is_success: bool = True):
    style = "green" if is_success else "red"
    return Panel.fit(f"[{style}]{message}[/{style}]", title="Status")


# ---------------------------
# API wrapper
# ---------------------------
def try_api(fn, *args, success_msg: Optional[str] = None, **kwargs):
    """
    Calls fn(*args, **kwargs) behind a spinner.
    API and connection failures are shown as a status panel and return None.
    """
    global status_message
    try:
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            transient=True,
        ) as progress:
            progress.add_task(description="Processing...", total=None)
            result = fn(*args, **kwargs)
    except CatalogAPIError as e:
        status_message = f"Error: {e.message} ({e.status_code})"
        console.print(show_status(status_message, False))
        return None
    except OSError as e:
        # requests' ConnectionError and Timeout are OSErrors
        status_message = f"Error: cannot reach {c.base_url}: {e}"
        console.print(show_status(status_message, False))
        return None

    if success_msg:
        status_message = success_msg
        console.print(show_status(success_msg, True))
    return result


# ---------------------------
# Autocompletion helpers
# ---------------------------
def refresh_cache():
    global product_cache
    result = try_api(c.list_products, limit=1000)
    product_cache = result["data"] if result else []


def get_product_completer():
    if not product_cache:
        refresh_cache()
    ids = [p.get("id", "") for p in product_cache]
    names = [p.get("name", "") for p in product_cache]
    return WordCompleter([x for x in ids + names if x], ignore_case=True)


def get_category_completer():
    return WordCompleter(sorted({p.get("category", "") for p in product_cache} - {""}), ignore_case=True)


def resolve_product_id(text: str) -> str:
    # let the user type a name picked from the completer
    for p in product_cache:
        if p.get("name", "").lower() == text.lower():
            return p["id"]
    return text


def create_header():
    header = Table(show_header=False, box=box.ROUNDED)
    header.add_column("left", width=30)
    header.add_column("center", width=40)
    header.add_column("right", width=30)

    now = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
    header.add_row(
        "🛍️ Catalog SDK",
        "[bold blue]Products API Console[/bold blue]",
        f"[dim]{now}[/dim]"
    )
    return Panel(header, style="bold blue")


# ---------------------------
# Input helpers
# ---------------------------
def prompt_with_autocomplete(message: str, completer=None, default: str = ""):
    return prompt(f"{message} ", completer=completer, style=custom_style, default=default)


def ask_float(message: str, default: float = 10.0) -> float:
    while True:
        raw = Prompt.ask(message, default=str(default))
        try:
            value = float(raw)
        except ValueError:
            console.print("[red]Please enter a valid number.[/red]")
            continue
        if value < 0:
            console.print("[red]Price cannot be negative.[/red]")
            continue
        return value


def ask_product_fields(current: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    current = current or {}
    return {
        "name": prompt_with_autocomplete("Name", default=current.get("name", "")),
        "description": prompt_with_autocomplete("Description", default=current.get("description", "")),
        "price": ask_float("💰 Price", default=current.get("price", 10.0)),
        "category": prompt_with_autocomplete(
            "🏷️ Category", completer=get_category_completer(), default=current.get("category", "")
        ),
        "in_stock": Confirm.ask("In stock?", default=current.get("inStock", True)),
    }


# ---------------------------
# Main menu
# ---------------------------
def menu():
    global status_message

    console.clear()
    console.print(create_header())
    refresh_cache()

    while True:
        if status_message:
            console.print(show_status(status_message, not status_message.startswith("Error")))

        menu_table = Table.grid(padding=(0, 2))
        menu_table.add_column("Key", style="bold cyan", width=4)
        menu_table.add_column("Option", width=30)
        menu_table.add_column("Key", style="bold cyan", width=4)
        menu_table.add_column("Option", width=30)

        options = [
            ("1", "📦 List products", "5", "➕ Create product"),
            ("2", "🔍 Search products", "6", "✏️ Update product"),
            ("3", "📊 Stats", "7", "🗑️ Delete product"),
            ("4", "ℹ️ Get product by ID", "q", "👋 Quit"),
        ]
        for row in options:
            menu_table.add_row(*row)
        console.print(Panel(menu_table, title="📋 Menu", border_style="yellow"))

        choice = prompt_with_autocomplete(
            "\nChoose an option",
            completer=WordCompleter([str(i) for i in range(1, 8)] + ["q", "quit", "exit"])
        ).strip()

        if choice == "1":
            category = prompt_with_autocomplete("Category filter (blank for all)", completer=get_category_completer())
            page = IntPrompt.ask("Page", default=1)
            limit = IntPrompt.ask("Per page", default=10)
            result = try_api(c.list_products, category=category or None, page=page, limit=limit,
                             success_msg="Products loaded successfully")
            if result:
                show_page(result)

        elif choice == "2":
            term = prompt_with_autocomplete("Enter search term")
            result = try_api(c.search_products, term, success_msg=f"Search for '{term}' completed")
            if result:
                show_products(result["data"], title=f"🔍 {result['count']} match(es) for '{result['query']}'")

        elif choice == "3":
            stats = try_api(c.stats, success_msg="Stats loaded")
            if stats:
                show_stats(stats)

        elif choice == "4":
            pid = resolve_product_id(prompt_with_autocomplete("Enter product ID", completer=get_product_completer()))
            product = try_api(c.get_product, pid, success_msg=f"Product {pid} details loaded")
            if product:
                show_products([product])

        elif choice == "5":
            fields = ask_product_fields()
            product = try_api(c.create_product, success_msg=f"Product '{fields['name']}' created", **fields)
            if product:
                console.print(Panel(f"Created product: [green]{product['id']}[/green]"))
                refresh_cache()

        elif choice == "6":
            pid = resolve_product_id(prompt_with_autocomplete("Enter product ID", completer=get_product_completer()))
            current = try_api(c.get_product, pid)
            if current:
                fields = ask_product_fields(current)
                product = try_api(c.update_product, pid, success_msg=f"Product {pid} updated", **fields)
                if product:
                    show_products([product])
                    refresh_cache()

        elif choice == "7":
            pid = resolve_product_id(prompt_with_autocomplete("Enter product ID", completer=get_product_completer()))
            if Confirm.ask(f"[red]Delete product {pid}?[/red]"):
                product = try_api(c.delete_product, pid, success_msg=f"Product {pid} deleted")
                if product:
                    refresh_cache()

        elif choice.lower() in ("q", "quit", "exit"):
            if Confirm.ask("Are you sure you want to quit?"):
                console.print(Panel.fit("[bold green]Goodbye! 👋[/bold green]", title="Goodbye"))
                sys.exit(0)

        console.print()
        console.rule(style="dim")


if __name__ == "__main__":
    try:
        menu()
    except KeyboardInterrupt:
        console.print("\n\n[bold red]Interrupted by user[/bold red]")
        sys.exit(1)
