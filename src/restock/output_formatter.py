"""Output formatting for CLI and programmatic use."""

import json
from typing import Any

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from .data_store import JSONEncoder

_LEVEL_LABELS = {1: "confident", 2: "plausible", 3: "no match"}


class OutputFormatter:
    """Formats output for both Rich terminal and JSON modes."""

    def __init__(self, json_mode: bool = False):
        """Initialize formatter.

        Args:
            json_mode: If True, output JSON instead of Rich formatting
        """
        self.json_mode = json_mode
        self.console = Console()

    def output(self, data: dict[str, Any], message: str = "") -> None:
        """Output data in appropriate format.

        Args:
            data: Data to output
            message: Optional message for Rich mode
        """
        if self.json_mode:
            self._output_json(data)
        else:
            self._output_rich(data, message)

    def _output_json(self, data: dict[str, Any]) -> None:
        """Output as JSON to stdout."""
        print(json.dumps(data, cls=JSONEncoder, indent=2))

    def _output_rich(self, data: dict[str, Any], message: str) -> None:
        """Output with Rich formatting."""
        if message:
            self.console.print(f"[green]✓[/green] {message}")

        payload = data.get("data", {})
        if "list" in payload:
            self._render_shopping_list(data)
        elif "products" in payload:
            self._render_products(data)
        elif "expected" in payload:
            self._render_expected(data)
        elif "suggestions" in payload:
            self._render_suggestions(data)
        elif "statistics" in payload:
            self._render_statistics(data)
        elif "search" in payload:
            self._render_search(data)
        elif "match" in payload and "item" not in payload:
            self._render_match(data)

    def _render_shopping_list(self, data: dict) -> None:
        """Render the shopping list."""
        items = data["data"]["list"]["items"]

        if not items:
            self.console.print("[dim]No items on the list[/dim]")
            return

        table = Table(title="Shopping List", show_header=True, header_style="bold cyan")
        table.add_column("Item", style="cyan", no_wrap=False)
        table.add_column("Note", style="magenta")
        table.add_column("Status", style="blue")
        table.add_column("ID", style="dim")

        for item in items:
            status_icon = "[green]✓[/green]" if item.get("is_checked") else "○"
            table.add_row(
                item["name"],
                item.get("description") or "-",
                status_icon,
                str(item["id"])[:8],
            )

        self.console.print(table)
        self.console.print(f"\nTotal items: {len(items)}")

    def _render_products(self, data: dict) -> None:
        """Render the product catalog."""
        products = data["data"]["products"]

        if not products:
            self.console.print("[dim]No products in the catalog[/dim]")
            return

        table = Table(title="Products", show_header=True, header_style="bold cyan")
        table.add_column("Name", style="cyan")
        table.add_column("Category", style="yellow")
        table.add_column("Basic", justify="center")
        table.add_column("ID", style="dim")

        for product in products:
            table.add_row(
                product["name"],
                product.get("category") or "-",
                "✓" if product.get("is_basic") else "",
                str(product["id"]),
            )

        self.console.print(table)

    def _render_expected(self, data: dict) -> None:
        """Render products expected to be bought soon."""
        expected = data["data"]["expected"]

        if not expected:
            self.console.print("[dim]Nothing expected soon[/dim]")
            return

        table = Table(title="Expected Soon", show_header=True, header_style="bold")
        table.add_column("Product", style="cyan")
        table.add_column("Every", justify="right")
        table.add_column("Next purchase")
        table.add_column("Due in", justify="right")

        for entry in expected:
            due = entry["days_until_expected"]
            due_text = "[red]now[/red]" if due == 0 else f"{due} day(s)"
            table.add_row(
                entry["name"],
                f"{entry['frequency_days']:.1f} d",
                str(entry["next_purchase_at"])[:10],
                due_text,
            )

        self.console.print(table)

    def _render_suggestions(self, data: dict) -> None:
        """Render suggestion chips."""
        suggestions = data["data"]["suggestions"]

        if not suggestions:
            self.console.print("[dim]No suggestions at this time[/dim]")
            return

        self.console.print("\n[bold]Suggestions[/bold]")
        for s in suggestions:
            icon = "⚠" if s["suggestion_type"] == "predicted" else "•"
            color = "yellow" if s["suggestion_type"] == "predicted" else "dim"
            self.console.print(f"  [{color}]{icon}[/{color}] [bold]{s['name']}[/bold]")

    def _render_statistics(self, data: dict) -> None:
        """Render purchase statistics for a product."""
        stats = data["data"]["statistics"]

        lines = [f"Purchases: {stats['purchase_count']}"]
        if stats.get("frequency_label"):
            lines.append(f"Frequency: {stats['frequency_label']} ({stats['frequency_days']:.1f} d)")
        else:
            lines.append("Frequency: [dim]not enough history yet[/dim]")
        if stats.get("last_purchase_at"):
            lines.append(f"Last purchased: {stats['last_purchase_at']}")
        if stats.get("next_purchase_at"):
            lines.append(f"Next expected: {stats['next_purchase_at']}")

        self.console.print(Panel("\n".join(lines), title=stats["name"], expand=False))

    def _render_search(self, data: dict) -> None:
        """Render search results."""
        search = data["data"]["search"]
        results = search["results"]

        if not results:
            self.console.print(f"[dim]No products match '{search['query']}'[/dim]")
            return

        table = Table(show_header=True, header_style="bold")
        table.add_column("Product", style="cyan")
        table.add_column("Score", justify="right")

        for result in results:
            table.add_row(result["name"], f"{result['score']:.3f}")

        self.console.print(table)

    def _render_match(self, data: dict) -> None:
        """Render an attach-vs-create decision."""
        match = data["data"]["match"]
        candidate = match.get("candidate")
        level = _LEVEL_LABELS.get(match["level"], str(match["level"]))

        if candidate is None:
            self.console.print(f"[dim]No candidates[/dim] (level {match['level']}: {level})")
            return

        verdict = "[green]attach[/green]" if match["accepted"] else "[yellow]create new[/yellow]"
        self.console.print(
            f"{verdict} → [bold]{candidate['name']}[/bold] "
            f"(level {match['level']}: {level})"
        )

    def error(self, message: str, error_code: str | None = None) -> None:
        """Output error message.

        Args:
            message: Error message
            error_code: Optional error code
        """
        if self.json_mode:
            output = {"success": False, "error": message}
            if error_code:
                output["error_code"] = error_code
            print(json.dumps(output))
        else:
            self.console.print(f"[red]✗ Error:[/red] {message}")

    def success(self, message: str, data: dict | None = None) -> None:
        """Output success message.

        Args:
            message: Success message
            data: Optional data to include
        """
        if self.json_mode:
            output: dict[str, Any] = {"success": True, "message": message}
            if data:
                output["data"] = data
            print(json.dumps(output, cls=JSONEncoder))
        else:
            self.console.print(f"[green]✓[/green] {message}")
