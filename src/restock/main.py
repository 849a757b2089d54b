"""CLI entry point for Restock."""

from pathlib import Path
from typing import Annotated
from uuid import UUID

import typer

from .analytics import ProductNotFoundError, RestockAnalytics
from .config import ConfigManager
from .data_store import DataStore
from .list_manager import DuplicateItemError, ItemNotFoundError, ListManager
from .logging_config import configure_logging
from .output_formatter import OutputFormatter

app = typer.Typer(
    name="restock",
    help="Purchase pattern prediction and product matching for household grocery lists",
    no_args_is_help=True,
)

# Global state for formatter and config (set by callback)
formatter: OutputFormatter = OutputFormatter()
config: ConfigManager | None = None
data_store: DataStore | None = None
list_manager: ListManager | None = None
analytics: RestockAnalytics | None = None


def get_config() -> ConfigManager:
    """Get or create ConfigManager instance."""
    global config
    if config is None:
        config = ConfigManager()
    return config


def get_data_store() -> DataStore:
    """Get or create DataStore instance using config values."""
    global data_store
    if data_store is None:
        data_store = DataStore(data_dir=get_config().data.storage_dir)
    return data_store


def get_list_manager() -> ListManager:
    """Get or create ListManager instance."""
    global list_manager
    if list_manager is None:
        cfg = get_config()
        list_manager = ListManager(get_data_store(), cfg.matching, cfg.prediction)
    return list_manager


def get_analytics() -> RestockAnalytics:
    """Get or create RestockAnalytics instance."""
    global analytics
    if analytics is None:
        cfg = get_config()
        analytics = RestockAnalytics(get_data_store(), cfg.prediction, cfg.suggestions)
    return analytics


@app.callback()
def main(
    json_output: Annotated[
        bool, typer.Option("--json", help="Output as JSON for programmatic use")
    ] = False,
    data_dir: Annotated[Path | None, typer.Option("--data-dir", help="Data directory path")] = None,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable debug logging")] = False,
) -> None:
    """Restock CLI - learn purchase patterns and suggest restocking."""
    global formatter, config, data_store, list_manager, analytics

    configure_logging(verbose)
    formatter = OutputFormatter(json_mode=json_output)

    # Load config early
    config = ConfigManager()

    # CLI --data-dir overrides config, which overrides default
    effective_data_dir = data_dir if data_dir else config.data.storage_dir

    data_store = DataStore(data_dir=effective_data_dir)
    list_manager = ListManager(data_store, config.matching, config.prediction)
    analytics = RestockAnalytics(data_store, config.prediction, config.suggestions)


@app.command(name="product-add")
def product_add(
    name: Annotated[str, typer.Argument(help="Product name")],
    category: Annotated[
        str | None, typer.Option("--category", "-c", help="Product category")
    ] = None,
    basic: Annotated[
        bool, typer.Option("--basic", help="Always offer as a fallback suggestion")
    ] = False,
) -> None:
    """Add a product to the catalog."""
    try:
        result = get_list_manager().add_product(name, category=category, is_basic=basic)
        formatter.output(result, result["message"])
    except Exception as e:
        formatter.error(str(e))
        raise typer.Exit(code=1)


@app.command()
def products() -> None:
    """List catalog products."""
    try:
        formatter.output(get_list_manager().list_products())
    except Exception as e:
        formatter.error(str(e))
        raise typer.Exit(code=1)


@app.command()
def add(
    text: Annotated[str, typer.Argument(help="Product name as you would type it")],
    note: Annotated[str | None, typer.Option("--note", "-n", help="Quantity or remark")] = None,
    added_by: Annotated[str | None, typer.Option("--by", help="Person adding the item")] = None,
    force: Annotated[bool, typer.Option("--force", "-f", help="Allow duplicate items")] = False,
) -> None:
    """Add an item to the shopping list, reusing a matching catalog product."""
    try:
        result = get_list_manager().add_item(
            text, description=note, added_by=added_by, allow_duplicate=force
        )
        formatter.output(result, result["message"])
    except DuplicateItemError as e:
        formatter.error(str(e), error_code="DUPLICATE_ITEM")
        raise typer.Exit(code=1)
    except Exception as e:
        formatter.error(str(e))
        raise typer.Exit(code=1)


@app.command()
def check(
    item_id: Annotated[str, typer.Argument(help="Item ID to check off")],
    added_by: Annotated[str | None, typer.Option("--by", help="Person who bought it")] = None,
) -> None:
    """Check off an item and log the purchase."""
    try:
        result = get_list_manager().check_item(item_id, added_by=added_by)
        formatter.output(result, result["message"])
    except ItemNotFoundError as e:
        formatter.error(str(e), error_code="ITEM_NOT_FOUND")
        raise typer.Exit(code=1)
    except ValueError as e:
        formatter.error(f"Invalid item ID: {e}", error_code="INVALID_ID")
        raise typer.Exit(code=1)
    except Exception as e:
        formatter.error(str(e))
        raise typer.Exit(code=1)


@app.command()
def uncheck(
    item_id: Annotated[str, typer.Argument(help="Item ID to uncheck")],
) -> None:
    """Uncheck an item and cancel its logged purchase."""
    try:
        result = get_list_manager().uncheck_item(item_id)
        formatter.output(result, result["message"])
    except ItemNotFoundError as e:
        formatter.error(str(e), error_code="ITEM_NOT_FOUND")
        raise typer.Exit(code=1)
    except ValueError as e:
        formatter.error(f"Invalid item ID: {e}", error_code="INVALID_ID")
        raise typer.Exit(code=1)
    except Exception as e:
        formatter.error(str(e))
        raise typer.Exit(code=1)


@app.command()
def clear() -> None:
    """Remove checked items from the list."""
    try:
        result = get_list_manager().clear_checked()
        formatter.output(result, result["message"])
    except Exception as e:
        formatter.error(str(e))
        raise typer.Exit(code=1)


@app.command(name="list")
def list_items() -> None:
    """View the shopping list."""
    try:
        formatter.output(get_list_manager().get_list())
    except Exception as e:
        formatter.error(str(e))
        raise typer.Exit(code=1)


@app.command()
def search(
    query: Annotated[str, typer.Argument(help="Text to search for")],
    limit: Annotated[int | None, typer.Option("--limit", "-l", help="Maximum results")] = None,
) -> None:
    """Fuzzy-search the product catalog."""
    try:
        formatter.output(get_list_manager().search(query, limit=limit))
    except Exception as e:
        formatter.error(str(e))
        raise typer.Exit(code=1)


@app.command()
def match(
    query: Annotated[str, typer.Argument(help="Product name as typed")],
) -> None:
    """Show whether typed text would attach to an existing product."""
    try:
        decision = get_list_manager().match(query)
        formatter.output(
            {"success": True, "data": {"query": query, "match": decision.model_dump(mode="json")}}
        )
    except Exception as e:
        formatter.error(str(e))
        raise typer.Exit(code=1)


@app.command()
def expected(
    limit: Annotated[int | None, typer.Option("--limit", "-l", help="Maximum products")] = None,
) -> None:
    """Show products expected to be bought soon."""
    try:
        entries = get_analytics().expected_products(limit=limit)
        formatter.output(
            {"success": True, "data": {"expected": [e.model_dump(mode="json") for e in entries]}}
        )
    except Exception as e:
        formatter.error(str(e))
        raise typer.Exit(code=1)


@app.command()
def suggest() -> None:
    """Show restock suggestion chips."""
    try:
        suggestions = get_analytics().suggestions()
        formatter.output(
            {
                "success": True,
                "data": {"suggestions": [s.model_dump(mode="json") for s in suggestions]},
            }
        )
    except Exception as e:
        formatter.error(str(e))
        raise typer.Exit(code=1)


@app.command()
def snooze(
    product_id: Annotated[str, typer.Argument(help="Product ID to snooze")],
) -> None:
    """Hide a product from restock lists for a while."""
    try:
        result = get_analytics().snooze(UUID(product_id))
        formatter.success(
            f"Snoozed until {result.snoozed_until.isoformat()}",
            data={"snooze": result.model_dump(mode="json")},
        )
    except ProductNotFoundError as e:
        formatter.error(str(e), error_code="PRODUCT_NOT_FOUND")
        raise typer.Exit(code=1)
    except ValueError as e:
        formatter.error(f"Invalid product ID: {e}", error_code="INVALID_ID")
        raise typer.Exit(code=1)
    except Exception as e:
        formatter.error(str(e))
        raise typer.Exit(code=1)


@app.command()
def stats(
    product_id: Annotated[str, typer.Argument(help="Product ID")],
) -> None:
    """Show purchase statistics for a product."""
    try:
        result = get_analytics().product_statistics(UUID(product_id))
        formatter.output({"success": True, "data": {"statistics": result.model_dump(mode="json")}})
    except ProductNotFoundError as e:
        formatter.error(str(e), error_code="PRODUCT_NOT_FOUND")
        raise typer.Exit(code=1)
    except ValueError as e:
        formatter.error(f"Invalid product ID: {e}", error_code="INVALID_ID")
        raise typer.Exit(code=1)
    except Exception as e:
        formatter.error(str(e))
        raise typer.Exit(code=1)


if __name__ == "__main__":
    app()
