"""Profile scraper CLI application using Typer."""

import asyncio
from functools import partial
from typing import Annotated

import sqlalchemy
import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from profilescraper import __version__
from profilescraper.config import settings
from profilescraper.core.scraping.browser_session import BrowserSessionManager
from profilescraper.core.scraping.controller import OutcomeStatus, ScrapeController
from profilescraper.core.scraping.pipeline import ExtractionPipeline
from profilescraper.core.scraping.results import (
    ExtractedContact,
    ExtractedFAQ,
    ExtractedService,
    ScrapeResult,
)
from profilescraper.core.scraping.validation import assess_quality
from profilescraper.db.repositories import (
    ContactRepository,
    FaqCollectionRepository,
    ServiceCatalogRepository,
)
from profilescraper.db.session import AsyncSessionLocal, close_db, engine, init_db
from profilescraper.utils.logging import configure_logging

app = typer.Typer(
    name="profilescraper",
    help="Profile scraper - bootstrap business profiles from their public websites",
    add_completion=False,
)
console = Console()


def version_callback(value: bool) -> None:
    """Display version and exit."""
    if value:
        console.print(f"[bold cyan]Profile Scraper[/bold cyan] version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-v",
            help="Show version and exit",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
) -> None:
    """Profile scraper - bootstrap business profiles from their public websites."""
    configure_logging(log_level=settings.log_level, environment=settings.environment)


async def validate_database_connectivity() -> None:
    """
    Validate database connectivity.

    Raises:
        typer.Exit: If database connection fails
    """
    try:
        async with engine.begin() as conn:
            await conn.execute(sqlalchemy.text("SELECT 1"))
    except Exception as e:
        console.print("\n[bold red]❌ Database Connection Failed:[/bold red]")
        console.print(f"  {e}")
        console.print(
            "\n[yellow]💡 Hint:[/yellow] Verify DATABASE_URL and ensure PostgreSQL is running"
        )
        raise typer.Exit(code=1) from None


def render_result(result: ScrapeResult, title: str) -> None:
    """Print services, contact details and FAQs as tables."""
    services = Table(title=f"{title}: services ({len(result.services)})")
    services.add_column("#", justify="right", style="dim")
    services.add_column("Service", style="cyan")
    for index, service in enumerate(result.services, start=1):
        services.add_row(str(index), service.name)
    console.print("\n", services)

    console.print(f"\n[bold]Phone:[/bold] {result.contact.phone}")
    console.print(f"[bold]Email:[/bold] {result.contact.email}")

    if result.faqs:
        faqs = Table(title=f"{title}: FAQs ({len(result.faqs)})")
        faqs.add_column("Question", style="cyan", max_width=50)
        faqs.add_column("Answer", style="white", max_width=70)
        for faq in result.faqs:
            faqs.add_row(faq.question, faq.answer)
        console.print("\n", faqs)


@app.command()
def scrape(
    business_id: Annotated[str, typer.Argument(help="Business id to scrape")],
    timeout: Annotated[
        int | None,
        typer.Option(
            "--timeout",
            "-t",
            help="Scrape budget in seconds; the FAQ page gets what the home page leaves (0 disables)",
        ),
    ] = None,
    show_browser: Annotated[
        bool,
        typer.Option("--show-browser", help="Run the browser with a visible window"),
    ] = False,
) -> None:
    """
    Scrape a business's website and replace its stored profile.

    This command will:
    1. Load the business record and its selector configuration
    2. Launch a browser and visit the home page and FAQ page
    3. Extract services, contact details and FAQs
    4. Save them as the business's profile

    Examples:
        profilescraper scrape bright-smile
        profilescraper scrape bright-smile --timeout 300 --show-browser
    """
    console.print(
        Panel.fit(
            "[bold cyan]Profile Scraper[/bold cyan] - Website Scrape\n"
            f"Version {__version__}",
            border_style="cyan",
        )
    )
    console.print("\n[bold]Configuration:[/bold]")
    console.print(f"  Business: {business_id}")
    console.print(f"  Database: {settings.database_url.split('@')[-1]}")
    console.print(f"  Navigation timeout: {settings.navigation_timeout_ms}ms")
    console.print(f"  Attempts per page: {settings.retry_attempts}")

    async def run_scrape() -> None:
        try:
            await validate_database_connectivity()
            console.print("  ✓ Database connection successful\n")

            pipeline = ExtractionPipeline(
                browser_factory=partial(BrowserSessionManager, headless=not show_browser)
            )
            controller = ScrapeController(
                pipeline=pipeline,
                scrape_timeout_ms=timeout * 1000 if timeout is not None else None,
            )
            with console.status(f"Scraping {business_id}..."):
                outcome = await controller.scrape(business_id)
        finally:
            await close_db()

        if outcome.result is not None:
            render_result(outcome.result, outcome.business_name or business_id)

        if outcome.status is OutcomeStatus.COMPLETED:
            console.print(f"\n[bold green]✓ {outcome.message}[/bold green]\n")
            return

        console.print(f"\n[bold red]❌ {outcome.message}[/bold red]")
        if outcome.persistence and outcome.persistence.errors:
            for error in outcome.persistence.errors:
                console.print(f"  • {error}")
        if outcome.status is OutcomeStatus.CONFIG_MISSING:
            console.print(
                "\n[yellow]💡 Hint:[/yellow] Both a business record with a website URL "
                "and a selector config with a service selector are required"
            )
        elif outcome.status is OutcomeStatus.FAILED:
            console.print("\n[yellow]💡 Hint:[/yellow] See the log output above for details")
        raise typer.Exit(code=1)

    try:
        asyncio.run(run_scrape())

    except KeyboardInterrupt:
        console.print("\n\n[yellow]⚠️  Cancelled by user (Ctrl+C)[/yellow]")
        raise typer.Exit(code=130) from None


@app.command()
def check(
    business_id: Annotated[str, typer.Argument(help="Business id whose stored profile to check")],
) -> None:
    """
    Run data quality checks over a business's stored profile.

    Flags missing services and phone numbers or emails that do not look
    valid. Exits with code 1 when any check fails.

    Examples:
        profilescraper check bright-smile
    """

    async def load_profile() -> ScrapeResult | None:
        try:
            async with AsyncSessionLocal() as session:
                catalog = await ServiceCatalogRepository(session).get_by_business_id(business_id)
                contact = await ContactRepository(session).get_by_business_id(business_id)
                faqs = await FaqCollectionRepository(session).get_by_business_id(business_id)
        finally:
            await close_db()

        if catalog is None and contact is None and faqs is None:
            return None

        return ScrapeResult(
            services=[ExtractedService(name=item["name"]) for item in (catalog.services if catalog else [])],
            contact=(
                ExtractedContact(phone=contact.phone, email=contact.email)
                if contact
                else ExtractedContact()
            ),
            faqs=[
                ExtractedFAQ(question=item["question"], answer=item["answer"])
                for item in (faqs.faqs if faqs else [])
            ],
        )

    try:
        result = asyncio.run(load_profile())
    except Exception as e:
        console.print("\n[bold red]❌ Check Failed:[/bold red]")
        console.print(f"  {type(e).__name__}: {e}")
        raise typer.Exit(code=1) from None

    if result is None:
        console.print(f"\n[yellow]No stored profile for {business_id}[/yellow]")
        console.print(f"[dim]Run 'profilescraper scrape {business_id}' first[/dim]\n")
        raise typer.Exit(code=1)

    render_result(result, business_id)
    report = assess_quality(result)

    table = Table(title="Data quality")
    table.add_column("Check", style="white")
    table.add_column("Result", justify="center")
    for label, passed in (
        ("Has services", report.has_services),
        ("Valid phone", report.valid_phone),
        ("Valid email", report.valid_email),
    ):
        table.add_row(label, "[green]✓[/green]" if passed else "[red]✗[/red]")
    table.add_row("FAQ pairs", str(report.faq_count))
    console.print("\n", table, "\n")

    if not report.ok:
        for issue in report.issues:
            console.print(f"  • {issue}")
        raise typer.Exit(code=1)


@app.command(name="init-db")
def init_db_command() -> None:
    """
    Create database tables for development.

    Examples:
        profilescraper init-db
    """

    async def run_init() -> None:
        try:
            await validate_database_connectivity()
            await init_db()
        finally:
            await close_db()

    asyncio.run(run_init())
    console.print("[green]✓ Database tables created[/green]")
