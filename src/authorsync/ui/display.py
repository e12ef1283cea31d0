"""Rich terminal output for authorsync CLI commands."""

from collections.abc import Sequence
from typing import Optional

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .._version import __version__
from ..models import AnalysisStats, ClusterStats, Identity, IdentityCluster


class RichDisplay:
    """Render identity tables, statistics and errors with Rich."""

    def __init__(self, console: Optional[Console] = None) -> None:
        self.console = console or Console()

    def show_header(self) -> None:
        """Display the tool name and version."""
        title = Text(f"authorsync v{__version__}", style="bold cyan", justify="center")
        self.console.print(Panel(title, box=box.DOUBLE, padding=(0, 1), style="bright_blue"))

    def show_identity_table(self, identities: Sequence[Identity]) -> None:
        """Display identities with their commit counts."""
        table = Table(title="Author Identities", box=box.ROUNDED)
        table.add_column("Name", style="bold cyan", no_wrap=True)
        table.add_column("Email", style="white", no_wrap=True)
        table.add_column("Commits", style="green", justify="right")

        for identity in identities:
            table.add_row(Text(identity.name), Text(identity.email), str(identity.commits))

        self.console.print(table)
        self.console.print(f"\n[dim]Total: {len(identities)} unique identities[/dim]")

    def show_analysis_summary(
        self, stats: AnalysisStats, cluster_stats: Optional[ClusterStats] = None
    ) -> None:
        """Display repository and duplicate-detection statistics."""
        summary = Table(title="📊 Repository Analysis", box=box.ROUNDED)
        summary.add_column("Metric", style="cyan", width=30)
        summary.add_column("Count", style="green", width=20)

        summary.add_row("Total identities", str(stats.total_identities))
        summary.add_row("Unique names", str(stats.unique_names))
        summary.add_row("Unique emails", str(stats.unique_emails))
        summary.add_row("Unique domains", str(stats.unique_domains))
        summary.add_row("NoReply emails", str(stats.noreply_emails))
        summary.add_row("Total commits", str(stats.total_commits))
        self.console.print(summary)

        if cluster_stats is None:
            return

        detection = Table(title="🔍 Duplicate Detection", box=box.ROUNDED)
        detection.add_column("Metric", style="cyan", width=30)
        detection.add_column("Count", style="green", width=20)
        detection.add_row("Clusters found", str(cluster_stats.clusters_found))
        detection.add_row("Aliases to consolidate", str(cluster_stats.aliases_consolidated))
        detection.add_row(
            "Authors after cleanup",
            f"{cluster_stats.authors_after} ({cluster_stats.reduction_percent}% reduction)",
        )
        detection.add_row("Commits affected", str(cluster_stats.commits_affected))
        self.console.print(detection)

    def show_clusters(self, clusters: Sequence[IdentityCluster], summary: str) -> None:
        """Display proposed mappings, or a success note when there are none."""
        if not clusters:
            self.console.print("\n[green]✨ No duplicate identities found![/green]")
            return

        self.console.print("\n[bold]📋 Proposed Mappings:[/bold]")
        # Names may contain square brackets, so skip markup parsing
        self.console.print(summary, markup=False, highlight=False)

    def show_warning(self, message: str) -> None:
        """Display a warning message in Rich format."""
        self.console.print(
            Panel(
                Text(message, style="yellow"),
                title="[yellow]Warning[/yellow]",
                border_style="yellow",
                padding=(1, 2),
            )
        )
