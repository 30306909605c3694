"""CLI commands for adreel using Typer and Rich.

Implements 4 CLI commands:
- analyze: Run vision analysis on a product photo
- scripts: Generate the five candidate scripts for a product
- wizard: Interactive configure → choose script → view prompts flow
- serve: Run the relay API server
"""

import asyncio
import json
import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.panel import Panel
from rich.prompt import Confirm, Prompt
from rich.syntax import Syntax
from rich.table import Table

from adreel.config import Settings, settings
from adreel.orchestrator import Wizard, WizardStep
from adreel.schemas import (
    Accent,
    CampaignConfig,
    GeneratedVeoData,
    Language,
    Script,
    VideoStyle,
    VideoType,
    VisionAnalysis,
)
from adreel.services.llm import encode_image_file, get_gateway

app = typer.Typer(name="adreel", help="Fashion product video scripts and Veo prompts")
console = Console()


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _settings_for(transport: Optional[str]) -> Settings:
    if transport is None:
        return settings
    if transport not in ("direct", "relay"):
        console.print(f"[red]Error:[/red] Invalid transport: {transport} (use direct or relay)")
        raise typer.Exit(code=1)
    return settings.model_copy(
        update={"gateway": settings.gateway.model_copy(update={"transport": transport})}
    )


def _make_wizard(config: CampaignConfig, transport: Optional[str]) -> Wizard:
    cfg = _settings_for(transport)
    return Wizard(
        get_gateway(cfg),
        config,
        strict_counts=cfg.wizard.strict_counts,
        notify=lambda message: console.print(f"[red]Error:[/red] {message}"),
    )


def _read_image(image: Path) -> str:
    if not image.is_file():
        console.print(f"[red]Error:[/red] Image not found: {image}")
        raise typer.Exit(code=1)
    return encode_image_file(image)


# ============================================================================
# Rendering
# ============================================================================

def render_vision(analysis: VisionAnalysis) -> None:
    table = Table(title="Vision Analysis", show_header=False)
    table.add_column("Field", style="cyan")
    table.add_column("Value")
    for field in ("category", "fabric", "color_tone", "style", "target_age", "brand_tone"):
        table.add_row(field, getattr(analysis, field) or "-")
    table.add_row("usp_highlights", "\n".join(f"• {usp}" for usp in analysis.usp_highlights) or "-")
    table.add_row(
        "tone_scores",
        "\n".join(f"{score.name}: {score.value}" for score in analysis.tone_scores) or "-",
    )
    console.print(table)


def render_scripts(scripts: list[Script]) -> None:
    for index, script in enumerate(scripts, start=1):
        table = Table(show_lines=True)
        table.add_column("Time", style="cyan", no_wrap=True)
        table.add_column("Action")
        table.add_column("Dialogue / Text")
        table.add_column("Camera")
        table.add_column("Music", style="dim")
        for scene in script.scenes:
            table.add_row(scene.time, scene.action, scene.dialogue_or_text, scene.camera_angle, scene.music)

        body = (
            f"[bold]Hook:[/bold] {script.hook}\n"
            f"[bold]Why it works:[/bold] {script.rationale}\n"
            f"[bold]Benefits:[/bold] {', '.join(script.benefits_highlighted)}\n"
            f"[bold]CTA:[/bold] {script.cta_overlay} / {script.cta_voice}"
        )
        console.print(Panel(body, title=f"[{index}] {script.title}", border_style="magenta"))
        console.print(table)


def render_veo(script: Script, veo_data: GeneratedVeoData) -> None:
    console.print(Panel(f"[bold]{script.title}[/bold]", title="Veo-3 scene prompts"))
    for index, scene_prompt in enumerate(veo_data.scene_prompts, start=1):
        console.print(f"[cyan]Scene {index}[/cyan]")
        console.print(Syntax(scene_prompt.model_dump_json(indent=2), "json", word_wrap=True))

    console.print(Panel(veo_data.ads_caption or "-", title="Ads caption"))
    console.print(f"[bold]Hashtags:[/bold] {' '.join(veo_data.hashtags)}")
    for cta in veo_data.cta_variations:
        console.print(f"  • {cta}")


# ============================================================================
# Commands
# ============================================================================

@app.command()
def analyze(
    image: Path = typer.Argument(..., help="Product photo (JPEG)"),
    transport: Optional[str] = typer.Option(None, "--transport", help="direct or relay"),
    output_json: bool = typer.Option(False, "--json", help="Print raw JSON instead of a table"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
):
    """Analyze a product photo: category, colors, style, USPs and tone scores."""
    _setup_logging(verbose)
    flow = _make_wizard(CampaignConfig(), transport)

    with console.status("Analyzing image..."):
        ok = asyncio.run(flow.analyze_image(_read_image(image)))
    if not ok:
        raise typer.Exit(code=1)

    analysis = flow.config.vision_data
    if output_json:
        console.print_json(analysis.model_dump_json())
    else:
        render_vision(analysis)


@app.command()
def scripts(
    product_name: str = typer.Option(..., "--name", "-n", help="Product name"),
    description: str = typer.Option("", "--description", "-d", help="Product description"),
    style: VideoStyle = typer.Option(VideoStyle.WITH_DIALOGUE, "--style", "-s", help="Video style"),
    video_type: VideoType = typer.Option(VideoType.SINGLE_NARRATION, "--type", "-t", help="Video type"),
    language: Language = typer.Option(Language.VIETNAMESE, "--language", "-l", help="Script language"),
    accent: Accent = typer.Option(Accent.NORTHERN, "--accent", "-a", help="Voice accent"),
    image: Optional[Path] = typer.Option(None, "--image", "-i", help="Product photo to analyze first"),
    transport: Optional[str] = typer.Option(None, "--transport", help="direct or relay"),
    output_json: bool = typer.Option(False, "--json", help="Print raw JSON"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
):
    """Generate five candidate 30-second scripts for a product."""
    _setup_logging(verbose)
    config = CampaignConfig(
        product_name=product_name,
        product_description=description,
        video_style=style,
        video_type=video_type,
        language=language,
        accent=accent,
    )
    flow = _make_wizard(config, transport)

    async def _run() -> bool:
        if image is not None and not await flow.analyze_image(_read_image(image)):
            return False
        return await flow.generate_scripts()

    with console.status("Writing scripts..."):
        ok = asyncio.run(_run())
    if not ok:
        raise typer.Exit(code=1)

    if output_json:
        console.print_json(json.dumps([s.model_dump() for s in flow.scripts], ensure_ascii=False))
    else:
        render_scripts(flow.scripts)


@app.command()
def wizard(
    product_name: Optional[str] = typer.Option(None, "--name", "-n", help="Product name"),
    description: Optional[str] = typer.Option(None, "--description", "-d", help="Product description"),
    style: VideoStyle = typer.Option(VideoStyle.WITH_DIALOGUE, "--style", "-s", help="Video style"),
    video_type: VideoType = typer.Option(VideoType.SINGLE_NARRATION, "--type", "-t", help="Video type"),
    language: Language = typer.Option(Language.VIETNAMESE, "--language", "-l", help="Script language"),
    accent: Accent = typer.Option(Accent.NORTHERN, "--accent", "-a", help="Voice accent"),
    image: Optional[Path] = typer.Option(None, "--image", "-i", help="Product photo to analyze"),
    transport: Optional[str] = typer.Option(None, "--transport", help="direct or relay"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
):
    """Interactive wizard: configure, pick one of five scripts, get Veo prompts."""
    _setup_logging(verbose)
    config = CampaignConfig(
        product_name=product_name or Prompt.ask("Product name"),
        product_description=description if description is not None else Prompt.ask("Description", default=""),
        video_style=style,
        video_type=video_type,
        language=language,
        accent=accent,
    )
    flow = _make_wizard(config, transport)
    asyncio.run(_interactive(flow, image))


async def _interactive(flow: Wizard, image: Optional[Path]) -> None:
    if image is not None:
        with console.status("Analyzing image..."):
            if await flow.analyze_image(_read_image(image)):
                render_vision(flow.config.vision_data)

    while True:
        if flow.step is WizardStep.CONFIGURING:
            with console.status("Writing scripts..."):
                ok = await flow.generate_scripts()
            if not ok and not Confirm.ask("Try again?", default=True):
                return

        elif flow.step is WizardStep.CHOOSING_SCRIPT:
            render_scripts(flow.scripts)
            answer = Prompt.ask(
                "Pick a script number, [bold]r[/bold] to regenerate, [bold]q[/bold] to quit"
            ).strip().lower()
            if answer == "q":
                return
            if answer == "r":
                with console.status("Writing scripts..."):
                    await flow.generate_scripts()
                continue
            if not answer.isdigit():
                console.print("[yellow]Enter a number, r or q[/yellow]")
                continue
            try:
                flow.select_script(int(answer) - 1)
            except ValueError as e:
                console.print(f"[yellow]{e}[/yellow]")
                continue
            with console.status("Building Veo prompts..."):
                await flow.generate_prompts()

        else:
            render_veo(flow.selected_script, flow.veo_data)
            action = Prompt.ask("Next", choices=["back", "reset", "quit"], default="back")
            if action == "quit":
                return
            if action == "back":
                flow.back()
            else:
                flow.reset()
                flow.update_config(
                    product_name=Prompt.ask("Product name", default=flow.config.product_name),
                    product_description=Prompt.ask(
                        "Description", default=flow.config.product_description
                    ),
                )


@app.command()
def serve(
    host: Optional[str] = typer.Option(None, "--host", help="Bind address"),
    port: Optional[int] = typer.Option(None, "--port", "-p", help="Port"),
):
    """Run the relay API that keeps the Gemini key server-side."""
    import uvicorn

    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    uvicorn.run(
        "adreel.api.app:app",
        host=host or settings.server.host,
        port=port or settings.server.port,
        reload=False,
    )


if __name__ == "__main__":
    app()
