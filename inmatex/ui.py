"""
Gradio UI for Inmate Extract.

This module provides a web UI for searching the county inmate site.
"""

import argparse
import html
import json
import sys
from typing import Optional, Tuple

import gradio as gr

from inmatex.api import ScrapeResult, scrape
from inmatex.config import Config, apply_env_overrides, load_config
from inmatex.log import configure_logging, get_logger
from inmatex.model import InputError

logger = get_logger(__name__)

INMATE_FIELDS = [
    ("Name", "name"),
    ("SOID", "soid"),
    ("DOB", "dob"),
    ("Race / Sex", None),
    ("Location", "location"),
    ("Days in Custody", "daysInCustody"),
    ("Arrest Date", "arrestDate"),
    ("Agency", "agencyId"),
    ("Bond Status", "bondStatus"),
    ("Release Date", "releaseDate"),
]


def search_handler(name: str, mode: str = "", config: Optional[Config] = None) -> Tuple[str, str]:
    """
    Handle search requests.

    Args:
        name: Name to search for
        mode: Search mode
        config: Configuration, loaded from the default locations when None

    Returns:
        Tuple of (results_html, raw_json)
    """
    if not name or not name.strip():
        return "Please enter a name to search for.", "{}"

    try:
        if config is None:
            config = apply_env_overrides(load_config())
        result = scrape(name, config, mode or None)
        return generate_results_html(result), json.dumps(result.to_dict(), indent=2)
    except InputError as e:
        return f"Error: {html.escape(str(e))}", "{}"
    except Exception as e:
        logger.exception(f"Error searching for {name}: {e}")
        return f"Error: {html.escape(str(e))}", "{}"


def generate_results_html(result: ScrapeResult) -> str:
    """
    Generate HTML for a search result.

    Args:
        result: Scrape result

    Returns:
        HTML string
    """
    out = f"<h2>Search Results for: {html.escape(result.query)}</h2>"

    if result.error:
        return out + (
            "<div style='color: red; font-weight: bold; margin: 10px 0;'>"
            f"Search failed: {html.escape(result.error)}</div>"
        )

    if not result.found:
        return out + (
            "<div style='color: green; font-weight: bold; margin: 10px 0;'>"
            f"No inmates found for {html.escape(result.query)}.</div>"
        )

    out += "<div style='margin-top: 20px;'>"
    for i, inmate in enumerate(result.inmates, 1):
        out += "<div style='background-color: #ffeeee; padding: 15px; margin-bottom: 15px; border-radius: 5px; border-left: 5px solid red;'>"
        out += f"<h3>Match {i}</h3>"
        for label, key in INMATE_FIELDS:
            if key is None:
                value = f"{inmate.get('race', '')} / {inmate.get('sex', '')}"
            else:
                value = inmate.get(key, "")
            out += f"<p><strong>{label}:</strong> {html.escape(value)}</p>"

        for charge in inmate.get("charges", []):
            out += (
                "<p style='margin-left: 15px;'>"
                f"<strong>Charge:</strong> {html.escape(charge.get('description', ''))} "
                f"({html.escape(charge.get('type', ''))}) "
                f"warrant {html.escape(charge.get('warrant', ''))}, "
                f"bond {html.escape(charge.get('bondAmount', charge.get('bond', '')))}</p>"
            )
        out += "</div>"
    out += "</div>"

    return out


def create_ui(config: Config) -> gr.Blocks:
    """
    Create the Gradio UI.

    Args:
        config: Configuration

    Returns:
        Gradio Blocks interface
    """
    modes = config.site.accepted_modes or [config.site.default_mode]

    with gr.Blocks(title="Inmate Extract - Name Search") as ui:
        gr.Markdown("# Inmate Extract - Name Search")
        gr.Markdown("Search the county inmate site and extract booking records.")

        with gr.Row():
            with gr.Column(scale=3):
                name_input = gr.Textbox(
                    label="Name",
                    placeholder="Enter name (Last First)",
                    info="Enter the name you want to search for",
                )
                mode_input = gr.Dropdown(
                    choices=modes,
                    value=config.site.default_mode,
                    label="Mode",
                    allow_custom_value=not config.site.accepted_modes,
                )
                search_button = gr.Button("Search", variant="primary")

        with gr.Tabs():
            with gr.TabItem("Results"):
                results_output = gr.HTML()
            with gr.TabItem("Raw JSON"):
                json_output = gr.JSON()

        search_button.click(
            fn=lambda name, mode: search_handler(name, mode, config),
            inputs=[name_input, mode_input],
            outputs=[results_output, json_output],
        )

    return ui


def main() -> int:
    """
    Main entry point.

    Returns:
        Exit code
    """
    parser = argparse.ArgumentParser(description="Inmate Extract UI")
    parser.add_argument("--config", help="Path to configuration file")
    parser.add_argument("--port", type=int, default=7860, help="Port to run the UI on")
    parser.add_argument("--share", action="store_true", help="Create a public link")
    parser.add_argument("--log-level", default="INFO", choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"], help="Logging level")

    args = parser.parse_args()

    configure_logging(level=args.log_level)

    try:
        ui = create_ui(apply_env_overrides(load_config(args.config)))
        ui.launch(server_port=args.port, share=args.share)
        return 0
    except Exception as e:
        logger.exception(f"Error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
